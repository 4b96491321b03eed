"""
Services package for the Benefit Eligibility Verification Engine
"""

from .rule_store import RuleStore, InMemoryRuleStore, MongoRuleStore
from .audit_log import AuditLogStore, InMemoryAuditLogStore, MongoAuditLogStore
from .condition_evaluator import ConditionEvaluator, RuleEvaluation, resolve, MISSING
from .document_checker import DocumentAuthenticityChecker
from .entitlement_calculator import EntitlementCalculator
from .usage_ledger import UsageLedger
from .replay_guard import ReplayGuard
from .eligibility_service import EligibilityEngine

__all__ = [
    "RuleStore",
    "InMemoryRuleStore",
    "MongoRuleStore",
    "AuditLogStore",
    "InMemoryAuditLogStore",
    "MongoAuditLogStore",
    "ConditionEvaluator",
    "RuleEvaluation",
    "resolve",
    "MISSING",
    "DocumentAuthenticityChecker",
    "EntitlementCalculator",
    "UsageLedger",
    "ReplayGuard",
    "EligibilityEngine"
]
