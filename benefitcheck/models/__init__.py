"""
Models package for the Benefit Eligibility Verification Engine
"""

from .credential import (
    Credential,
    CredentialType,
    CredentialStatus,
    DocumentVerification,
    DocumentVerificationStatus,
    SubsidyDetails
)

from .rule import (
    EligibilityRule,
    RuleCondition,
    ConditionOperator,
    Severity,
    CommodityAllocation,
    SubsidyConfig
)

from .verification import (
    Location,
    CommodityLine,
    SubsidyEntitlement,
    Entitlement,
    DocumentVerdict,
    EvaluationStage,
    EvaluationResult,
    VerificationRequest,
    VerificationOutcome,
    VerificationLogEntry,
    ServiceInfo,
    VerificationResponse,
    VerificationHistoryResponse
)

__all__ = [
    # Credential models
    "Credential",
    "CredentialType",
    "CredentialStatus",
    "DocumentVerification",
    "DocumentVerificationStatus",
    "SubsidyDetails",

    # Rule models
    "EligibilityRule",
    "RuleCondition",
    "ConditionOperator",
    "Severity",
    "CommodityAllocation",
    "SubsidyConfig",

    # Verification models
    "Location",
    "CommodityLine",
    "SubsidyEntitlement",
    "Entitlement",
    "DocumentVerdict",
    "EvaluationStage",
    "EvaluationResult",
    "VerificationRequest",
    "VerificationOutcome",
    "VerificationLogEntry",
    "ServiceInfo",
    "VerificationResponse",
    "VerificationHistoryResponse"
]
