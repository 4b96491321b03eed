"""
Default eligibility rules for the benefit services in the catalog
"""
import logging
from typing import Any, Dict, List

from .models.rule import EligibilityRule
from .services.rule_store import RuleStore

logger = logging.getLogger(__name__)


PDS_CARD_TYPE_ENTITLEMENTS = {
    "APL": {
        "rice": {"quantity": 5, "unit": "kg", "price": 3},
        "wheat": {"quantity": 3, "unit": "kg", "price": 2},
        "sugar": {"quantity": 1, "unit": "kg", "price": 13.5},
        "kerosene": {"quantity": 3, "unit": "liters", "price": 15}
    },
    "BPL": {
        "rice": {"quantity": 35, "unit": "kg", "price": 3},
        "wheat": {"quantity": 35, "unit": "kg", "price": 2},
        "sugar": {"quantity": 1, "unit": "kg", "price": 13.5},
        "kerosene": {"quantity": 3, "unit": "liters", "price": 15}
    },
    "AAY": {
        "rice": {"quantity": 35, "unit": "kg", "price": 3},
        "wheat": {"quantity": 35, "unit": "kg", "price": 2},
        "sugar": {"quantity": 1, "unit": "kg", "price": 13.5},
        "kerosene": {"quantity": 3, "unit": "liters", "price": 15},
        "pulses": {"quantity": 1, "unit": "kg", "price": 20}
    },
    "NPHH": {
        "rice": {"quantity": 0, "unit": "kg", "price": 0},
        "wheat": {"quantity": 0, "unit": "kg", "price": 0},
        "sugar": {"quantity": 0, "unit": "kg", "price": 0},
        "kerosene": {"quantity": 0, "unit": "liters", "price": 0}
    }
}


DEFAULT_RULES: List[Dict[str, Any]] = [
    {
        "ruleId": "ration-portability-onorc",
        "serviceType": "ration_portability",
        "credentialType": "RationCardVC",
        "conditions": [
            {
                "field": "subjectAttributes.ONORC_enabled",
                "operator": "equals",
                "value": True,
                "description": "Card must be ONORC enabled"
            },
            {
                "field": "status",
                "operator": "equals",
                "value": "active",
                "description": "Card must be active"
            }
        ],
        "cooldownPeriodDays": 30,
        "maxUsagePerMonth": 1,
        "entitlement": "5kg/month",
        "description": "Ration card portability under ONORC scheme"
    },
    {
        "ruleId": "health-emergency-coverage",
        "serviceType": "health_emergency",
        "credentialType": "HealthCardVC",
        "conditions": [
            {
                "field": "subjectAttributes.coverage_type",
                "operator": "contains",
                "value": "emergency",
                "description": "Must have emergency coverage"
            },
            {
                "field": "status",
                "operator": "equals",
                "value": "active",
                "description": "Card must be active"
            }
        ],
        "cooldownPeriodDays": 0,
        "maxUsagePerMonth": -1,
        "entitlement": "Up to ₹50,000",
        "description": "Emergency health services coverage"
    },
    {
        "ruleId": "education-scholarship-secondary",
        "serviceType": "education_scholarship",
        "credentialType": "EducationCardVC",
        "conditions": [
            {
                "field": "status",
                "operator": "equals",
                "value": "active",
                "description": "Card must be active"
            },
            {
                "field": "subjectAttributes.education_level",
                "operator": "equals",
                "value": "secondary",
                "description": "Must be secondary education level"
            },
            {
                "field": "subjectAttributes.institution_type",
                "operator": "equals",
                "value": "government",
                "description": "Must be government institution"
            }
        ],
        "cooldownPeriodDays": 365,
        "maxUsagePerMonth": 1,
        "entitlement": "₹10,000/year",
        "description": "Educational scholarship for government schools"
    },
    {
        "ruleId": "skill-training-basic",
        "serviceType": "skill_training",
        "credentialType": "SkillCertVC",
        "conditions": [
            {
                "field": "status",
                "operator": "equals",
                "value": "active",
                "description": "Certificate must be active"
            },
            {
                "field": "subjectAttributes.skill_level",
                "operator": "equals",
                "value": "basic",
                "description": "Must have basic skill level"
            }
        ],
        "cooldownPeriodDays": 180,
        "maxUsagePerMonth": 2,
        "entitlement": "Free skill training program",
        "description": "Skill development training programs"
    },
    {
        "ruleId": "pds-verification-monthly",
        "serviceType": "pds_verification",
        "credentialType": "RationCardVC",
        "conditions": [
            {
                "field": "documentVerification.verificationStatus",
                "operator": "document_verified",
                "value": "verified",
                "description": "Document must be verified by issuing authority"
            },
            {
                "field": "status",
                "operator": "equals",
                "value": "active",
                "description": "Credential must be active"
            },
            {
                "field": "expiresAt",
                "operator": "date_valid",
                "value": 365,
                "description": "Document must not be expired"
            },
            {
                "field": "domainDetails.cardType",
                "operator": "not_equals",
                "value": "NPHH",
                "description": "Card type must be eligible for PDS benefits"
            },
            {
                "field": "domainDetails.portabilityStatus",
                "operator": "equals",
                "value": "enabled",
                "description": "Portability must be enabled for cross-state usage",
                "severity": "warning"
            },
            {
                "field": "domainDetails.familySize",
                "operator": "in_range",
                "value": [1, 10],
                "description": "Family size must be between 1 and 10 members",
                "severity": "warning"
            }
        ],
        "subsidyConfig": {"cardTypeEntitlements": PDS_CARD_TYPE_ENTITLEMENTS},
        "cooldownPeriodDays": 1,
        "maxUsagePerMonth": 30,
        "entitlement": "PDS Monthly Entitlements",
        "description": "PDS verification with document genuineness check and entitlement calculation"
    }
]


def default_rules() -> List[EligibilityRule]:
    return [EligibilityRule(**rule) for rule in DEFAULT_RULES]


async def seed_rules(store: RuleStore) -> List[EligibilityRule]:
    """Upsert the default rules into a rule store"""
    saved = []
    for rule in default_rules():
        saved.append(await store.save_rule(rule))
    logger.info(f"Seeded {len(saved)} eligibility rules")
    return saved
