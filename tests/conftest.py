"""
Shared fixtures for the benefitcheck test suite.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from benefitcheck.models import (
    Credential,
    CredentialType,
    DocumentVerification,
    EligibilityRule,
    RuleCondition,
    SubsidyDetails,
    VerificationRequest,
)
from benefitcheck.seed_data import PDS_CARD_TYPE_ENTITLEMENTS
from benefitcheck.services import (
    EligibilityEngine,
    InMemoryAuditLogStore,
    InMemoryRuleStore,
)

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: float = 0, **kwargs) -> datetime:
        self.now = self.now + timedelta(days=days, **kwargs)
        return self.now

    def set(self, now: datetime) -> datetime:
        self.now = now
        return now


class FakeCursor:
    """Chainable stand-in for a motor cursor."""

    def __init__(self, docs):
        self.docs = docs
        self.sorted_by = None
        self.skipped = None
        self.limited = None

    def sort(self, *args, **kwargs):
        self.sorted_by = args
        return self

    def skip(self, count):
        self.skipped = count
        return self

    def limit(self, count):
        self.limited = count
        return self

    async def to_list(self, length=None):
        return list(self.docs)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self.docs:
            yield doc


def mock_database(collection):
    database = MagicMock()
    database.__getitem__.return_value = collection
    return database


def make_credential(
    credential_type: CredentialType = CredentialType.RATION_CARD,
    subject_attributes: Optional[Dict[str, Any]] = None,
    verification_status: Optional[str] = "verified",
    document_hash: Optional[str] = None,
    card_type: Optional[str] = "BPL",
    family_size: Optional[int] = 4,
    expires_at: Optional[datetime] = None,
    status: str = "active",
) -> Credential:
    document_verification = None
    if verification_status is not None:
        document_verification = DocumentVerification(
            verification_status=verification_status,
            document_hash=document_hash,
            document_type="ration_card",
            document_number="KA-RC-001234",
        )
    domain_details = None
    if card_type is not None:
        domain_details = SubsidyDetails(
            card_type=card_type,
            family_size=family_size,
            portability_status="enabled",
            home_region="Bihar",
            current_region="Karnataka",
        )
    return Credential(
        type=credential_type,
        issued_by="Food & Civil Supplies Department",
        issued_at=datetime(2025, 1, 10, tzinfo=timezone.utc),
        expires_at=expires_at or datetime(2027, 1, 10, tzinfo=timezone.utc),
        status=status,
        subject_attributes=subject_attributes if subject_attributes is not None else {
            "id": "did:example:citizen-42",
            "name": "Asha Devi",
            "ONORC_enabled": True,
        },
        document_verification=document_verification,
        domain_details=domain_details,
    )


def make_rule(
    service_type: str = "ration_portability",
    conditions: Optional[List[Dict[str, Any]]] = None,
    cooldown_period_days: float = 0,
    max_usage_per_month: int = -1,
    **kwargs,
) -> EligibilityRule:
    if conditions is None:
        conditions = [
            {"field": "subjectAttributes.ONORC_enabled", "operator": "equals",
             "value": True, "description": "Card must be ONORC enabled"},
        ]
    return EligibilityRule(
        service_type=service_type,
        credential_type=kwargs.pop("credential_type", CredentialType.RATION_CARD),
        conditions=[RuleCondition(**condition) for condition in conditions],
        cooldown_period_days=cooldown_period_days,
        max_usage_per_month=max_usage_per_month,
        entitlement=kwargs.pop("entitlement", "5kg/month"),
        **kwargs,
    )


def make_subsidy_rule(**kwargs) -> EligibilityRule:
    return make_rule(
        service_type=kwargs.pop("service_type", "pds_verification"),
        conditions=kwargs.pop("conditions", [
            {"field": "status", "operator": "equals", "value": "active",
             "description": "Credential must be active"},
        ]),
        subsidy_config={"card_type_entitlements": PDS_CARD_TYPE_ENTITLEMENTS},
        entitlement="PDS Monthly Entitlements",
        **kwargs,
    )


def make_request(
    credential: Optional[Credential] = None,
    service_type: str = "ration_portability",
    subject_id: str = "did:example:citizen-42",
    consent_given: bool = True,
    proof_token: Optional[str] = None,
) -> VerificationRequest:
    return VerificationRequest(
        credential=credential or make_credential(),
        service_type=service_type,
        subject_id=subject_id,
        verifier_id="fps-shop-0192",
        consent_given=consent_given,
        proof_token=proof_token,
    )


@pytest.fixture
def clock():
    """Frozen clock at mid-June 2025 UTC."""
    return FrozenClock()


@pytest.fixture
def rule_store():
    return InMemoryRuleStore()


@pytest.fixture
def audit_log():
    return InMemoryAuditLogStore()


@pytest.fixture
def engine(rule_store, audit_log, clock):
    """Engine over in-memory stores with UTC month boundaries."""
    return EligibilityEngine(
        rule_store,
        audit_log,
        clock=clock,
        timezone=timezone.utc,
        store_timeout=1.0,
        subsidy_service_types=["pds_verification", "ration_portability"],
    )
