"""
Pydantic models for verification requests, results and the audit log
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import AliasChoices, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .common import CamelModel, ensure_utc, get_current_utc_time
from .credential import Credential, CredentialType


class Location(CamelModel):
    lat: Optional[float] = Field(None, validation_alias=AliasChoices("lat", "latitude"))
    lng: Optional[float] = Field(None, validation_alias=AliasChoices("lng", "longitude"))
    address: Optional[str] = None


class CommodityLine(CamelModel):
    """One commodity in a computed subsidy allocation"""
    quantity: float
    unit: str
    price: float
    total_price: float


class SubsidyEntitlement(CamelModel):
    """Quantity and price based allocation for subsidy-family services"""
    card_type: str
    family_size: int
    monthly_entitlements: Dict[str, CommodityLine] = Field(default_factory=dict)
    total_monthly_value: float = 0
    portability_status: Optional[str] = None
    home_region: Optional[str] = None
    current_region: Optional[str] = None


Entitlement = Union[SubsidyEntitlement, str]


class DocumentVerdict(CamelModel):
    """Advisory outcome of the document authenticity check"""
    is_genuine: bool
    verification_status: str
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class EvaluationStage(str, Enum):
    """States an evaluation passes through, in order"""
    RECEIVED = "received"
    CONSENT_CHECKED = "consent_checked"
    REPLAY_CHECKED = "replay_checked"
    RULES_LOADED = "rules_loaded"
    USAGE_CHECKED = "usage_checked"
    CONDITIONS_CHECKED = "conditions_checked"
    ENTITLEMENT_COMPUTED = "entitlement_computed"
    LOGGED = "logged"
    RESPONDED = "responded"


class EvaluationResult(CamelModel):
    """Structured decision returned by the engine"""
    eligible: bool
    reason: str
    entitlement: Optional[Entitlement] = None
    document_verification: Optional[DocumentVerdict] = None
    warnings: List[str] = Field(default_factory=list)
    denied_at: Optional[EvaluationStage] = Field(None, description="Stage of a terminal denial")
    fault: bool = Field(False, description="True when a store failure forced the denial")


class VerificationRequest(CamelModel):
    """Request from the verifier-facing boundary"""
    credential: Credential
    service_type: str
    subject_id: str
    verifier_id: str
    consent_given: bool
    location: Optional[Location] = None
    proof_token: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "credential": Credential.model_config["json_schema_extra"]["example"],
                "serviceType": "ration_portability",
                "subjectId": "did:example:citizen-42",
                "verifierId": "fps-shop-0192",
                "consentGiven": True,
                "location": {"lat": 12.9716, "lng": 77.5946, "address": "Bengaluru"},
                "proofToken": "3f0c9a1e..."
            }
        }
    )


class VerificationOutcome(CamelModel):
    eligible: bool
    reason: Optional[str] = None
    entitlement: Optional[Entitlement] = None


class VerificationLogEntry(CamelModel):
    """Immutable audit record of one verification attempt"""
    subject_id: str
    verifier_id: str
    service_type: str
    credential_type: CredentialType
    timestamp: datetime = Field(default_factory=get_current_utc_time)
    result: VerificationOutcome = Field(
        ..., validation_alias=AliasChoices("result", "verificationResult")
    )
    consent_given: bool
    location: Optional[Location] = None
    proof_token: Optional[str] = Field(
        None, validation_alias=AliasChoices("proofToken", "proof_token", "qrHash")
    )
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    @field_validator("timestamp")
    @classmethod
    def normalize_timezone(cls, v):
        return ensure_utc(v)

    @model_validator(mode="after")
    def require_consent(self):
        if not self.consent_given:
            raise ValueError("A verification log entry requires consent")
        return self

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True
    )


class ServiceInfo(CamelModel):
    id: str
    name: str
    description: str
    credential_types: List[CredentialType] = Field(default_factory=list)
    benefits: List[str] = Field(default_factory=list)


class VerificationResponse(CamelModel):
    """Response body of POST /verify-eligibility"""
    success: bool
    eligible: bool
    reason: str
    entitlement: Optional[Entitlement] = None
    document_verification: Optional[DocumentVerdict] = None
    warnings: List[str] = Field(default_factory=list)
    service_details: Optional[ServiceInfo] = None
    timestamp: datetime = Field(default_factory=get_current_utc_time)


class VerificationHistoryResponse(CamelModel):
    success: bool = True
    logs: List[VerificationLogEntry] = Field(default_factory=list)
    total: int = 0
