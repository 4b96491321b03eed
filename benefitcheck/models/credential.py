"""
Pydantic models for verifiable credentials presented by a subject
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import AliasChoices, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .common import CamelModel, ensure_utc


class CredentialType(str, Enum):
    """Kinds of credential the engine knows how to evaluate"""
    RATION_CARD = "RationCardVC"
    HEALTH_CARD = "HealthCardVC"
    EDUCATION_CARD = "EducationCardVC"
    SKILL_CERTIFICATE = "SkillCertVC"


class CredentialStatus(str, Enum):
    ACTIVE = "active"
    REVOKED = "revoked"
    EXPIRED = "expired"


class DocumentVerificationStatus(str, Enum):
    VERIFIED = "verified"
    PENDING = "pending"
    REJECTED = "rejected"


class DocumentVerification(CamelModel):
    """Result of the issuing authority's check on the backing document"""
    verification_status: DocumentVerificationStatus = Field(default=DocumentVerificationStatus.PENDING)
    document_hash: Optional[str] = Field(None, description="SHA-256 of the canonical document fields")
    document_type: Optional[str] = Field(None, description="ration_card, aadhaar, pan_card, ...")
    document_number: Optional[str] = None
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    verification_notes: Optional[str] = None


class SubsidyDetails(CamelModel):
    """Service-family details carried by ration cards"""
    card_type: Optional[str] = Field(None, description="APL, BPL, AAY or NPHH")
    family_size: Optional[int] = Field(None, ge=1)
    portability_status: Optional[str] = Field(None, description="enabled or disabled")
    home_region: Optional[str] = Field(
        None, validation_alias=AliasChoices("homeRegion", "home_region", "homeState")
    )
    current_region: Optional[str] = Field(
        None, validation_alias=AliasChoices("currentRegion", "current_region", "currentState")
    )


class Credential(CamelModel):
    """An opaque claim issued by an authority; never mutated by the engine"""
    id: Optional[str] = None
    type: CredentialType
    issued_by: str
    issued_at: datetime
    expires_at: datetime
    status: CredentialStatus = CredentialStatus.ACTIVE
    subject_attributes: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("subjectAttributes", "subject_attributes", "credentialSubject")
    )
    document_verification: Optional[DocumentVerification] = None
    domain_details: Optional[SubsidyDetails] = Field(
        None, validation_alias=AliasChoices("domainDetails", "domain_details", "pdsDetails")
    )
    proof: Optional[Dict[str, Any]] = Field(None, description="Opaque proof block, not inspected")

    @field_validator("issued_at", "expires_at")
    @classmethod
    def normalize_timezone(cls, v):
        return ensure_utc(v)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "type": "RationCardVC",
                "issuedBy": "Food & Civil Supplies Department",
                "issuedAt": "2025-01-10T00:00:00Z",
                "expiresAt": "2027-01-10T00:00:00Z",
                "status": "active",
                "subjectAttributes": {
                    "id": "did:example:citizen-42",
                    "name": "Asha Devi",
                    "ONORC_enabled": True
                },
                "documentVerification": {
                    "verificationStatus": "verified",
                    "documentType": "ration_card",
                    "documentNumber": "KA-RC-001234"
                },
                "domainDetails": {
                    "cardType": "BPL",
                    "familySize": 4,
                    "portabilityStatus": "enabled",
                    "homeRegion": "Bihar",
                    "currentRegion": "Karnataka"
                }
            }
        }
    )
