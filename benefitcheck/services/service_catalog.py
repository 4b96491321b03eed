"""
Catalog of the benefit services a verifier can request
"""
from typing import Dict, List

from ..models.credential import CredentialType
from ..models.verification import ServiceInfo

SERVICE_CATALOG: Dict[str, ServiceInfo] = {
    "ration_portability": ServiceInfo(
        id="ration_portability",
        name="Ration Portability",
        description="One Nation One Ration Card (ONORC) verification",
        credential_types=[CredentialType.RATION_CARD],
        benefits=[
            "Access to ration benefits in any state",
            "No need for a new ration card",
            "Seamless portability of benefits"
        ]
    ),
    "pds_verification": ServiceInfo(
        id="pds_verification",
        name="PDS Verification",
        description="Public Distribution System verification for ration card portability",
        credential_types=[CredentialType.RATION_CARD],
        benefits=[
            "Access to subsidized food grains",
            "Portability across states under ONORC",
            "Monthly entitlements based on family size"
        ]
    ),
    "health_emergency": ServiceInfo(
        id="health_emergency",
        name="Health Emergency",
        description="Emergency healthcare service verification",
        credential_types=[CredentialType.HEALTH_CARD],
        benefits=[
            "Emergency medical treatment",
            "Up to ₹50,000 coverage",
            "Cashless treatment at empaneled hospitals"
        ]
    ),
    "education_scholarship": ServiceInfo(
        id="education_scholarship",
        name="Education Scholarship",
        description="Educational scholarship and fee reimbursement",
        credential_types=[CredentialType.EDUCATION_CARD],
        benefits=[
            "Tuition fee reimbursement",
            "Book and uniform allowance",
            "Transportation allowance"
        ]
    ),
    "skill_training": ServiceInfo(
        id="skill_training",
        name="Skill Training",
        description="Skill development and training programs",
        credential_types=[CredentialType.SKILL_CERTIFICATE],
        benefits=[
            "Free skill training courses",
            "Certification programs",
            "Job placement assistance"
        ]
    ),
}


def list_services() -> List[ServiceInfo]:
    return list(SERVICE_CATALOG.values())


def get_service_details(service_type: str) -> ServiceInfo:
    """Catalog entry for a service, or a generic entry for unknown services"""
    if service_type in SERVICE_CATALOG:
        return SERVICE_CATALOG[service_type]
    return ServiceInfo(
        id=service_type,
        name=service_type,
        description="Service verification",
        benefits=["Service verification completed"]
    )
