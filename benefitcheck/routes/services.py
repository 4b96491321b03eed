"""
API routes for the service catalog and configured rules
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..errors import DataFault
from ..models.credential import CredentialType
from ..models.rule import EligibilityRule
from ..models.verification import ServiceInfo
from ..services.eligibility_service import EligibilityEngine
from ..services.service_catalog import list_services
from .dependencies import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["services"])


@router.get("/available-services", response_model=List[ServiceInfo])
async def get_available_services():
    """
    List the benefit services a verifier can request
    """
    return list_services()


@router.get("/services/{service_type}/rules", response_model=List[EligibilityRule])
async def get_service_rules(
    service_type: str,
    credential_type: Optional[CredentialType] = Query(None, description="Filter by credential type"),
    engine: EligibilityEngine = Depends(get_engine)
):
    """
    Active eligibility rules configured for a service, by priority
    """
    try:
        return await engine.configured_rules(service_type, credential_type)
    except DataFault as e:
        logger.error(f"Error fetching rules for {service_type}: {e.message}")
        raise HTTPException(status_code=500, detail="Error fetching eligibility rules")
