"""
API routes for credential verification
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from ..config import settings
from ..errors import DataFault, InputFault
from ..models.verification import (
    EvaluationResult,
    EvaluationStage,
    VerificationHistoryResponse,
    VerificationRequest,
    VerificationResponse
)
from ..services.eligibility_service import EligibilityEngine
from ..services.service_catalog import get_service_details
from .dependencies import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


def _status_code_for(result: EvaluationResult) -> int:
    if result.denied_at == EvaluationStage.CONSENT_CHECKED:
        return 403
    if result.denied_at == EvaluationStage.REPLAY_CHECKED:
        return 400
    return 200


@router.post("/verify-eligibility", response_model=VerificationResponse)
async def verify_eligibility(
    payload: VerificationRequest,
    request: Request,
    engine: EligibilityEngine = Depends(get_engine)
):
    """
    Decide whether the presented credential qualifies for the requested service
    """
    try:
        result = await engine.evaluate(
            payload,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent")
        )
    except InputFault as e:
        raise HTTPException(status_code=400, detail=e.message)

    status_code = _status_code_for(result)
    response = VerificationResponse(
        success=status_code == 200 and not result.fault,
        eligible=result.eligible,
        reason=result.reason,
        entitlement=result.entitlement,
        document_verification=result.document_verification,
        warnings=result.warnings,
        service_details=get_service_details(payload.service_type)
    )
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(by_alias=True, mode="json")
    )


@router.get("/verification-history/{subject_id}", response_model=VerificationHistoryResponse)
async def get_verification_history(
    subject_id: str,
    limit: Optional[int] = Query(None, ge=1, le=100, description="Maximum number of entries to return"),
    offset: int = Query(0, ge=0, description="Number of entries to skip"),
    engine: EligibilityEngine = Depends(get_engine)
):
    """
    Verification history for a subject, newest first
    """
    try:
        logs = await engine.history(subject_id, limit or settings.history_page_limit, offset)
    except DataFault as e:
        logger.error(f"Error fetching verification history for {subject_id}: {e.message}")
        raise HTTPException(status_code=500, detail="Error fetching verification history")

    return VerificationHistoryResponse(logs=logs, total=len(logs))
