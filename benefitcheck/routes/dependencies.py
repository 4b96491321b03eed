"""
FastAPI dependencies shared by the routers
"""
from fastapi import HTTPException, Request

from ..services.eligibility_service import EligibilityEngine


def get_engine(request: Request) -> EligibilityEngine:
    """Engine built at startup and stored on the application state"""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Eligibility engine is not initialized")
    return engine
