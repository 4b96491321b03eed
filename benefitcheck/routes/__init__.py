"""
API routes package
"""

from .verification import router as verification_router
from .services import router as services_router

__all__ = ["verification_router", "services_router"]
