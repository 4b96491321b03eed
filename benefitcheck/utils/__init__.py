"""
Utility functions for the Benefit Eligibility Verification Engine
"""

from .validators import (
    validate_verification_request,
    coerce_datetime
)
from .hashing import (
    generate_hash,
    document_fingerprint,
    compute_document_hash
)

__all__ = [
    "validate_verification_request",
    "coerce_datetime",
    "generate_hash",
    "document_fingerprint",
    "compute_document_hash"
]
