"""
Error types raised by the eligibility engine.

Policy denials (no rules, cooldown, monthly cap, failed condition, missing
consent, replayed token) are ordinary results, not exceptions. Exceptions are
reserved for malformed input and for store failures.
"""
from typing import Any, Dict, List, Optional


class BenefitCheckError(Exception):
    """Base exception for the engine."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class InputFault(BenefitCheckError):
    """Request is missing required fields; rejected before any store access."""

    def __init__(self, errors: List[str]):
        super().__init__(
            "INPUT_FAULT",
            f"Invalid verification request: {'; '.join(errors)}",
            {"errors": errors}
        )
        self.errors = errors


class DataFault(BenefitCheckError):
    """A rule-store or audit-log call failed or timed out."""

    def __init__(self, message: str = "Store operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("DATA_FAULT", message, details)


class ProofTokenReusedError(BenefitCheckError):
    """The audit log already holds an entry with this proof token."""

    def __init__(self, proof_token: str):
        super().__init__(
            "PROOF_TOKEN_REUSED",
            "Proof token has already been used",
            {"proof_token": proof_token}
        )
        self.proof_token = proof_token
