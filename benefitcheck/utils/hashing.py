"""
SHA-256 helpers for document fingerprints and single-use proof tokens
"""
import hashlib
import json
import secrets
import time
from datetime import datetime
from typing import Any, Dict, Optional

from ..models.common import ensure_utc


def generate_hash(data: Dict[str, Any]) -> str:
    """Generate a SHA-256 hash of a dictionary (deterministic, sorted keys)."""
    canonical = json.dumps(data, sort_keys=True, default=str, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(canonical).hexdigest()


def document_fingerprint(
    document_number: Optional[str],
    issued_at: datetime,
    subject_attributes: Dict[str, Any]
) -> str:
    """Hash of the canonical subset of credential fields that a document hash covers"""
    return generate_hash({
        "documentNumber": document_number,
        "issuedAt": ensure_utc(issued_at).isoformat(),
        "subjectAttributes": subject_attributes,
    })


def compute_document_hash(credential) -> str:
    """Expected ``documentHash`` for a credential"""
    document_number = None
    if credential.document_verification is not None:
        document_number = credential.document_verification.document_number
    return document_fingerprint(document_number, credential.issued_at, credential.subject_attributes)


def generate_proof_token(credential_type: str, timestamp: Optional[float] = None) -> str:
    """One-time proof token for a scannable credential presentation

    Tokens are minted by issuers or wallet apps, not by this service; no route
    issues them. Verifiers pass them back as ``proofToken``.
    """
    return generate_hash({
        "type": credential_type,
        "timestamp": timestamp if timestamp is not None else time.time(),
        "nonce": secrets.token_hex(16),
    })
