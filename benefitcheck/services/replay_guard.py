"""
At-most-once use of single-use proof tokens
"""
from typing import Optional

from .audit_log import AuditLogStore


class ReplayGuard:
    """
    Pre-check for reused proof tokens.

    This lookup only short-circuits obvious replays. Under concurrent requests
    the authoritative signal is the audit log rejecting a duplicate token on
    append (ProofTokenReusedError).
    """

    def __init__(self, audit_log: AuditLogStore):
        self.audit_log = audit_log

    async def has_been_used(self, proof_token: Optional[str]) -> bool:
        if not proof_token:
            return False
        return await self.audit_log.has_proof_token(proof_token)
