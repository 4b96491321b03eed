"""
Document authenticity checks on the credential's verification sub-record
"""
import hmac
import logging
from datetime import datetime
from typing import Callable

from ..models.common import get_current_utc_time
from ..models.credential import Credential, DocumentVerificationStatus
from ..models.verification import DocumentVerdict
from ..utils.hashing import compute_document_hash

logger = logging.getLogger(__name__)


class DocumentAuthenticityChecker:
    """Derives an advisory genuineness verdict for a credential's document"""

    def __init__(self, clock: Callable[[], datetime] = get_current_utc_time):
        self.clock = clock

    def check(self, credential: Credential) -> DocumentVerdict:
        record = credential.document_verification
        if record is None:
            return DocumentVerdict(
                is_genuine=False,
                verification_status=DocumentVerificationStatus.PENDING.value,
                issues=["Document verification data not found"]
            )

        status = DocumentVerificationStatus(record.verification_status)
        is_genuine = status == DocumentVerificationStatus.VERIFIED
        issues = []
        recommendations = []

        if status == DocumentVerificationStatus.REJECTED:
            issues.append("Document verification was rejected by the issuing authority")
            recommendations.append("Re-verify the document with the issuing authority")
        elif status != DocumentVerificationStatus.VERIFIED:
            issues.append("Document verification is pending")
            recommendations.append("Wait for the issuing authority to complete verification")

        if credential.expires_at < self.clock():
            issues.append(f"Credential expired on {credential.expires_at.date().isoformat()}")
            recommendations.append("Renew the credential with the issuing authority")

        if record.document_hash:
            expected_hash = compute_document_hash(credential)
            if not hmac.compare_digest(record.document_hash.lower().encode(), expected_hash.encode()):
                logger.warning(
                    f"Document hash mismatch for {credential.type.value} "
                    f"document {record.document_number}"
                )
                is_genuine = False
                issues.append("Document hash does not match the credential data; it may have been tampered with")
                recommendations.append("Request a fresh copy of the document from the issuing authority")

        return DocumentVerdict(
            is_genuine=is_genuine,
            verification_status=status.value,
            issues=issues,
            recommendations=recommendations
        )
