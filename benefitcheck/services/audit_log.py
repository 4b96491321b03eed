"""
Append-only verification audit log

The log is the single source of truth for cooldown, monthly-cap and replay
decisions. Entries are never updated or deleted.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from ..errors import ProofTokenReusedError
from ..models.common import ensure_utc
from ..models.credential import CredentialType
from ..models.verification import VerificationLogEntry

logger = logging.getLogger(__name__)


class AuditLogStore(ABC):
    """Storage interface for verification log entries"""

    @abstractmethod
    async def append(self, entry: VerificationLogEntry) -> VerificationLogEntry:
        """Append an entry; raises ProofTokenReusedError on a duplicate proof token"""

    @abstractmethod
    async def last_verification(
        self, subject_id: str, service_type: str, credential_type: CredentialType
    ) -> Optional[datetime]:
        """Timestamp of the most recent entry for the triple"""

    @abstractmethod
    async def count_since(
        self, subject_id: str, service_type: str, credential_type: CredentialType, since: datetime
    ) -> int:
        """Number of entries for the triple with timestamp >= since"""

    @abstractmethod
    async def has_proof_token(self, proof_token: str) -> bool:
        """Whether any entry carries this proof token"""

    @abstractmethod
    async def history(self, subject_id: str, limit: int = 10, offset: int = 0) -> List[VerificationLogEntry]:
        """Entries for a subject, newest first"""


class InMemoryAuditLogStore(AuditLogStore):
    """Audit log held in a list, for tests and local development"""

    def __init__(self):
        self.entries: List[VerificationLogEntry] = []
        self._proof_tokens = set()

    def _matching(self, subject_id: str, service_type: str, credential_type: CredentialType):
        credential_type = CredentialType(credential_type)
        return [
            entry for entry in self.entries
            if entry.subject_id == subject_id
            and entry.service_type == service_type
            and entry.credential_type == credential_type
        ]

    async def append(self, entry: VerificationLogEntry) -> VerificationLogEntry:
        # No await between the check and the insert, so this is atomic on the event loop
        if entry.proof_token:
            if entry.proof_token in self._proof_tokens:
                raise ProofTokenReusedError(entry.proof_token)
            self._proof_tokens.add(entry.proof_token)
        self.entries.append(entry)
        return entry

    async def last_verification(
        self, subject_id: str, service_type: str, credential_type: CredentialType
    ) -> Optional[datetime]:
        timestamps = [entry.timestamp for entry in self._matching(subject_id, service_type, credential_type)]
        return max(timestamps) if timestamps else None

    async def count_since(
        self, subject_id: str, service_type: str, credential_type: CredentialType, since: datetime
    ) -> int:
        since = ensure_utc(since)
        return sum(
            1 for entry in self._matching(subject_id, service_type, credential_type)
            if entry.timestamp >= since
        )

    async def has_proof_token(self, proof_token: str) -> bool:
        return proof_token in self._proof_tokens

    async def history(self, subject_id: str, limit: int = 10, offset: int = 0) -> List[VerificationLogEntry]:
        entries = sorted(
            (entry for entry in self.entries if entry.subject_id == subject_id),
            key=lambda entry: entry.timestamp,
            reverse=True
        )
        return entries[offset:offset + limit]


class MongoAuditLogStore(AuditLogStore):
    """Audit log backed by the ``verification_logs`` collection"""

    def __init__(self, database: AsyncIOMotorDatabase, collection_name: str = "verification_logs"):
        self.collection = database[collection_name]

    async def ensure_indexes(self):
        await self.collection.create_index([("subjectId", ASCENDING), ("timestamp", DESCENDING)])
        await self.collection.create_index(
            [("subjectId", ASCENDING), ("serviceType", ASCENDING),
             ("credentialType", ASCENDING), ("timestamp", DESCENDING)]
        )
        # Uniqueness here is what actually prevents concurrent replays
        await self.collection.create_index(
            [("proofToken", ASCENDING)],
            unique=True,
            partialFilterExpression={"proofToken": {"$type": "string"}}
        )

    @staticmethod
    def _triple(subject_id: str, service_type: str, credential_type: CredentialType) -> dict:
        return {
            "subjectId": subject_id,
            "serviceType": service_type,
            "credentialType": CredentialType(credential_type).value
        }

    async def append(self, entry: VerificationLogEntry) -> VerificationLogEntry:
        document = entry.to_document()
        if not entry.proof_token:
            document.pop("proofToken", None)
        try:
            await self.collection.insert_one(document)
        except DuplicateKeyError:
            logger.warning(f"Rejected duplicate proof token for subject {entry.subject_id}")
            raise ProofTokenReusedError(entry.proof_token)
        return entry

    async def last_verification(
        self, subject_id: str, service_type: str, credential_type: CredentialType
    ) -> Optional[datetime]:
        doc = await self.collection.find_one(
            self._triple(subject_id, service_type, credential_type),
            sort=[("timestamp", DESCENDING)],
            projection={"timestamp": True}
        )
        if doc is None:
            return None
        return ensure_utc(doc["timestamp"])

    async def count_since(
        self, subject_id: str, service_type: str, credential_type: CredentialType, since: datetime
    ) -> int:
        query = self._triple(subject_id, service_type, credential_type)
        query["timestamp"] = {"$gte": ensure_utc(since)}
        return await self.collection.count_documents(query)

    async def has_proof_token(self, proof_token: str) -> bool:
        doc = await self.collection.find_one({"proofToken": proof_token}, projection={"_id": True})
        return doc is not None

    async def history(self, subject_id: str, limit: int = 10, offset: int = 0) -> List[VerificationLogEntry]:
        cursor = (
            self.collection.find({"subjectId": subject_id})
            .sort("timestamp", DESCENDING)
            .skip(offset)
            .limit(limit)
        )
        return [VerificationLogEntry(**doc) async for doc in cursor]
