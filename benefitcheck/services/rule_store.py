"""
Rule storage: active eligibility rules by (serviceType, credentialType)
"""
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from ..models.credential import CredentialType
from ..models.rule import EligibilityRule

logger = logging.getLogger(__name__)


class RuleStore(ABC):
    """Read access to administrator-authored eligibility rules"""

    @abstractmethod
    async def active_rules(self, service_type: str, credential_type: CredentialType) -> List[EligibilityRule]:
        """Active rules for the pair, ascending by priority; empty when none"""

    @abstractmethod
    async def save_rule(self, rule: EligibilityRule) -> EligibilityRule:
        """Insert or replace a rule by rule_id"""

    @abstractmethod
    async def list_rules(self, service_type: Optional[str] = None) -> List[EligibilityRule]:
        """Every stored rule, optionally for one service"""


def _with_rule_id(rule: EligibilityRule) -> EligibilityRule:
    if rule.rule_id:
        return rule
    return rule.model_copy(update={"rule_id": uuid.uuid4().hex})


class InMemoryRuleStore(RuleStore):
    """Rule store backed by a list, for tests and local development"""

    def __init__(self, rules: Optional[Iterable[EligibilityRule]] = None):
        self._rules = {}
        for rule in rules or ():
            rule = _with_rule_id(rule)
            self._rules[rule.rule_id] = rule

    async def active_rules(self, service_type: str, credential_type: CredentialType) -> List[EligibilityRule]:
        matching = [
            rule for rule in self._rules.values()
            if rule.is_active
            and rule.service_type == service_type
            and rule.credential_type == credential_type
        ]
        return sorted(matching, key=lambda rule: rule.priority)

    async def save_rule(self, rule: EligibilityRule) -> EligibilityRule:
        rule = _with_rule_id(rule)
        self._rules[rule.rule_id] = rule
        return rule

    async def list_rules(self, service_type: Optional[str] = None) -> List[EligibilityRule]:
        return [
            rule for rule in self._rules.values()
            if service_type is None or rule.service_type == service_type
        ]


class MongoRuleStore(RuleStore):
    """Rule store backed by the ``eligibility_rules`` collection"""

    def __init__(self, database: AsyncIOMotorDatabase, collection_name: str = "eligibility_rules"):
        self.collection = database[collection_name]

    async def ensure_indexes(self):
        await self.collection.create_index(
            [("serviceType", ASCENDING), ("credentialType", ASCENDING)]
        )
        await self.collection.create_index([("isActive", ASCENDING)])
        await self.collection.create_index([("ruleId", ASCENDING)], unique=True, sparse=True)

    async def active_rules(self, service_type: str, credential_type: CredentialType) -> List[EligibilityRule]:
        cursor = self.collection.find({
            "serviceType": service_type,
            "credentialType": CredentialType(credential_type).value,
            "isActive": True
        }).sort("priority", ASCENDING)
        docs = await cursor.to_list(length=None)
        return [EligibilityRule(**doc) for doc in docs]

    async def save_rule(self, rule: EligibilityRule) -> EligibilityRule:
        rule = _with_rule_id(rule)
        await self.collection.replace_one(
            {"ruleId": rule.rule_id},
            rule.to_document(),
            upsert=True
        )
        logger.info(f"Eligibility rule saved: {rule.rule_id} ({rule.service_type}/{rule.credential_type.value})")
        return rule

    async def list_rules(self, service_type: Optional[str] = None) -> List[EligibilityRule]:
        query = {}
        if service_type:
            query["serviceType"] = service_type
        cursor = self.collection.find(query).sort(
            [("serviceType", ASCENDING), ("priority", ASCENDING)]
        )
        return [EligibilityRule(**doc) async for doc in cursor]
