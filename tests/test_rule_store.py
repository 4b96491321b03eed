"""
Unit tests for the rule stores and rule models.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from benefitcheck.models import ConditionOperator, CredentialType, EligibilityRule
from benefitcheck.seed_data import DEFAULT_RULES, default_rules, seed_rules
from benefitcheck.services import InMemoryRuleStore, MongoRuleStore

from conftest import FakeCursor, make_rule, make_subsidy_rule, mock_database


class TestEligibilityRuleModel:
    """Test cases for rule parsing."""

    def test_legacy_field_names(self):
        rule = EligibilityRule(**{
            "serviceType": "pds_verification",
            "credentialType": "RationCardVC",
            "rules": [{"field": "status", "operator": "equals", "value": "active"}],
            "cooldownPeriod": 1,
            "maxUsagePerMonth": 30,
            "entitlementDescriptor": "PDS Monthly Entitlements",
            "pdsConfig": {"cardTypeEntitlements": {"BPL": {"rice": {"quantity": 35, "unit": "kg", "price": 3}}}},
        })

        assert rule.conditions[0].operator == ConditionOperator.EQUALS
        assert rule.cooldown_period_days == 1
        assert rule.entitlement == "PDS Monthly Entitlements"
        assert rule.has_commodity_table is True

    def test_commodity_table_from_pairs(self):
        rule = make_rule(subsidy_config={"cardTypeEntitlements": [
            ["BPL", [["rice", {"quantity": 35, "price": 3}], ["wheat", {"quantity": 35, "price": 2}]]],
            {"key": "AAY", "value": {"pulses": {"quantity": 1, "price": 20}}},
        ]})

        tables = rule.subsidy_config.card_type_entitlements
        assert list(tables) == ["BPL", "AAY"]
        assert list(tables["BPL"]) == ["rice", "wheat"]
        assert tables["AAY"]["pulses"].price == 20

    def test_unknown_operator_is_unsupported(self):
        rule = make_rule(conditions=[{"field": "status", "operator": "matches_regex", "value": ".*"}])

        assert rule.conditions[0].operator == ConditionOperator.UNSUPPORTED

    def test_negative_cooldown_rejected(self):
        with pytest.raises(ValueError):
            make_rule(cooldown_period_days=-1)

    def test_seed_rules_parse(self):
        rules = default_rules()

        assert len(rules) == len(DEFAULT_RULES)
        pds = next(rule for rule in rules if rule.service_type == "pds_verification")
        assert pds.has_commodity_table
        assert set(pds.subsidy_config.card_type_entitlements) == {"APL", "BPL", "AAY", "NPHH"}
        expiry = next(condition for condition in pds.conditions if condition.field == "expiresAt")
        assert expiry.operator == ConditionOperator.DATE_VALID
        assert expiry.value == 365


class TestInMemoryRuleStore:
    """Test cases for InMemoryRuleStore."""

    @pytest.mark.asyncio
    async def test_active_rules_sorted_by_priority(self):
        store = InMemoryRuleStore([
            make_rule(rule_id="second", priority=2),
            make_rule(rule_id="first", priority=1),
            make_rule(rule_id="inactive", priority=0, is_active=False),
            make_rule(rule_id="other-service", service_type="health_emergency"),
        ])

        rules = await store.active_rules("ration_portability", CredentialType.RATION_CARD)

        assert [rule.rule_id for rule in rules] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_unknown_pair_is_empty(self):
        store = InMemoryRuleStore([make_rule()])

        assert await store.active_rules("ration_portability", CredentialType.HEALTH_CARD) == []

    @pytest.mark.asyncio
    async def test_save_assigns_rule_id(self):
        store = InMemoryRuleStore()

        saved = await store.save_rule(make_rule())

        assert saved.rule_id
        assert await store.list_rules("ration_portability") == [saved]

    @pytest.mark.asyncio
    async def test_seed_rules(self):
        store = InMemoryRuleStore()

        await seed_rules(store)

        assert len(await store.list_rules()) == len(DEFAULT_RULES)
        pds = await store.active_rules("pds_verification", CredentialType.RATION_CARD)
        assert pds[0].rule_id == "pds-verification-monthly"


class TestMongoRuleStore:
    """Test cases for MongoRuleStore against a mocked collection."""

    @pytest.fixture
    def collection(self):
        collection = MagicMock()
        collection.replace_one = AsyncMock()
        collection.create_index = AsyncMock()
        return collection

    @pytest.fixture
    def store(self, collection):
        return MongoRuleStore(mock_database(collection))

    @pytest.mark.asyncio
    async def test_active_rules_query(self, store, collection):
        document = make_subsidy_rule(rule_id="pds").to_document()
        cursor = FakeCursor([{"_id": "abc", **document}])
        collection.find = MagicMock(return_value=cursor)

        rules = await store.active_rules("pds_verification", CredentialType.RATION_CARD)

        assert collection.find.call_args.args[0] == {
            "serviceType": "pds_verification",
            "credentialType": "RationCardVC",
            "isActive": True,
        }
        assert cursor.sorted_by == ("priority", 1)
        assert rules[0].rule_id == "pds"
        assert rules[0].has_commodity_table

    @pytest.mark.asyncio
    async def test_save_rule_upserts_by_rule_id(self, store, collection):
        await store.save_rule(make_rule(rule_id="onorc"))

        query, document = collection.replace_one.call_args.args
        assert query == {"ruleId": "onorc"}
        assert document["serviceType"] == "ration_portability"
        assert document["conditions"][0]["operator"] == "equals"
        assert collection.replace_one.call_args.kwargs == {"upsert": True}
