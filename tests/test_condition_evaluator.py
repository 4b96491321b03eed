"""
Unit tests for condition evaluation and path resolution.
"""

from datetime import timedelta

import pytest

from benefitcheck.models import ConditionOperator, Severity
from benefitcheck.services import MISSING, ConditionEvaluator, resolve

from conftest import NOW, FrozenClock, make_credential, make_rule


class TestResolve:
    """Test cases for dotted-path resolution."""

    def test_resolves_nested_subject_attribute(self):
        credential = make_credential()

        assert resolve(credential, "subjectAttributes.ONORC_enabled") is True
        assert resolve(credential, "domainDetails.cardType") == "BPL"
        assert resolve(credential, "documentVerification.verificationStatus") == "verified"

    def test_missing_segment_is_missing(self):
        credential = make_credential(card_type=None)

        assert resolve(credential, "domainDetails.cardType") is MISSING
        assert resolve(credential, "subjectAttributes.unknown") is MISSING
        assert resolve(credential, "subjectAttributes.name.first") is MISSING

    def test_stored_null_is_not_missing(self):
        credential = make_credential(subject_attributes={"middle_name": None})

        assert resolve(credential, "subjectAttributes.middle_name") is None

    def test_resolves_plain_documents(self):
        assert resolve({"a": {"b": [1, 2]}}, "a.b") == [1, 2]


class TestConditionEvaluator:
    """Test cases for the operator set."""

    @pytest.fixture
    def clock(self):
        return FrozenClock()

    @pytest.fixture
    def evaluator(self, clock):
        return ConditionEvaluator(clock)

    def test_equals_is_strict(self, evaluator):
        assert evaluator.evaluate("active", ConditionOperator.EQUALS, "active") is True
        assert evaluator.evaluate(True, ConditionOperator.EQUALS, 1) is False
        assert evaluator.evaluate(1, ConditionOperator.EQUALS, True) is False
        assert evaluator.evaluate("1", ConditionOperator.EQUALS, 1) is False
        assert evaluator.evaluate(MISSING, ConditionOperator.EQUALS, None) is False

    def test_not_equals(self, evaluator):
        assert evaluator.evaluate("BPL", ConditionOperator.NOT_EQUALS, "NPHH") is True
        assert evaluator.evaluate("NPHH", ConditionOperator.NOT_EQUALS, "NPHH") is False
        assert evaluator.evaluate(MISSING, ConditionOperator.NOT_EQUALS, "NPHH") is True

    def test_ordering_operators(self, evaluator):
        assert evaluator.evaluate(18, ConditionOperator.GREATER_THAN, 17) is True
        assert evaluator.evaluate(18, ConditionOperator.GREATER_THAN, 18) is False
        assert evaluator.evaluate(2.5, ConditionOperator.LESS_THAN, 3) is True

    def test_ordering_on_missing_or_mismatched_types_fails(self, evaluator):
        assert evaluator.evaluate(MISSING, ConditionOperator.GREATER_THAN, 1) is False
        assert evaluator.evaluate(None, ConditionOperator.LESS_THAN, 1) is False
        assert evaluator.evaluate("abc", ConditionOperator.GREATER_THAN, 1) is False
        assert evaluator.evaluate(True, ConditionOperator.GREATER_THAN, 0) is False

    def test_ordering_compares_dates(self, evaluator):
        assert evaluator.evaluate(NOW, ConditionOperator.GREATER_THAN, "2025-01-01T00:00:00Z") is True
        assert evaluator.evaluate("2024-12-31", ConditionOperator.LESS_THAN, NOW) is True

    def test_contains(self, evaluator):
        assert evaluator.evaluate("emergency,outpatient", ConditionOperator.CONTAINS, "emergency") is True
        assert evaluator.evaluate(["emergency", "dental"], ConditionOperator.CONTAINS, "dental") is True
        assert evaluator.evaluate(["emergency"], ConditionOperator.CONTAINS, "dental") is False
        assert evaluator.evaluate(MISSING, ConditionOperator.CONTAINS, "x") is False
        assert evaluator.evaluate(42, ConditionOperator.CONTAINS, "4") is False

    def test_exists(self, evaluator):
        assert evaluator.evaluate(0, ConditionOperator.EXISTS, None) is True
        assert evaluator.evaluate("", ConditionOperator.EXISTS, None) is True
        assert evaluator.evaluate(None, ConditionOperator.EXISTS, None) is False
        assert evaluator.evaluate(MISSING, ConditionOperator.EXISTS, None) is False

    def test_in_range_is_inclusive(self, evaluator):
        assert evaluator.evaluate(1, ConditionOperator.IN_RANGE, [1, 10]) is True
        assert evaluator.evaluate(10, ConditionOperator.IN_RANGE, [1, 10]) is True
        assert evaluator.evaluate(11, ConditionOperator.IN_RANGE, [1, 10]) is False
        assert evaluator.evaluate(0, ConditionOperator.IN_RANGE, [1, 10]) is False

    def test_in_range_requires_two_bounds(self, evaluator):
        assert evaluator.evaluate("BPL", ConditionOperator.IN_RANGE, ["APL", "BPL", "AAY"]) is False
        assert evaluator.evaluate(5, ConditionOperator.IN_RANGE, 10) is False
        assert evaluator.evaluate(MISSING, ConditionOperator.IN_RANGE, [1, 10]) is False

    def test_date_valid(self, evaluator):
        recent = (NOW - timedelta(days=29)).isoformat()
        boundary = NOW - timedelta(days=30)
        stale = NOW - timedelta(days=31)

        assert evaluator.evaluate(recent, ConditionOperator.DATE_VALID, 30) is True
        assert evaluator.evaluate(boundary, ConditionOperator.DATE_VALID, 30) is True
        assert evaluator.evaluate(stale, ConditionOperator.DATE_VALID, 30) is False

    def test_date_valid_accepts_epoch_millis(self, evaluator):
        millis = (NOW - timedelta(days=2)).timestamp() * 1000

        assert evaluator.evaluate(millis, ConditionOperator.DATE_VALID, 7) is True

    def test_date_valid_rejects_unparseable_input(self, evaluator):
        assert evaluator.evaluate("not a date", ConditionOperator.DATE_VALID, 30) is False
        assert evaluator.evaluate(MISSING, ConditionOperator.DATE_VALID, 30) is False
        assert evaluator.evaluate(NOW, ConditionOperator.DATE_VALID, "30") is False

    def test_document_verified(self, evaluator):
        assert evaluator.evaluate("verified", ConditionOperator.DOCUMENT_VERIFIED, None) is True
        assert evaluator.evaluate("Verified", ConditionOperator.DOCUMENT_VERIFIED, None) is False
        assert evaluator.evaluate("pending", ConditionOperator.DOCUMENT_VERIFIED, "verified") is False
        assert evaluator.evaluate(MISSING, ConditionOperator.DOCUMENT_VERIFIED, None) is False

    def test_unknown_operator_fails_closed(self, evaluator):
        assert ConditionOperator.parse("regex_match") == ConditionOperator.UNSUPPORTED
        assert evaluator.evaluate("anything", "regex_match", "anything") is False


class TestEvaluateRule:
    """Test cases for evaluating every condition of a rule."""

    @pytest.fixture
    def evaluator(self):
        return ConditionEvaluator(FrozenClock())

    def test_all_conditions_met(self, evaluator):
        rule = make_rule()

        evaluation = evaluator.evaluate_rule(make_credential(), rule)

        assert evaluation.passed is True
        assert evaluation.failures == []
        assert evaluation.description == "All conditions met"

    def test_critical_failure_fails_rule(self, evaluator):
        rule = make_rule()
        credential = make_credential(subject_attributes={"ONORC_enabled": False})

        evaluation = evaluator.evaluate_rule(credential, rule)

        assert evaluation.passed is False
        assert evaluation.description == "Card must be ONORC enabled"

    def test_warning_failure_is_collected_not_fatal(self, evaluator):
        rule = make_rule(conditions=[
            {"field": "domainDetails.familySize", "operator": "in_range", "value": [1, 3],
             "severity": "warning", "description": "Family size must be between 1 and 3 members"},
            {"field": "status", "operator": "equals", "value": "active"},
        ])

        evaluation = evaluator.evaluate_rule(make_credential(family_size=4), rule)

        assert evaluation.passed is True
        assert evaluation.warnings == ["Family size must be between 1 and 3 members"]
        assert rule.conditions[0].severity == Severity.WARNING

    def test_failure_without_description_names_the_condition(self, evaluator):
        rule = make_rule(conditions=[
            {"field": "domainDetails.cardType", "operator": "equals", "value": "AAY"},
        ])

        evaluation = evaluator.evaluate_rule(make_credential(card_type="BPL"), rule)

        assert evaluation.failures == ["domainDetails.cardType equals 'AAY'"]
