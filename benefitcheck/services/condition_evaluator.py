"""
Condition evaluation against dotted paths into a credential
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List

from pydantic import BaseModel

from ..models.common import CamelModel, get_current_utc_time
from ..models.rule import ConditionOperator, EligibilityRule, RuleCondition
from ..utils.validators import coerce_datetime

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class _Missing:
    """Marker for a path that does not exist (distinct from a stored None)"""

    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False


MISSING = _Missing()


def _as_document(credential: Any) -> Any:
    if isinstance(credential, CamelModel):
        return credential.to_document()
    if isinstance(credential, BaseModel):
        return credential.model_dump(by_alias=True)
    return credential


def resolve(credential: Any, path: str) -> Any:
    """
    Walk a dotted path through the credential document

    Args:
        credential: Credential model or its camelCase document
        path: Dotted path such as ``subjectAttributes.ONORC_enabled``

    Returns:
        The value at the path, or MISSING if any segment is absent
    """
    current = _as_document(credential)
    for key in path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return MISSING
        current = current[key]
    return current


@dataclass
class RuleEvaluation:
    """Outcome of running one rule's conditions"""
    passed: bool
    failures: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def description(self) -> str:
        return self.failures[0] if self.failures else "All conditions met"


class ConditionEvaluator:
    """Applies the closed operator set to resolved credential values"""

    def __init__(self, clock: Callable[[], datetime] = get_current_utc_time):
        self.clock = clock
        self.operators: Dict[ConditionOperator, Callable[[Any, Any], bool]] = {
            ConditionOperator.EQUALS: self._equals,
            ConditionOperator.NOT_EQUALS: self._not_equals,
            ConditionOperator.GREATER_THAN: self._greater_than,
            ConditionOperator.LESS_THAN: self._less_than,
            ConditionOperator.CONTAINS: self._contains,
            ConditionOperator.EXISTS: self._exists,
            ConditionOperator.IN_RANGE: self._in_range,
            ConditionOperator.DATE_VALID: self._date_valid,
            ConditionOperator.DOCUMENT_VERIFIED: self._document_verified,
            ConditionOperator.UNSUPPORTED: self._unsupported,
        }

    def evaluate(self, value: Any, operator: ConditionOperator, expected: Any) -> bool:
        """Apply an operator; unknown operators and evaluation errors fail closed"""
        op_func = self.operators.get(ConditionOperator.parse(operator), self._unsupported)
        try:
            return bool(op_func(value, expected))
        except (TypeError, ValueError) as e:
            logger.warning(f"Error evaluating {operator} against {expected!r}: {e}")
            return False

    def evaluate_condition(self, credential: Any, condition: RuleCondition) -> bool:
        value = resolve(credential, condition.field)
        return self.evaluate(value, condition.operator, condition.value)

    def evaluate_rule(self, credential: Any, rule: EligibilityRule) -> RuleEvaluation:
        """
        Run every condition of a rule in order

        Critical failures fail the rule; warning and info failures are only
        collected as warnings.
        """
        document = _as_document(credential)
        evaluation = RuleEvaluation(passed=True)

        for condition in rule.conditions:
            if self.evaluate_condition(document, condition):
                continue
            description = condition.description or f"{condition.field} {condition.operator.value} {condition.value!r}"
            if condition.is_critical:
                evaluation.passed = False
                evaluation.failures.append(description)
            else:
                evaluation.warnings.append(description)

        return evaluation

    # Operator functions
    @staticmethod
    def _strict_equals(a, b) -> bool:
        if a is MISSING or b is MISSING:
            return False
        # booleans never equal numbers
        if isinstance(a, bool) != isinstance(b, bool):
            return False
        if isinstance(a, datetime) or isinstance(b, datetime):
            a_date, b_date = coerce_datetime(a), coerce_datetime(b)
            return a_date is not None and a_date == b_date
        return a == b

    def _equals(self, a, b):
        """Equal operator"""
        return self._strict_equals(a, b)

    def _not_equals(self, a, b):
        """Not equal operator"""
        return not self._strict_equals(a, b)

    @staticmethod
    def _comparable(a, b):
        if a is MISSING or a is None or b is None:
            raise TypeError("value is not comparable")
        if isinstance(a, bool) or isinstance(b, bool):
            raise TypeError("booleans are not ordered")
        if isinstance(a, datetime) or isinstance(b, datetime):
            a, b = coerce_datetime(a), coerce_datetime(b)
            if a is None or b is None:
                raise TypeError("value is not a date")
        return a, b

    def _greater_than(self, a, b):
        """Greater than operator"""
        a, b = self._comparable(a, b)
        return a > b

    def _less_than(self, a, b):
        """Less than operator"""
        a, b = self._comparable(a, b)
        return a < b

    def _contains(self, a, b):
        """Substring or membership operator"""
        if a is MISSING or a is None:
            return False
        if isinstance(a, str):
            return str(b) in a
        if isinstance(a, (list, tuple)):
            return b in a
        return False

    def _exists(self, a, b):
        """Exists operator"""
        return a is not MISSING and a is not None

    def _in_range(self, a, b):
        """Inclusive range operator - b must be [lo, hi]"""
        if a is MISSING or a is None:
            return False
        if not isinstance(b, (list, tuple)) or len(b) != 2:
            return False
        low, high = b
        a, low = self._comparable(a, low)
        a, high = self._comparable(a, high)
        return low <= a <= high

    def _date_valid(self, a, b):
        """Passes when no more than b days have elapsed since the date a"""
        if isinstance(b, bool) or not isinstance(b, (int, float)):
            return False
        parsed = coerce_datetime(a) if a is not MISSING else None
        if parsed is None:
            return False
        elapsed_days = (self.clock() - parsed).total_seconds() / SECONDS_PER_DAY
        return elapsed_days <= b

    def _document_verified(self, a, b):
        """Passes only for the exact status string 'verified'"""
        return isinstance(a, str) and a == "verified"

    def _unsupported(self, a, b):
        return False
