"""
Pydantic models for eligibility rules and their conditions
"""
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import AliasChoices, Field, field_validator

from .common import CamelModel, get_current_utc_time
from .credential import CredentialType

logger = logging.getLogger(__name__)


class ConditionOperator(str, Enum):
    """Closed set of condition operators"""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    CONTAINS = "contains"
    EXISTS = "exists"
    IN_RANGE = "in_range"
    DATE_VALID = "date_valid"
    DOCUMENT_VERIFIED = "document_verified"
    # Catch-all for operators this engine does not know; always evaluates to False
    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, value: Any) -> "ConditionOperator":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown condition operator '{value}', treating as unsupported")
            return cls.UNSUPPORTED


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class RuleCondition(CamelModel):
    """One check against a dotted path into the credential"""
    field: str = Field(..., description="Dotted path into the credential document")
    operator: ConditionOperator
    value: Any = Field(None, description="Expected value")
    severity: Severity = Severity.CRITICAL
    description: str = ""

    @field_validator("operator", mode="before")
    @classmethod
    def parse_operator(cls, v):
        return ConditionOperator.parse(v)

    @property
    def is_critical(self) -> bool:
        return self.severity == Severity.CRITICAL


class CommodityAllocation(CamelModel):
    """Per-person monthly allocation of one commodity"""
    quantity: float = 0
    unit: str = "kg"
    price: float = 0


def _as_ordered_dict(value: Any) -> Any:
    """Normalize a mapping or a list of pairs into one ordered dict.

    Accepts ``{"k": v}``, ``[["k", v], ...]`` and ``[{"key": "k", "value": v}, ...]``.
    """
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (list, tuple)):
        normalized = {}
        for item in value:
            if isinstance(item, Mapping):
                normalized[item["key"]] = item["value"]
            else:
                key, entry = item
                normalized[key] = entry
        return normalized
    return value


class SubsidyConfig(CamelModel):
    """Commodity tables for subsidy-family services"""
    card_type_entitlements: Dict[str, Dict[str, CommodityAllocation]] = Field(default_factory=dict)

    @field_validator("card_type_entitlements", mode="before")
    @classmethod
    def normalize_tables(cls, v):
        tables = _as_ordered_dict(v)
        if isinstance(tables, dict):
            return {card_type: _as_ordered_dict(items) for card_type, items in tables.items()}
        return tables


class EligibilityRule(CamelModel):
    """A named, ordered policy unit for one (serviceType, credentialType) pair"""
    rule_id: Optional[str] = None
    service_type: str
    credential_type: CredentialType
    conditions: List[RuleCondition] = Field(
        default_factory=list,
        validation_alias=AliasChoices("conditions", "rules")
    )
    cooldown_period_days: float = Field(
        0, ge=0,
        validation_alias=AliasChoices("cooldownPeriodDays", "cooldown_period_days", "cooldownPeriod")
    )
    max_usage_per_month: int = Field(-1, description="-1 for unlimited")
    entitlement: str = Field(
        "",
        validation_alias=AliasChoices("entitlement", "entitlementDescriptor")
    )
    subsidy_config: Optional[SubsidyConfig] = Field(
        None,
        validation_alias=AliasChoices("subsidyConfig", "subsidy_config", "pdsConfig")
    )
    description: str = ""
    priority: int = 1
    is_active: bool = True
    version: int = 1
    updated_at: datetime = Field(default_factory=get_current_utc_time)

    @property
    def has_commodity_table(self) -> bool:
        return bool(self.subsidy_config and self.subsidy_config.card_type_entitlements)
