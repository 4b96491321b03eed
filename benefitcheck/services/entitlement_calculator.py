"""
Entitlement computation for granted verifications
"""
import logging
from typing import Iterable, Optional

from ..models.credential import Credential
from ..models.rule import EligibilityRule
from ..models.verification import CommodityLine, Entitlement, SubsidyEntitlement

logger = logging.getLogger(__name__)

NO_CARD_TYPE_ENTITLEMENT = "No entitlement for this card type"


class EntitlementCalculator:
    """Turns a passing rule into a flat descriptor or a subsidy allocation"""

    def __init__(self, subsidy_service_types: Optional[Iterable[str]] = None):
        self.subsidy_service_types = frozenset(subsidy_service_types or ())

    def is_subsidy(self, rule: EligibilityRule, service_type: str) -> bool:
        return service_type in self.subsidy_service_types and rule.has_commodity_table

    def calculate(self, rule: EligibilityRule, credential: Credential, service_type: str) -> Entitlement:
        """
        Compute the entitlement for a granted verification

        Args:
            rule: First active rule for the pair (lowest priority value)
            credential: The presented credential
            service_type: Requested service

        Returns:
            The rule's flat descriptor, or a SubsidyEntitlement for subsidy services
        """
        if not self.is_subsidy(rule, service_type):
            return rule.entitlement
        return self.calculate_subsidy(rule, credential)

    def calculate_subsidy(self, rule: EligibilityRule, credential: Credential) -> Entitlement:
        details = credential.domain_details
        card_type = details.card_type if details else None
        table = rule.subsidy_config.card_type_entitlements.get(card_type) if card_type else None
        if table is None:
            logger.info(f"No commodity table for card type {card_type!r} in rule {rule.rule_id}")
            return NO_CARD_TYPE_ENTITLEMENT

        family_size = details.family_size or 1
        lines = {}
        total_value = 0.0
        for item, allocation in table.items():
            adjusted_quantity = allocation.quantity * family_size
            line_total = round(adjusted_quantity * allocation.price, 2)
            lines[item] = CommodityLine(
                quantity=adjusted_quantity,
                unit=allocation.unit,
                price=allocation.price,
                total_price=line_total
            )
            total_value += line_total

        return SubsidyEntitlement(
            card_type=card_type,
            family_size=family_size,
            monthly_entitlements=lines,
            total_monthly_value=round(total_value, 2),
            portability_status=details.portability_status,
            home_region=details.home_region,
            current_region=details.current_region
        )
