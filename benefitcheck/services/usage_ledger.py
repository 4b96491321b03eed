"""
Temporal usage policy (cooldown and monthly cap) read from the audit log
"""
import logging
import math
from datetime import datetime, timezone, tzinfo
from typing import Callable, List, Optional, Tuple

from ..models.common import get_current_utc_time
from ..models.credential import CredentialType
from ..models.rule import EligibilityRule
from .audit_log import AuditLogStore

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class UsageLedger:
    """Read-only usage queries over the audit log"""

    def __init__(
        self,
        audit_log: AuditLogStore,
        clock: Callable[[], datetime] = get_current_utc_time,
        tz: Optional[tzinfo] = None
    ):
        self.audit_log = audit_log
        self.clock = clock
        self.tz = tz

    def start_of_month(self) -> datetime:
        """First day of the current month at 00:00 in the ledger's timezone, as UTC"""
        now = self.clock()
        local_now = now.astimezone(self.tz) if self.tz else now.astimezone()
        start = local_now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return start.astimezone(timezone.utc)

    async def last_verification(
        self, subject_id: str, service_type: str, credential_type: CredentialType
    ) -> Optional[datetime]:
        return await self.audit_log.last_verification(subject_id, service_type, credential_type)

    async def count_this_month(
        self, subject_id: str, service_type: str, credential_type: CredentialType
    ) -> int:
        return await self.audit_log.count_since(
            subject_id, service_type, credential_type, self.start_of_month()
        )

    async def check_limits(
        self,
        rules: List[EligibilityRule],
        subject_id: str,
        service_type: str,
        credential_type: CredentialType
    ) -> Tuple[bool, str]:
        """
        Apply cooldown and monthly-cap limits of every active rule

        Any single rule tripping a limit denies the whole request, whatever
        its priority. Cooldowns are checked before caps.

        Returns:
            (allowed, reason)
        """
        cooldown_rules = [rule for rule in rules if rule.cooldown_period_days > 0]
        if cooldown_rules:
            last = await self.last_verification(subject_id, service_type, credential_type)
            if last is not None:
                days_since = (self.clock() - last).total_seconds() / SECONDS_PER_DAY
                for rule in cooldown_rules:
                    if days_since < rule.cooldown_period_days:
                        days_remaining = math.ceil(rule.cooldown_period_days - days_since)
                        return False, (
                            f"Cooldown period not met. Last verification was "
                            f"{math.ceil(days_since)} days ago; {days_remaining} days remaining "
                            f"of the {_format_days(rule.cooldown_period_days)}-day cooldown"
                        )

        capped_rules = [rule for rule in rules if rule.max_usage_per_month > 0]
        if capped_rules:
            used = await self.count_this_month(subject_id, service_type, credential_type)
            for rule in capped_rules:
                if used >= rule.max_usage_per_month:
                    return False, f"Monthly usage limit exceeded ({rule.max_usage_per_month} per month)"

        return True, "Usage limits satisfied"


def _format_days(days: float) -> str:
    return str(int(days)) if float(days).is_integer() else str(days)
