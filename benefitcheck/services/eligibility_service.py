"""
Eligibility service: the single decision entry point for a verification
"""
import asyncio
import logging
from datetime import datetime, tzinfo
from typing import Awaitable, Callable, Iterable, List, Optional, TypeVar

from ..config import Settings, settings as default_settings
from ..errors import DataFault, InputFault, ProofTokenReusedError
from ..models.common import get_current_utc_time
from ..models.credential import CredentialType
from ..models.rule import EligibilityRule
from ..models.verification import (
    DocumentVerdict,
    EvaluationResult,
    EvaluationStage,
    VerificationLogEntry,
    VerificationOutcome,
    VerificationRequest
)
from ..utils.validators import validate_verification_request
from .audit_log import AuditLogStore
from .condition_evaluator import ConditionEvaluator
from .document_checker import DocumentAuthenticityChecker
from .entitlement_calculator import EntitlementCalculator
from .replay_guard import ReplayGuard
from .rule_store import RuleStore
from .usage_ledger import UsageLedger

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONSENT_DENIED_REASON = "Consent not given for credential verification"
TOKEN_REUSED_REASON = "Proof token has already been used"
NO_RULES_REASON = "No eligibility rules found for this service and credential type"
GRANTED_REASON = "All eligibility criteria met"
ERROR_REASON = "Error evaluating eligibility"


class EligibilityEngine:
    """
    Composes rule lookup, replay guard, usage limits, document checks,
    condition evaluation and entitlement computation into one decision.

    Stages run in order: received, consent checked, replay checked, rules
    loaded, usage checked, conditions checked, entitlement computed, logged,
    responded. Consent and replay denials are returned without touching the
    audit log; every other outcome is appended exactly once. Store failures
    and timeouts become a generic denial and are never retried.
    """

    def __init__(
        self,
        rule_store: RuleStore,
        audit_log: AuditLogStore,
        *,
        clock: Callable[[], datetime] = get_current_utc_time,
        timezone: Optional[tzinfo] = None,
        store_timeout: float = 3.0,
        subsidy_service_types: Optional[Iterable[str]] = None
    ):
        self.rule_store = rule_store
        self.audit_log = audit_log
        self.clock = clock
        self.store_timeout = store_timeout
        self.evaluator = ConditionEvaluator(clock)
        self.ledger = UsageLedger(audit_log, clock, timezone)
        self.document_checker = DocumentAuthenticityChecker(clock)
        self.calculator = EntitlementCalculator(subsidy_service_types)
        self.replay_guard = ReplayGuard(audit_log)

    @classmethod
    def from_settings(
        cls,
        rule_store: RuleStore,
        audit_log: AuditLogStore,
        config: Settings = default_settings
    ) -> "EligibilityEngine":
        return cls(
            rule_store,
            audit_log,
            timezone=config.get_ledger_timezone(),
            store_timeout=config.store_timeout_seconds,
            subsidy_service_types=config.get_subsidy_service_types()
        )

    async def _bounded(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Run one store round-trip under the store timeout"""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.store_timeout)
        except ProofTokenReusedError:
            raise
        except asyncio.TimeoutError as e:
            raise DataFault(f"{operation} timed out after {self.store_timeout}s") from e
        except Exception as e:
            raise DataFault(f"{operation} failed: {e}") from e

    async def is_token_used(self, proof_token: Optional[str]) -> bool:
        return await self._bounded("proof token lookup", self.replay_guard.has_been_used(proof_token))

    async def record_log(self, entry: VerificationLogEntry) -> VerificationLogEntry:
        return await self._bounded("audit log append", self.audit_log.append(entry))

    async def history(self, subject_id: str, limit: int = 10, offset: int = 0) -> List[VerificationLogEntry]:
        return await self._bounded("history lookup", self.audit_log.history(subject_id, limit, offset))

    async def configured_rules(self, service_type: str, credential_type: Optional[CredentialType] = None) -> List[EligibilityRule]:
        if credential_type is not None:
            return await self._bounded("rule lookup", self.rule_store.active_rules(service_type, credential_type))
        rules = await self._bounded("rule lookup", self.rule_store.list_rules(service_type))
        return sorted((rule for rule in rules if rule.is_active), key=lambda rule: rule.priority)

    async def evaluate(
        self,
        request: VerificationRequest,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> EvaluationResult:
        """
        Decide eligibility for one verification request

        Args:
            request: Credential, service and subject details from the verifier
            ip_address: Caller address recorded in the audit log
            user_agent: Caller user agent recorded in the audit log

        Returns:
            EvaluationResult with the decision, entitlement and advisory checks

        Raises:
            InputFault: required request fields are blank
        """
        errors = validate_verification_request(request)
        if errors:
            raise InputFault(errors)

        stage = EvaluationStage.RECEIVED
        credential = request.credential
        credential_type = credential.type
        try:
            stage = EvaluationStage.CONSENT_CHECKED
            if not request.consent_given:
                logger.info(f"Verification for {request.subject_id} denied: consent not given")
                return self._denial(stage, CONSENT_DENIED_REASON)

            stage = EvaluationStage.REPLAY_CHECKED
            if request.proof_token and await self.is_token_used(request.proof_token):
                logger.info(f"Verification for {request.subject_id} denied: proof token reused")
                return self._denial(stage, TOKEN_REUSED_REASON)

            stage = EvaluationStage.RULES_LOADED
            rules = await self._bounded(
                "rule lookup",
                self.rule_store.active_rules(request.service_type, credential_type)
            )
            if not rules:
                return await self._finish(request, self._denial(stage, NO_RULES_REASON), ip_address, user_agent)

            stage = EvaluationStage.USAGE_CHECKED
            allowed, reason = await self._bounded(
                "usage lookup",
                self.ledger.check_limits(rules, request.subject_id, request.service_type, credential_type)
            )
            if not allowed:
                return await self._finish(request, self._denial(stage, reason), ip_address, user_agent)

            stage = EvaluationStage.CONDITIONS_CHECKED
            verdict = self.document_checker.check(credential)
            warnings = []
            for rule in rules:
                evaluation = self.evaluator.evaluate_rule(credential, rule)
                warnings.extend(evaluation.warnings)
                if not evaluation.passed:
                    result = self._denial(
                        stage,
                        f"Failed rule: {evaluation.description}",
                        document_verification=verdict,
                        warnings=warnings
                    )
                    return await self._finish(request, result, ip_address, user_agent)

            stage = EvaluationStage.ENTITLEMENT_COMPUTED
            entitlement = self.calculator.calculate(rules[0], credential, request.service_type)
            result = EvaluationResult(
                eligible=True,
                reason=GRANTED_REASON,
                entitlement=entitlement,
                document_verification=verdict,
                warnings=warnings
            )
            return await self._finish(request, result, ip_address, user_agent)

        except ProofTokenReusedError:
            logger.info(f"Verification for {request.subject_id} denied: proof token reused concurrently")
            return self._denial(EvaluationStage.REPLAY_CHECKED, TOKEN_REUSED_REASON)
        except DataFault as e:
            logger.error(
                f"Error evaluating eligibility for {request.subject_id} "
                f"({request.service_type}) at stage {stage.value}: {e.message}",
                exc_info=True
            )
            return EvaluationResult(eligible=False, reason=ERROR_REASON, denied_at=stage, fault=True)

    async def _finish(
        self,
        request: VerificationRequest,
        result: EvaluationResult,
        ip_address: Optional[str],
        user_agent: Optional[str]
    ) -> EvaluationResult:
        """Append the audit entry for a rule-driven outcome and return the result"""
        entry = VerificationLogEntry(
            subject_id=request.subject_id,
            verifier_id=request.verifier_id,
            service_type=request.service_type,
            credential_type=request.credential.type,
            timestamp=self.clock(),
            result=VerificationOutcome(
                eligible=result.eligible,
                reason=result.reason,
                entitlement=result.entitlement
            ),
            consent_given=request.consent_given,
            location=request.location,
            proof_token=request.proof_token,
            ip_address=ip_address,
            user_agent=user_agent
        )
        await self.record_log(entry)

        if result.eligible:
            logger.info(f"Verification for {request.subject_id} granted: {request.service_type}")
        else:
            logger.info(f"Verification for {request.subject_id} denied: {result.reason}")
        return result

    @staticmethod
    def _denial(
        stage: EvaluationStage,
        reason: str,
        document_verification: Optional[DocumentVerdict] = None,
        warnings: Optional[list] = None
    ) -> EvaluationResult:
        return EvaluationResult(
            eligible=False,
            reason=reason,
            document_verification=document_verification,
            warnings=warnings or [],
            denied_at=stage
        )
