# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Deadline reminder evaluation.

Walks the active terms and decides which students are due a reminder
today, without sending anything.

Two paths are evaluated per term:

1. Term end: when the term ends in one of the reminder offsets, every
   student of the term's batch who still owes fees is reminded.
2. Fee deadline: for each fee structure with a deadline falling on an
   offset, every student of the structure's department and quota who
   is still liable is reminded.

Day offsets are whole days rounded up, so a deadline 36 hours away is
2 days away. Offsets outside the configured set produce nothing.

Failure scope is the unit of work: a term's term-end path, the fee
structure listing of a term, or a single fee structure. A failed unit
is recorded and the remaining units proceed. Only a failure to list
the active terms aborts the evaluation.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Awaitable, Iterable

from nodues.domains.reminders.policy import DEFAULT_OFFSETS, ReminderKind, ReminderPolicy
from nodues.infrastructure.database.models import (
    PENDING_STATUS,
    AcademicTerm,
    FeeStructure,
)
from nodues.infrastructure.database.repository import FeeRecordsRepository
from nodues.infrastructure.notifications.channels import ChannelType
from nodues.utils.datetime import days_until
from nodues.utils.logging import get_logger

logger = get_logger(__name__)


class ReminderEvaluationError(Exception):
    """Raised when the active terms cannot be listed."""

    pass


@dataclass(frozen=True)
class ReminderCandidate:
    """One reminder that should be sent.

    Attributes:
        channel: Delivery channel.
        kind: Term end or fee deadline.
        subject_id: Term id (term end) or fee structure id (fee deadline).
        term_id: Owning term.
        student_id: Recipient account.
        student_name: Recipient display name.
        recipient: Push token or email address.
        days_remaining: Day offset that triggered the reminder.
        amount: Amount stated in the reminder.
        due_at: Term end date or fee deadline.
        fee_name: Fee structure name, for fee deadline reminders.
    """

    channel: ChannelType
    kind: ReminderKind
    subject_id: str
    term_id: str
    student_id: str
    student_name: str
    recipient: str
    days_remaining: int
    amount: Decimal
    due_at: datetime
    fee_name: str | None = None

    def dedup_key(self, run_date: date) -> str:
        """Key identifying this send for the given run date."""
        return ":".join(
            [
                self.channel.value,
                self.kind.value,
                self.subject_id,
                self.student_id,
                str(self.days_remaining),
                run_date.isoformat(),
            ]
        )


@dataclass
class EvaluationResult:
    """Outcome of one evaluation pass.

    Attributes:
        terms_evaluated: Number of active terms found.
        candidates: Reminders to send.
        failures: Units of work that failed to evaluate.
    """

    terms_evaluated: int = 0
    candidates: list[ReminderCandidate] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)


class DeadlineReminderEvaluator:
    """Selects the students due a deadline reminder.

    Attributes:
        _repository: Read access to terms, fee structures, users, payments.
        _offsets: Day offsets at which reminders fire.
    """

    def __init__(
        self,
        repository: FeeRecordsRepository,
        offsets: Iterable[int] = DEFAULT_OFFSETS,
    ) -> None:
        self._repository = repository
        self._offsets = frozenset(offsets)

    async def evaluate(self, policy: ReminderPolicy, now: datetime) -> EvaluationResult:
        """Evaluate every active term for one channel.

        Args:
            policy: Channel eligibility rules.
            now: Reference time for day offsets.

        Returns:
            Candidates and failed units.

        Raises:
            ReminderEvaluationError: If the active terms cannot be listed.
        """
        try:
            terms = await self._repository.list_active_terms()
        except Exception as e:
            raise ReminderEvaluationError(f"Failed to list active terms: {e}") from e

        result = EvaluationResult(terms_evaluated=len(terms))
        logger.info("evaluating_terms", channel=policy.name, terms=len(terms))

        for term in terms:
            if policy.include_term_end:
                await self._run_unit(
                    result,
                    f"term_end:{term.id}",
                    self._term_end_candidates(policy, term, now),
                )

            try:
                fee_structures = await self._repository.list_fee_structures(term.id)
            except Exception as e:
                self._record_failure(result, f"fee_structures:{term.id}", e)
                continue

            for fee in fee_structures:
                await self._run_unit(
                    result,
                    f"fee_structure:{fee.id}",
                    self._fee_deadline_candidates(policy, term, fee, now),
                )

        return result

    async def _run_unit(
        self,
        result: EvaluationResult,
        unit: str,
        work: Awaitable[list[ReminderCandidate]],
    ) -> None:
        try:
            result.candidates.extend(await work)
        except Exception as e:
            self._record_failure(result, unit, e)

    @staticmethod
    def _record_failure(result: EvaluationResult, unit: str, error: Exception) -> None:
        logger.error("reminder_unit_failed", unit=unit, error=str(error), exc_info=True)
        result.failures.append(unit)

    async def _term_end_candidates(
        self,
        policy: ReminderPolicy,
        term: AcademicTerm,
        now: datetime,
    ) -> list[ReminderCandidate]:
        days = days_until(term.end_date, now)
        if days not in self._offsets:
            return []

        logger.info(
            "term_end_reminder_due",
            term_id=term.id,
            batch=term.academic_year,
            days=days,
        )

        candidates = []
        for student in await self._repository.list_batch_students(term.academic_year):
            outstanding = student.outstanding_fee
            if outstanding <= 0:
                continue

            recipient = policy.recipient_of(student)
            if not recipient:
                continue

            candidates.append(
                ReminderCandidate(
                    channel=policy.channel,
                    kind=ReminderKind.TERM_END,
                    subject_id=term.id,
                    term_id=term.id,
                    student_id=student.id,
                    student_name=student.name,
                    recipient=recipient,
                    days_remaining=days,
                    amount=outstanding,
                    due_at=term.end_date,
                )
            )
        return candidates

    async def _fee_deadline_candidates(
        self,
        policy: ReminderPolicy,
        term: AcademicTerm,
        fee: FeeStructure,
        now: datetime,
    ) -> list[ReminderCandidate]:
        if fee.deadline is None:
            return []

        days = days_until(fee.deadline, now)
        if days not in self._offsets:
            return []

        logger.info(
            "fee_deadline_reminder_due",
            fee_structure_id=fee.id,
            dept=fee.dept,
            quota_category=fee.quota_category,
            days=days,
        )

        students = await self._repository.list_segment_students(
            fee.dept,
            fee.quota_category,
            status=PENDING_STATUS if policy.require_pending_status else None,
        )

        verified: set[str] = set()
        if policy.exclude_verified_payments and students:
            verified = await self._repository.verified_student_ids(term.id)

        candidates = []
        for student in students:
            recipient = policy.recipient_of(student)
            if not recipient:
                logger.debug(
                    "reminder_recipient_missing",
                    student_id=student.id,
                    channel=policy.name,
                )
                continue

            if student.id in verified:
                continue

            amount = fee.amount
            if policy.charge_outstanding:
                amount = fee.amount - (student.paid_fee or Decimal("0"))
                if amount <= 0:
                    continue

            candidates.append(
                ReminderCandidate(
                    channel=policy.channel,
                    kind=ReminderKind.FEE_DEADLINE,
                    subject_id=fee.id,
                    term_id=term.id,
                    student_id=student.id,
                    student_name=student.name,
                    recipient=recipient,
                    days_remaining=days,
                    amount=amount,
                    due_at=fee.deadline,
                    fee_name=fee.fee_name,
                )
            )
        return candidates
