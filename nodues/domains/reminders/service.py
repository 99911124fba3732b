# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reminder job driver.

Runs one reminder job for one channel: evaluates the active terms,
then fans the resulting reminders out to the messaging gateway with
bounded concurrency.

Each send is guarded by a dedup claim keyed by channel, kind, subject,
student, offset and run date, so a job that fires twice on the same
day sends every reminder once. A claim is released when its send
fails so a later run may try again.

Example:
    >>> dispatcher = ReminderDispatcher(
    ...     repository_factory=lambda: open_repository(database),
    ...     gateway=gateway,
    ...     ledger=NotificationLedger(database.session),
    ...     dedup=ReminderDedupStore(database.session),
    ...     settings=settings,
    ... )
    >>> report = await dispatcher.run(PUSH_POLICY)
"""

import asyncio
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable

from nodues.core.config.settings import Settings
from nodues.domains.delivery import OutboundMessage, deliver
from nodues.domains.reminders.evaluator import (
    DeadlineReminderEvaluator,
    ReminderCandidate,
)
from nodues.domains.reminders.messages import build_email_reminder, build_push_reminder
from nodues.domains.reminders.policy import ReminderPolicy
from nodues.infrastructure.database.repository import FeeRecordsRepository
from nodues.infrastructure.notifications import (
    ChannelType,
    MessagingGateway,
    NotificationLedger,
    ReminderDedupStore,
)
from nodues.utils.datetime import local_date, utc_now
from nodues.utils.logging import get_logger

logger = get_logger(__name__)

RepositoryFactory = Callable[[], AbstractAsyncContextManager[FeeRecordsRepository]]


class DispatchOutcome(str, Enum):
    """Result of dispatching one reminder."""

    SENT = "sent"
    FAILED = "failed"
    DUPLICATE = "duplicate"


@dataclass
class ReminderJobReport:
    """Summary of one reminder job run."""

    channel: str
    run_date: date
    terms_evaluated: int = 0
    candidates: int = 0
    sent: int = 0
    failed: int = 0
    duplicates: int = 0
    failed_units: list[str] = field(default_factory=list)

    def record(self, outcome: DispatchOutcome) -> None:
        if outcome == DispatchOutcome.SENT:
            self.sent += 1
        elif outcome == DispatchOutcome.DUPLICATE:
            self.duplicates += 1
        else:
            self.failed += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel": self.channel,
            "run_date": self.run_date.isoformat(),
            "terms_evaluated": self.terms_evaluated,
            "candidates": self.candidates,
            "sent": self.sent,
            "failed": self.failed,
            "duplicates": self.duplicates,
            "failed_units": list(self.failed_units),
        }


class ReminderDispatcher:
    """Evaluates and sends deadline reminders for one channel per run.

    Attributes:
        _repository_factory: Opens a repository for the evaluation reads.
        _gateway: Messaging gateway.
        _ledger: Notification ledger.
        _dedup: Dedup claim store.
        _settings: Application settings.
    """

    def __init__(
        self,
        repository_factory: RepositoryFactory,
        gateway: MessagingGateway,
        ledger: NotificationLedger,
        dedup: ReminderDedupStore,
        settings: Settings,
    ) -> None:
        self._repository_factory = repository_factory
        self._gateway = gateway
        self._ledger = ledger
        self._dedup = dedup
        self._settings = settings

    async def run(
        self,
        policy: ReminderPolicy,
        now: datetime | None = None,
    ) -> ReminderJobReport:
        """Run one reminder job.

        Args:
            policy: Channel eligibility rules.
            now: Reference time, defaults to the current time.

        Returns:
            Counts of what was evaluated and sent.

        Raises:
            ReminderEvaluationError: If the active terms cannot be listed.
        """
        reminders = self._settings.reminders
        now = now or utc_now()
        run_date = local_date(now, reminders.timezone)

        async with self._repository_factory() as repository:
            evaluator = DeadlineReminderEvaluator(repository, reminders.offsets)
            evaluation = await evaluator.evaluate(policy, now)

        report = ReminderJobReport(
            channel=policy.name,
            run_date=run_date,
            terms_evaluated=evaluation.terms_evaluated,
            candidates=len(evaluation.candidates),
            failed_units=list(evaluation.failures),
        )

        semaphore = asyncio.Semaphore(reminders.max_concurrency)

        async def worker(candidate: ReminderCandidate) -> None:
            async with semaphore:
                report.record(await self._dispatch(candidate, run_date))

        await asyncio.gather(*(worker(candidate) for candidate in evaluation.candidates))

        logger.info("reminder_job_completed", **report.to_dict())
        return report

    async def _dispatch(self, candidate: ReminderCandidate, run_date: date) -> DispatchOutcome:
        key = candidate.dedup_key(run_date)
        dedup_enabled = self._settings.reminders.dedup_enabled

        if dedup_enabled:
            try:
                claimed = await self._dedup.claim(key)
            except Exception as e:
                logger.error("dedup_claim_failed", dedup_key=key, error=str(e))
                return DispatchOutcome.FAILED
            if not claimed:
                logger.info("reminder_already_sent", dedup_key=key)
                return DispatchOutcome.DUPLICATE

        try:
            message_id = await deliver(
                self._gateway,
                self._ledger,
                candidate.channel,
                candidate.student_id,
                candidate.recipient,
                self._build_message(candidate),
            )
        except Exception as e:
            logger.error(
                "reminder_send_error",
                student_id=candidate.student_id,
                error=str(e),
                exc_info=True,
            )
            message_id = None

        if message_id is None:
            if dedup_enabled:
                await self._release(key)
            return DispatchOutcome.FAILED

        logger.info(
            "reminder_sent",
            student_id=candidate.student_id,
            kind=candidate.kind.value,
            days=candidate.days_remaining,
            message_id=message_id,
        )
        return DispatchOutcome.SENT

    def _build_message(self, candidate: ReminderCandidate) -> OutboundMessage:
        if candidate.channel == ChannelType.PUSH:
            return build_push_reminder(candidate)
        return build_email_reminder(
            candidate,
            self._settings.reminders.timezone,
            self._settings.portal_url,
        )

    async def _release(self, key: str) -> None:
        try:
            await self._dedup.release(key)
        except Exception as e:
            logger.error("dedup_release_failed", dedup_key=key, error=str(e))
