# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reminder job actors.

Actors:
    - push_reminder_job: Fee deadline push reminders, daily at 10:00 IST
    - email_reminder_job: Term-end and fee deadline emails, daily at 09:00 IST

Both actors run with max_retries=0. The next daily run picks up any
reminder whose send failed.
"""

import logging
from typing import Any
from uuid import uuid4

import dramatiq

from nodues.core.config import get_settings
from nodues.domains.reminders import (
    EMAIL_POLICY,
    PUSH_POLICY,
    ReminderDispatcher,
    ReminderPolicy,
)
from nodues.infrastructure.background.broker import Priority, Queues, setup_dramatiq
from nodues.infrastructure.background.tasks.base import run_async
from nodues.infrastructure.database import Database, open_repository
from nodues.infrastructure.notifications import (
    EmailChannel,
    MessagingGateway,
    NotificationLedger,
    PushChannel,
    ReminderDedupStore,
)
from nodues.utils.logging import bind_context, clear_context

setup_dramatiq()

logger = logging.getLogger(__name__)


async def execute_reminder_job(policy: ReminderPolicy) -> dict[str, Any]:
    """Run one reminder job with resources scoped to this invocation.

    The engine and the gateway's HTTP clients are created here and
    closed before returning, so nothing outlives the worker's run.

    Args:
        policy: Channel eligibility rules.

    Returns:
        Job report as a dictionary.
    """
    settings = get_settings()
    database = Database.from_settings(settings)
    gateway = MessagingGateway(
        push=PushChannel(settings.firebase),
        email=EmailChannel(settings.sendgrid),
    )

    try:
        dispatcher = ReminderDispatcher(
            repository_factory=lambda: open_repository(database),
            gateway=gateway,
            ledger=NotificationLedger(database.session),
            dedup=ReminderDedupStore(database.session),
            settings=settings,
        )
        report = await dispatcher.run(policy)
        return report.to_dict()
    finally:
        await gateway.aclose()
        await database.dispose()


def _run_job(job_name: str, policy: ReminderPolicy) -> dict[str, Any]:
    bind_context(job=job_name, run_id=str(uuid4()))
    logger.info("%s triggered", job_name)

    try:
        result = run_async(execute_reminder_job(policy))
        logger.info(
            "%s completed: %d sent, %d failed, %d duplicates",
            job_name,
            result["sent"],
            result["failed"],
            result["duplicates"],
        )
        return result
    except Exception as e:
        logger.error("%s failed: %s", job_name, e, exc_info=True)
        raise
    finally:
        clear_context()


@dramatiq.actor(
    queue_name=Queues.REMINDERS,
    max_retries=0,
    time_limit=1800000,  # 30 minutes
    priority=Priority.NORMAL,
)
def push_reminder_job() -> dict[str, Any]:
    """Scheduler job: send fee deadline push reminders.

    Returns:
        Job report with sent, failed and duplicate counts.
    """
    return _run_job("push_reminder_job", PUSH_POLICY)


@dramatiq.actor(
    queue_name=Queues.REMINDERS,
    max_retries=0,
    time_limit=1800000,  # 30 minutes
    priority=Priority.NORMAL,
)
def email_reminder_job() -> dict[str, Any]:
    """Scheduler job: send term-end and fee deadline email reminders.

    Returns:
        Job report with sent, failed and duplicate counts.
    """
    return _run_job("email_reminder_job", EMAIL_POLICY)
