# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Scheduler for the daily reminder jobs.

Uses APScheduler cron triggers to enqueue Dramatiq actors. Jobs never
run more than one instance at a time and missed fires are coalesced
into one.

Example:
    from nodues.infrastructure.background.scheduler import get_scheduler

    scheduler = get_scheduler()
    await scheduler.start()

    scheduler.add_cron_task(
        name="Email Reminders",
        actor_name="email_reminder_job",
        cron_expression="0 9 * * *",
        timezone="Asia/Kolkata",
    )
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable
from uuid import uuid4

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from nodues.core.config.settings import Settings
from nodues.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTask:
    """Configuration for a scheduled Dramatiq task.

    Attributes:
        id: Unique task identifier.
        name: Human-readable task name.
        actor_name: Name of the Dramatiq actor to call.
        cron_expression: Five-field cron expression.
        timezone: Timezone the cron expression is evaluated in.
        enabled: Whether the task is enabled.
        last_run: Last time the actor was enqueued.
        run_count: Total number of runs.
        error_count: Number of failed enqueues.
    """

    name: str
    actor_name: str
    cron_expression: str
    timezone: str = "UTC"
    id: str = field(default_factory=lambda: str(uuid4()))
    enabled: bool = True
    last_run: datetime | None = None
    run_count: int = 0
    error_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "actor_name": self.actor_name,
            "cron_expression": self.cron_expression,
            "timezone": self.timezone,
            "enabled": self.enabled,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "run_count": self.run_count,
            "error_count": self.error_count,
        }


def build_cron_trigger(cron_expression: str, timezone: str) -> CronTrigger:
    """Build a cron trigger from a five-field expression.

    Args:
        cron_expression: "minute hour day month weekday".
        timezone: IANA timezone name.

    Returns:
        CronTrigger evaluated in the timezone.

    Raises:
        ValueError: If the expression does not have five fields.
    """
    parts = cron_expression.split()
    if len(parts) != 5:
        raise ValueError(f"Invalid cron expression: {cron_expression}")

    return CronTrigger(
        minute=parts[0],
        hour=parts[1],
        day=parts[2],
        month=parts[3],
        day_of_week=parts[4],
        timezone=timezone,
    )


class DramatiqScheduler:
    """Enqueues Dramatiq actors on cron schedules.

    Attributes:
        _scheduler: APScheduler instance.
        _tasks: Dictionary of scheduled tasks.
        _running: Whether scheduler is running.
    """

    def __init__(self) -> None:
        """Initialize the scheduler."""
        self._scheduler: AsyncIOScheduler | None = None
        self._tasks: dict[str, ScheduledTask] = {}
        self._running = False

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._running

    def _get_actor(self, actor_name: str) -> Callable[..., Any] | None:
        from nodues.infrastructure.background import tasks

        return getattr(tasks, actor_name, None)

    def add_cron_task(
        self,
        name: str,
        actor_name: str,
        cron_expression: str,
        timezone: str = "UTC",
        enabled: bool = True,
    ) -> ScheduledTask:
        """Add a cron-scheduled task.

        Args:
            name: Task name.
            actor_name: Dramatiq actor to call.
            cron_expression: Cron expression (minute hour day month weekday).
            timezone: Timezone of the cron expression.
            enabled: Whether task is enabled.

        Returns:
            Created ScheduledTask.

        Raises:
            ValueError: If the cron expression is invalid.
        """
        trigger = build_cron_trigger(cron_expression, timezone)
        task = ScheduledTask(
            name=name,
            actor_name=actor_name,
            cron_expression=cron_expression,
            timezone=timezone,
            enabled=enabled,
        )
        self._tasks[task.id] = task

        if self._scheduler and enabled:
            self._scheduler.add_job(
                self._execute_task,
                trigger=trigger,
                args=[task.id],
                id=task.id,
                name=name,
                max_instances=1,
                coalesce=True,
            )

        logger.info("Added cron task: %s (%s %s)", name, cron_expression, timezone)
        return task

    async def _execute_task(self, task_id: str) -> None:
        """Enqueue the actor of a scheduled task.

        Args:
            task_id: ID of the task to execute.
        """
        task = self._tasks.get(task_id)
        if not task or not task.enabled:
            return

        try:
            actor = self._get_actor(task.actor_name)
            if actor is None:
                raise ValueError(f"Actor not found: {task.actor_name}")

            actor.send()

            task.last_run = utc_now()
            task.run_count += 1
            logger.debug("Scheduled task %s sent to queue", task.name)

        except Exception as e:
            task.error_count += 1
            logger.error("Scheduled task %s failed: %s", task.name, str(e))

    def list_tasks(self) -> list[ScheduledTask]:
        """List all scheduled tasks."""
        return list(self._tasks.values())

    async def start(self) -> None:
        """Start the scheduler."""
        if self._running:
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.start()
        self._running = True
        logger.info("Dramatiq scheduler started")

    async def stop(self) -> None:
        """Stop the scheduler."""
        if not self._running:
            return

        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None

        self._tasks.clear()
        self._running = False
        logger.info("Dramatiq scheduler stopped")

    def get_stats(self) -> dict[str, Any]:
        """Get scheduler statistics."""
        return {
            "is_running": self._running,
            "task_count": len(self._tasks),
            "total_runs": sum(t.run_count for t in self._tasks.values()),
            "total_errors": sum(t.error_count for t in self._tasks.values()),
            "tasks": [t.to_dict() for t in self._tasks.values()],
        }


# Singleton instance
_scheduler: DramatiqScheduler | None = None


def get_scheduler() -> DramatiqScheduler:
    """Get the singleton scheduler instance."""
    global _scheduler
    if _scheduler is None:
        _scheduler = DramatiqScheduler()
    return _scheduler


async def start_scheduler(settings: Settings) -> DramatiqScheduler:
    """Start the scheduler and register the reminder jobs.

    Args:
        settings: Application settings.

    Returns:
        Scheduler instance, running only when enabled in settings.
    """
    scheduler = get_scheduler()
    reminders = settings.reminders

    if not reminders.scheduler_enabled:
        logger.info("Reminder scheduler disabled")
        return scheduler

    await scheduler.start()

    scheduler.add_cron_task(
        name="Email Reminders",
        actor_name="email_reminder_job",
        cron_expression=reminders.email_cron,
        timezone=reminders.timezone,
    )
    scheduler.add_cron_task(
        name="Push Reminders",
        actor_name="push_reminder_job",
        cron_expression=reminders.push_cron,
        timezone=reminders.timezone,
    )

    logger.info("Scheduler started with %d reminder jobs", len(scheduler.list_tasks()))
    return scheduler


async def stop_scheduler() -> None:
    """Stop the scheduler."""
    global _scheduler
    if _scheduler is not None:
        await _scheduler.stop()
        _scheduler = None
