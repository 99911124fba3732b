# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Background task infrastructure for the No-Dues notifier.

- Redis broker for the reminder job queue
- Dramatiq actors for the daily reminder jobs
- APScheduler cron triggers that enqueue them

Running Workers:
    dramatiq nodues.infrastructure.background.tasks

Scheduler:
    from nodues.infrastructure.background import start_scheduler, stop_scheduler

    await start_scheduler(settings)
    await stop_scheduler()
"""

from nodues.infrastructure.background.broker import (
    BrokerManager,
    Priority,
    Queues,
    get_broker_manager,
    setup_dramatiq,
    shutdown_dramatiq,
)
from nodues.infrastructure.background.scheduler import (
    DramatiqScheduler,
    ScheduledTask,
    build_cron_trigger,
    get_scheduler,
    start_scheduler,
    stop_scheduler,
)

# Task actors are imported lazily to avoid circular imports
# Use: from nodues.infrastructure.background.tasks import push_reminder_job

__all__ = [
    # Broker
    "BrokerManager",
    "Priority",
    "Queues",
    "get_broker_manager",
    "setup_dramatiq",
    "shutdown_dramatiq",
    # Scheduler
    "DramatiqScheduler",
    "ScheduledTask",
    "build_cron_trigger",
    "get_scheduler",
    "start_scheduler",
    "stop_scheduler",
]
