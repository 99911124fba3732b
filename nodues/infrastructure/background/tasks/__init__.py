# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dramatiq actors for the No-Dues notifier.

Running Workers:
    dramatiq nodues.infrastructure.background.tasks --processes 1 --threads 2
"""

from nodues.infrastructure.background.tasks.reminders import (
    email_reminder_job,
    execute_reminder_job,
    push_reminder_job,
)

__all__ = [
    "email_reminder_job",
    "execute_reminder_job",
    "push_reminder_job",
]
