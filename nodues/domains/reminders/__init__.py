# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Deadline reminder domain package.

This package provides:
- Channel policies for the push and email reminder jobs
- Evaluation of which students are due a reminder
- Reminder message copy
- The job driver that sends and ledgers reminders
"""

from nodues.domains.reminders.evaluator import (
    DeadlineReminderEvaluator,
    EvaluationResult,
    ReminderCandidate,
    ReminderEvaluationError,
)
from nodues.domains.reminders.policy import (
    DEFAULT_OFFSETS,
    EMAIL_POLICY,
    PUSH_POLICY,
    ReminderKind,
    ReminderPolicy,
)
from nodues.domains.reminders.service import (
    DispatchOutcome,
    ReminderDispatcher,
    ReminderJobReport,
)

__all__ = [
    "DEFAULT_OFFSETS",
    "EMAIL_POLICY",
    "PUSH_POLICY",
    "ReminderKind",
    "ReminderPolicy",
    "DeadlineReminderEvaluator",
    "EvaluationResult",
    "ReminderCandidate",
    "ReminderEvaluationError",
    "DispatchOutcome",
    "ReminderDispatcher",
    "ReminderJobReport",
]
