# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for the fee records database.

Read-only collections: semesters, fee_structures, users, payments.
Owned collections: notifications, reminder_dispatches.
"""

from nodues.infrastructure.database.models.base import Base, CreatedAtMixin, DocumentMixin, new_id
from nodues.infrastructure.database.models.fees import AcademicTerm, FeeStructure
from nodues.infrastructure.database.models.notification import (
    NotificationRecord,
    ReminderDispatch,
)
from nodues.infrastructure.database.models.payment import PaymentRecord, PaymentStatus
from nodues.infrastructure.database.models.user import (
    PENDING_STATUS,
    STUDENT_ROLE,
    StudentAccount,
)

__all__ = [
    "Base",
    "CreatedAtMixin",
    "DocumentMixin",
    "new_id",
    "AcademicTerm",
    "FeeStructure",
    "StudentAccount",
    "PaymentRecord",
    "PaymentStatus",
    "NotificationRecord",
    "ReminderDispatch",
    "STUDENT_ROLE",
    "PENDING_STATUS",
]
