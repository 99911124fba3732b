# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification ledger and reminder dedup models.

These are the only tables written by the notifier. Both are
append-only: rows are never updated by this service.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from nodues.infrastructure.database.models.base import Base, CreatedAtMixin, DocumentMixin
from nodues.utils.datetime import utc_now


class NotificationRecord(DocumentMixin, Base):
    """One delivered notification, kept for audit and in-app history.

    Attributes:
        user_id: Recipient account.
        type: Notification type tag (payment_reminder, welcome, ...).
        title: Title or email subject.
        body: Push body, or a plain summary for email.
        data: Structured data payload sent with the message.
        channel: Delivery channel (push or email).
        sent_at: When the provider accepted the message.
        read: Read flag, owned by the client app.
        delivery_message_id: Provider message id.
    """

    __tablename__ = "notifications"

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    channel: Mapped[str] = mapped_column(String(16), nullable=False)
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    delivery_message_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (Index("ix_notifications_user_sent", "user_id", "sent_at"),)

    def __repr__(self) -> str:
        return f"<NotificationRecord {self.id} {self.type} -> {self.user_id}>"


class ReminderDispatch(DocumentMixin, CreatedAtMixin, Base):
    """Write-once marker claiming a reminder send.

    The unique dedup_key makes the claim atomic: a second insert for the
    same student, subject, offset, channel and run date fails.
    """

    __tablename__ = "reminder_dispatches"

    dedup_key: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (UniqueConstraint("dedup_key", name="uq_reminder_dispatches_dedup_key"),)

    def __repr__(self) -> str:
        return f"<ReminderDispatch {self.dedup_key}>"
