# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment record model."""

from decimal import Decimal
from enum import Enum

from sqlalchemy import ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nodues.infrastructure.database.models.base import Base, DocumentMixin


class PaymentStatus(str, Enum):
    """Known payment statuses. Transitions are made by administrators."""

    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    VERIFIED = "verified"
    REJECTED = "rejected"


class PaymentRecord(DocumentMixin, Base):
    """A payment submitted by a student for a term.

    Attributes:
        student_id: Paying student.
        semester_id: Term the payment is for.
        amount: Amount paid.
        status: Review status.
        rejection_reason: Reason given when rejected.
        transaction_id: Bank or gateway transaction reference.
    """

    __tablename__ = "payments"

    student_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    semester_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("semesters.id", ondelete="CASCADE"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    transaction_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

    __table_args__ = (
        Index("ix_payments_student_semester_status", "student_id", "semester_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<PaymentRecord {self.id} {self.status}>"
