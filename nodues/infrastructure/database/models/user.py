# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student account model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from nodues.infrastructure.database.models.base import Base, DocumentMixin

STUDENT_ROLE = "student"
PENDING_STATUS = "Pending"


class StudentAccount(DocumentMixin, Base):
    """A user of the No-Dues application.

    Only accounts with role "student" ever receive notifications.

    Attributes:
        name: Display name.
        email: Email address, if known.
        push_token: Push delivery token registered by the client app.
        role: Account role.
        dept: Department code.
        quota_category: Admission quota.
        batch: Batch label, matched against AcademicTerm.academic_year.
        total_fee: Total fee for the student.
        paid_fee: Amount paid so far.
        status: Lifetime payment status ("Pending" until cleared).
        last_active_at: Last time the student used the app.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    push_token: Mapped[str | None] = mapped_column(String(4096), nullable=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    dept: Mapped[str | None] = mapped_column(String(32), nullable=True)
    quota_category: Mapped[str | None] = mapped_column(String(32), nullable=True)
    batch: Mapped[str | None] = mapped_column(String(32), nullable=True)
    total_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    paid_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    last_active_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_users_role_batch", "role", "batch"),
        Index("ix_users_role_segment", "role", "dept", "quota_category"),
    )

    @property
    def outstanding_fee(self) -> Decimal:
        """Total fee not yet paid."""
        return (self.total_fee or Decimal("0")) - (self.paid_fee or Decimal("0"))

    def __repr__(self) -> str:
        return f"<StudentAccount {self.id} {self.role}>"
