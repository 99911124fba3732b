# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic term and fee structure models.

Both tables are administered by the No-Dues application and are
read-only to the notifier.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from nodues.infrastructure.database.models.base import Base, DocumentMixin


class AcademicTerm(DocumentMixin, Base):
    """An academic period (semester) against which fees are scoped.

    Attributes:
        academic_year: Batch label of the students enrolled in the term.
        end_date: When the term closes.
        is_active: Whether reminders should be evaluated for the term.
    """

    __tablename__ = "semesters"

    academic_year: Mapped[str] = mapped_column(String(32), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("ix_semesters_is_active", "is_active"),)

    def __repr__(self) -> str:
        return f"<AcademicTerm {self.id} {self.academic_year} active={self.is_active}>"


class FeeStructure(DocumentMixin, Base):
    """A named payment obligation for one department/quota segment of a term.

    Attributes:
        semester_id: Owning term.
        dept: Department code (e.g. CSE).
        quota_category: Admission quota (e.g. General).
        fee_name: Display name of the fee, if any.
        amount: Amount due.
        deadline: Payment deadline; reminders are skipped when unset.
    """

    __tablename__ = "fee_structures"

    semester_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("semesters.id", ondelete="CASCADE"),
        nullable=False,
    )
    dept: Mapped[str] = mapped_column(String(32), nullable=False)
    quota_category: Mapped[str] = mapped_column(String(32), nullable=False)
    fee_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_fee_structures_semester_id", "semester_id"),)

    def __repr__(self) -> str:
        return f"<FeeStructure {self.id} {self.dept}/{self.quota_category}>"
