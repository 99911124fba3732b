# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read access to the fee records collections.

The repository only ever reads. Every query runs inside a savepoint so
that a failed statement rolls back to the savepoint instead of leaving
the whole session unusable for the remaining reads of a job run.

Example:
    >>> async with database.session() as session:
    ...     repository = FeeRecordsRepository(session)
    ...     terms = await repository.list_active_terms()
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from nodues.infrastructure.database.connection import Database
from nodues.infrastructure.database.models import (
    STUDENT_ROLE,
    AcademicTerm,
    FeeStructure,
    PaymentRecord,
    PaymentStatus,
    StudentAccount,
)

logger = logging.getLogger(__name__)


class FeeRecordsRepository:
    """Queries over semesters, fee structures, users and payments.

    Attributes:
        _session: Async database session.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async database session.
        """
        self._session = session

    async def _scalars(self, statement: Select[Any]) -> Sequence[Any]:
        async with self._session.begin_nested():
            result = await self._session.execute(statement)
            return result.scalars().all()

    async def list_active_terms(self) -> Sequence[AcademicTerm]:
        """List all terms flagged active."""
        terms = await self._scalars(
            select(AcademicTerm).where(AcademicTerm.is_active.is_(True))
        )
        logger.debug("Found %d active terms", len(terms))
        return terms

    async def list_fee_structures(self, term_id: str) -> Sequence[FeeStructure]:
        """List the fee structures belonging to a term."""
        return await self._scalars(
            select(FeeStructure).where(FeeStructure.semester_id == term_id)
        )

    async def list_batch_students(self, batch: str) -> Sequence[StudentAccount]:
        """List students enrolled in a batch.

        Args:
            batch: Batch label, matched exactly.

        Returns:
            Student accounts with role "student" in the batch.
        """
        return await self._scalars(
            select(StudentAccount).where(
                StudentAccount.role == STUDENT_ROLE,
                StudentAccount.batch == batch,
            )
        )

    async def list_segment_students(
        self,
        dept: str,
        quota_category: str,
        status: str | None = None,
    ) -> Sequence[StudentAccount]:
        """List students in a department/quota segment.

        Args:
            dept: Department code.
            quota_category: Admission quota.
            status: Optional lifetime payment status filter.

        Returns:
            Matching student accounts.
        """
        statement = select(StudentAccount).where(
            StudentAccount.role == STUDENT_ROLE,
            StudentAccount.dept == dept,
            StudentAccount.quota_category == quota_category,
        )
        if status is not None:
            statement = statement.where(StudentAccount.status == status)
        return await self._scalars(statement)

    async def verified_student_ids(self, term_id: str) -> set[str]:
        """Collect the students holding a verified payment for a term.

        Args:
            term_id: Term to check.

        Returns:
            Set of student ids.
        """
        rows = await self._scalars(
            select(PaymentRecord.student_id).where(
                PaymentRecord.semester_id == term_id,
                PaymentRecord.status == PaymentStatus.VERIFIED.value,
            )
        )
        return set(rows)

    async def get_student(self, student_id: str) -> StudentAccount | None:
        """Get a student account by id."""
        rows = await self._scalars(
            select(StudentAccount).where(StudentAccount.id == student_id)
        )
        return rows[0] if rows else None


@asynccontextmanager
async def open_repository(database: Database) -> AsyncIterator[FeeRecordsRepository]:
    """Open a session and wrap it in a repository.

    Args:
        database: Database to open the session on.

    Yields:
        FeeRecordsRepository bound to the new session.
    """
    async with database.session() as session:
        yield FeeRecordsRepository(session)


class StudentDirectory:
    """Single student lookups, each in its own short session.

    Used by the change-event notifiers, which need one account per
    event and no other reads.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def get_student(self, student_id: str) -> StudentAccount | None:
        """Get a student account by id."""
        async with open_repository(self._database) as repository:
            return await repository.get_student(student_id)
