# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

The environment is set before any nodues module is imported so the
Dramatiq stub broker is used and the reminder scheduler stays off.
"""

import os

os.environ.setdefault("DRAMATIQ_TEST_MODE", "true")
os.environ.setdefault("REMINDER_SCHEDULER_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "development")

from contextlib import asynccontextmanager  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402

from nodues.core.config import clear_settings_cache  # noqa: E402
from nodues.infrastructure.database.models import (  # noqa: E402
    AcademicTerm,
    FeeStructure,
    StudentAccount,
)

# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Reload settings for every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Fee Records Fixtures
# =============================================================================


@pytest.fixture
def run_time() -> datetime:
    """Reference time of a reminder job run (10:00 IST)."""
    return datetime(2025, 11, 20, 4, 30, tzinfo=timezone.utc)


def _make_term(now: datetime, days_to_end: float = 90, **overrides: Any) -> AcademicTerm:
    """Build an active term ending the given number of days after now."""
    values: dict[str, Any] = {
        "id": "sem-1",
        "academic_year": "2022-2026",
        "end_date": now + timedelta(days=days_to_end),
        "is_active": True,
    }
    values.update(overrides)
    return AcademicTerm(**values)


def _make_fee(now: datetime, days_to_deadline: float | None = 3, **overrides: Any) -> FeeStructure:
    """Build a fee structure due the given number of days after now."""
    values: dict[str, Any] = {
        "id": "fee-1",
        "semester_id": "sem-1",
        "dept": "CSE",
        "quota_category": "General",
        "fee_name": "Tuition Fee",
        "amount": Decimal("50000"),
        "deadline": None if days_to_deadline is None else now + timedelta(days=days_to_deadline),
    }
    values.update(overrides)
    return FeeStructure(**values)


def _make_student(**overrides: Any) -> StudentAccount:
    """Build a student account with a push token and an email."""
    values: dict[str, Any] = {
        "id": "stu-1",
        "name": "Asha",
        "email": "asha@example.com",
        "push_token": "token-asha",
        "role": "student",
        "dept": "CSE",
        "quota_category": "General",
        "batch": "2022-2026",
        "total_fee": Decimal("50000"),
        "paid_fee": Decimal("20000"),
        "status": "Pending",
    }
    values.update(overrides)
    return StudentAccount(**values)


@pytest.fixture
def make_term():
    """Factory for active terms."""
    return _make_term


@pytest.fixture
def make_fee():
    """Factory for fee structures."""
    return _make_fee


@pytest.fixture
def make_student():
    """Factory for student accounts."""
    return _make_student


@pytest.fixture
def mock_repository() -> AsyncMock:
    """Fee records repository with no terms, structures or students."""
    repository = AsyncMock()
    repository.list_active_terms.return_value = []
    repository.list_fee_structures.return_value = []
    repository.list_batch_students.return_value = []
    repository.list_segment_students.return_value = []
    repository.verified_student_ids.return_value = set()
    repository.get_student.return_value = None
    return repository


# =============================================================================
# Messaging Fixtures
# =============================================================================


@pytest.fixture
def mock_gateway() -> AsyncMock:
    """Messaging gateway that accepts every message."""
    gateway = AsyncMock()
    gateway.send_push.return_value = "push-msg-1"
    gateway.send_email.return_value = "email-msg-1"
    return gateway


@pytest.fixture
def mock_ledger() -> AsyncMock:
    """Notification ledger that records nothing."""
    ledger = AsyncMock()
    ledger.record.return_value = "notif-1"
    return ledger


class InMemoryDedupStore:
    """Dedup store keeping claimed keys in a set."""

    def __init__(self) -> None:
        self.keys: set[str] = set()
        self.released: list[str] = []

    async def claim(self, key: str) -> bool:
        if key in self.keys:
            return False
        self.keys.add(key)
        return True

    async def release(self, key: str) -> None:
        self.keys.discard(key)
        self.released.append(key)


@pytest.fixture
def dedup_store() -> InMemoryDedupStore:
    """In-memory dedup store."""
    return InMemoryDedupStore()


@pytest.fixture
def mock_session() -> MagicMock:
    """Async SQLAlchemy session mock."""
    session = MagicMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.rollback = AsyncMock()
    session.execute = AsyncMock()
    return session


@pytest.fixture
def session_factory(mock_session: MagicMock):
    """Session factory yielding the mock session."""

    @asynccontextmanager
    async def factory():
        yield mock_session

    return factory
