# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the fee records store.

Provides the async engine/session wrapper, ORM models and the
read-only repository used by the notifiers.
"""

from nodues.infrastructure.database.connection import Database, DatabaseError
from nodues.infrastructure.database.repository import (
    FeeRecordsRepository,
    StudentDirectory,
    open_repository,
)

__all__ = [
    "Database",
    "DatabaseError",
    "FeeRecordsRepository",
    "StudentDirectory",
    "open_repository",
]
