# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base for all ORM models."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from nodues.utils.datetime import utc_now


def new_id() -> str:
    """Generate a string primary key."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class DocumentMixin:
    """String primary key shared by every collection.

    Document ids are issued by the application that owns the records,
    so they are opaque strings rather than database sequences.
    """

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)


class CreatedAtMixin:
    """Creation timestamp for rows written by this service."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
