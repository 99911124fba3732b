# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Idempotency store for reminder sends.

A reminder is claimed by inserting a row with a unique dedup key before
it is sent. The unique constraint makes check-and-set atomic across
processes: the second writer gets an IntegrityError and skips the send.
"""

import logging

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError

from nodues.infrastructure.database.models import ReminderDispatch
from nodues.infrastructure.notifications.ledger import SessionFactory

logger = logging.getLogger(__name__)


class ReminderDedupStore:
    """Write-once markers keyed by dedup key.

    Attributes:
        _session_factory: Callable returning a session context manager.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        """Initialize the store.

        Args:
            session_factory: Session context manager factory.
        """
        self._session_factory = session_factory

    async def claim(self, key: str) -> bool:
        """Atomically claim a dedup key.

        Args:
            key: Dedup key of the reminder.

        Returns:
            True if this caller now owns the key, False if it was
            already claimed.
        """
        async with self._session_factory() as session:
            session.add(ReminderDispatch(dedup_key=key))
            try:
                await session.flush()
            except IntegrityError:
                await session.rollback()
                logger.debug("Dedup key already claimed: %s", key)
                return False
        return True

    async def release(self, key: str) -> None:
        """Remove a claim so a later run may retry the send.

        Args:
            key: Dedup key to release.
        """
        async with self._session_factory() as session:
            await session.execute(
                delete(ReminderDispatch).where(ReminderDispatch.dedup_key == key)
            )
        logger.debug("Released dedup key %s", key)
