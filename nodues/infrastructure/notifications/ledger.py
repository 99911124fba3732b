# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification ledger writer.

Records every delivered notification in the append-only notifications
table, for audit and for the in-app history shown by the client.
"""

import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from nodues.infrastructure.database.models import NotificationRecord, new_id
from nodues.infrastructure.notifications.channels import ChannelType
from nodues.utils.datetime import utc_now

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class NotificationLedger:
    """Append-only writer for NotificationRecord rows.

    Each record is written in its own short session so a ledger write
    never shares a transaction with the reads of a job run.

    Attributes:
        _session_factory: Callable returning a session context manager,
            typically Database.session.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        """Initialize the ledger.

        Args:
            session_factory: Session context manager factory.
        """
        self._session_factory = session_factory

    async def record(
        self,
        user_id: str,
        notification_type: str,
        title: str,
        body: str,
        data: dict[str, Any],
        channel: ChannelType,
        delivery_message_id: str | None,
    ) -> str:
        """Append a notification record.

        Args:
            user_id: Recipient account.
            notification_type: Type tag.
            title: Title or subject.
            body: Body text.
            data: Data payload.
            channel: Delivery channel.
            delivery_message_id: Provider message id.

        Returns:
            Id of the new record.

        Raises:
            DatabaseError: If the write fails.
        """
        record = NotificationRecord(
            id=new_id(),
            user_id=user_id,
            type=notification_type,
            title=title,
            body=body,
            data=dict(data),
            channel=channel.value,
            sent_at=utc_now(),
            read=False,
            delivery_message_id=delivery_message_id,
        )

        async with self._session_factory() as session:
            session.add(record)
            await session.flush()

        logger.debug(
            "Ledgered %s %s notification %s for user %s",
            channel.value,
            notification_type,
            record.id,
            user_id,
        )
        return record.id
