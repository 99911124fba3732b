# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Send-then-ledger delivery shared by the notifiers.

A message is ledgered only after the provider accepted it. A failed
ledger write is logged and does not turn a delivered message into a
failed one.
"""

from dataclasses import dataclass, field
from typing import Any

from nodues.infrastructure.notifications import (
    ChannelType,
    MessagingGateway,
    NotificationLedger,
)
from nodues.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class OutboundMessage:
    """Channel-ready message content.

    Attributes:
        notification_type: Type tag recorded in the ledger.
        title: Push title or email subject.
        body: Push body, or the plain text part of an email.
        data: Structured data sent with a push and kept in the ledger.
        html: HTML body for email.
        accent_color: Push notification color.
    """

    notification_type: str
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)
    html: str | None = None
    accent_color: str | None = None


async def deliver(
    gateway: MessagingGateway,
    ledger: NotificationLedger,
    channel: ChannelType,
    user_id: str,
    recipient: str,
    message: OutboundMessage,
) -> str | None:
    """Send a message on one channel and ledger it on success.

    Args:
        gateway: Messaging gateway.
        ledger: Notification ledger.
        channel: Channel to send on.
        user_id: Recipient account.
        recipient: Push token or email address.
        message: Content to send.

    Returns:
        Provider message id, or None if the send failed.
    """
    if channel == ChannelType.PUSH:
        message_id = await gateway.send_push(
            recipient,
            message.title,
            message.body,
            message.data,
            recipient_id=user_id,
            accent_color=message.accent_color,
        )
    else:
        message_id = await gateway.send_email(
            recipient,
            message.title,
            message.html or "",
            recipient_id=user_id,
            text_body=message.body,
        )

    if message_id is None:
        return None

    try:
        await ledger.record(
            user_id=user_id,
            notification_type=message.notification_type,
            title=message.title,
            body=message.body,
            data=message.data,
            channel=channel,
            delivery_message_id=message_id,
        )
    except Exception as e:
        logger.error(
            "ledger_write_failed",
            user_id=user_id,
            channel=channel.value,
            notification_type=message.notification_type,
            error=str(e),
        )

    return message_id
