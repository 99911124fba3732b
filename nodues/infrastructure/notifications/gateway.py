# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Messaging gateway over the push and email channels.

The gateway is the single entry point the notifiers use for outbound
delivery. Both operations are best-effort: a failure is logged and
reported as None, it is never raised into the caller's loop and it is
never retried.

Provider configuration is passed in explicitly through the channels'
settings objects.

Example:
    >>> gateway = get_messaging_gateway(get_settings())
    >>> message_id = await gateway.send_push(token, "Title", "Body", {"type": "welcome"})
"""

import logging
from typing import Any

from nodues.core.config.settings import Settings
from nodues.infrastructure.notifications.channels import (
    BaseChannel,
    ChannelResult,
    EmailChannel,
    NotificationPayload,
    PushChannel,
)

logger = logging.getLogger(__name__)


class MessagingGateway:
    """Best-effort push and email delivery.

    Attributes:
        _push: Push channel.
        _email: Email channel.
    """

    def __init__(self, push: BaseChannel, email: BaseChannel) -> None:
        """Initialize the gateway.

        Args:
            push: Channel used for push messages.
            email: Channel used for email messages.
        """
        self._push = push
        self._email = email

    async def send_push(
        self,
        recipient_token: str,
        title: str,
        body: str,
        data: dict[str, Any],
        *,
        recipient_id: str | None = None,
        accent_color: str | None = None,
    ) -> str | None:
        """Send a push notification to one device token.

        Args:
            recipient_token: Push delivery token.
            title: Notification title.
            body: Notification body.
            data: Data payload; values are sent as strings.
            recipient_id: Account id, for logging.
            accent_color: Android notification color.

        Returns:
            Provider message id on success, None otherwise.
        """
        payload = NotificationPayload(
            notification_type=str(data.get("type", "")),
            title=title,
            message=body,
            recipient_id=recipient_id,
            push_token=recipient_token,
            data=data,
            accent_color=accent_color,
        )
        return await self._deliver(self._push, payload)

    async def send_email(
        self,
        address: str,
        subject: str,
        html_body: str,
        *,
        recipient_id: str | None = None,
        text_body: str | None = None,
    ) -> str | None:
        """Send an HTML email.

        Args:
            address: Recipient email address.
            subject: Email subject.
            html_body: HTML content.
            recipient_id: Account id, for logging.
            text_body: Optional plain text alternative.

        Returns:
            Provider message id on success, None otherwise.
        """
        payload = NotificationPayload(
            notification_type="email",
            title=subject,
            message=text_body or "",
            recipient_id=recipient_id,
            recipient_email=address,
            html_body=html_body,
        )
        return await self._deliver(self._email, payload)

    async def _deliver(
        self,
        channel: BaseChannel,
        payload: NotificationPayload,
    ) -> str | None:
        try:
            result: ChannelResult = await channel.send(payload)
        except Exception as e:
            logger.error(
                "Unexpected %s channel error for user %s: %s",
                channel.channel_type.value,
                payload.recipient_id,
                str(e),
                exc_info=True,
            )
            return None

        if not result.succeeded:
            logger.warning(
                "%s delivery to user %s not sent (%s): %s",
                channel.channel_type.value,
                payload.recipient_id,
                result.status.value,
                result.error_message,
            )
            return None

        return result.message_id

    async def aclose(self) -> None:
        """Close channel resources."""
        await self._push.aclose()
        await self._email.aclose()


# Singleton instance
_gateway_instance: MessagingGateway | None = None


def get_messaging_gateway(settings: Settings) -> MessagingGateway:
    """Get or create the messaging gateway singleton.

    Args:
        settings: Application settings.

    Returns:
        MessagingGateway instance.
    """
    global _gateway_instance
    if _gateway_instance is None:
        _gateway_instance = MessagingGateway(
            push=PushChannel(settings.firebase),
            email=EmailChannel(settings.sendgrid),
        )
    return _gateway_instance


def reset_messaging_gateway() -> None:
    """Drop the gateway singleton (for tests and shutdown)."""
    global _gateway_instance
    _gateway_instance = None


__all__ = [
    "MessagingGateway",
    "get_messaging_gateway",
    "reset_messaging_gateway",
]
