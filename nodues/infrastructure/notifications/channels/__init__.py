# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification channels for delivering notifications.

- PushChannel: Sends push notifications via Firebase Cloud Messaging
- EmailChannel: Sends email notifications via SendGrid

Usage:
    from nodues.infrastructure.notifications.channels import (
        EmailChannel,
        NotificationPayload,
        PushChannel,
    )

    push = PushChannel(settings.firebase)
    result = await push.send(
        NotificationPayload(
            notification_type="welcome",
            title="Welcome",
            message="Hello!",
            push_token=token,
        )
    )
"""

from nodues.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    NotificationPayload,
)
from nodues.infrastructure.notifications.channels.email import EmailChannel
from nodues.infrastructure.notifications.channels.push import PushChannel

__all__ = [
    # Base types
    "BaseChannel",
    "ChannelResult",
    "ChannelType",
    "DeliveryStatus",
    "NotificationPayload",
    # Channels
    "EmailChannel",
    "PushChannel",
]
