# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification delivery for the No-Dues notifier.

Key Components:
- MessagingGateway: best-effort push (FCM) and email (SendGrid) sends
- NotificationLedger: append-only record of delivered notifications
- ReminderDedupStore: write-once claims guarding reminder sends

Usage:
    from nodues.infrastructure.notifications import (
        NotificationLedger,
        get_messaging_gateway,
    )

    gateway = get_messaging_gateway(settings)
    ledger = NotificationLedger(database.session)

    message_id = await gateway.send_push(token, title, body, data)
    if message_id:
        await ledger.record(user_id, "welcome", title, body, data,
                            ChannelType.PUSH, message_id)

Configuration (environment variables):
- FIREBASE_CREDENTIALS_PATH: Path to Firebase service account JSON
- FIREBASE_PROJECT_ID: Firebase project ID
- SENDGRID_API_KEY: SendGrid API key
- SENDGRID_FROM_EMAIL: Verified sender address
"""

from nodues.infrastructure.notifications.channels import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    EmailChannel,
    NotificationPayload,
    PushChannel,
)
from nodues.infrastructure.notifications.dedup import ReminderDedupStore
from nodues.infrastructure.notifications.gateway import (
    MessagingGateway,
    get_messaging_gateway,
    reset_messaging_gateway,
)
from nodues.infrastructure.notifications.ledger import NotificationLedger, SessionFactory

__all__ = [
    # Gateway
    "MessagingGateway",
    "get_messaging_gateway",
    "reset_messaging_gateway",
    # Persistence
    "NotificationLedger",
    "ReminderDedupStore",
    "SessionFactory",
    # Channel types
    "BaseChannel",
    "ChannelResult",
    "ChannelType",
    "DeliveryStatus",
    "NotificationPayload",
    # Channels
    "EmailChannel",
    "PushChannel",
]
