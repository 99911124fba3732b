# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment status notification domain package."""

from nodues.domains.payments.messages import (
    GENERIC_REJECTION_REASON,
    PaymentMessages,
    PaymentSnapshot,
    build_payment_messages,
)
from nodues.domains.payments.notifier import (
    PaymentNotificationOutcome,
    PaymentStatusNotifier,
)

__all__ = [
    "GENERIC_REJECTION_REASON",
    "PaymentMessages",
    "PaymentSnapshot",
    "build_payment_messages",
    "PaymentNotificationOutcome",
    "PaymentStatusNotifier",
]
