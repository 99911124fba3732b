# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User lifecycle notification domain package."""

from nodues.domains.users.notifier import (
    UserLifecycleNotifier,
    UserSnapshot,
    build_welcome_message,
)

__all__ = [
    "UserLifecycleNotifier",
    "UserSnapshot",
    "build_welcome_message",
]
