# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the No-Dues notifier.

Example:
    >>> from nodues.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from nodues.core.config.settings import (
    APISettings,
    DatabaseSettings,
    FirebaseSettings,
    RedisSettings,
    ReminderSettings,
    SendGridSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "APISettings",
    "DatabaseSettings",
    "FirebaseSettings",
    "RedisSettings",
    "ReminderSettings",
    "SendGridSettings",
]
