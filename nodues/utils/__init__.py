# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for the No-Dues notifier.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
- formatting: Amount and plural formatting for message copy
"""

from nodues.utils.datetime import (
    days_until,
    ensure_utc,
    format_iso,
    format_local_date,
    local_date,
    utc_now,
)
from nodues.utils.formatting import format_amount, format_rupees, pluralize
from nodues.utils.logging import bind_context, clear_context, get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "ensure_utc",
    "days_until",
    "local_date",
    "format_local_date",
    "format_iso",
    # Formatting
    "format_amount",
    "format_rupees",
    "pluralize",
]
