"""APEC Digital No-Dues notifier.

Dispatches fee deadline reminders and payment status notifications to
students via push notification and email.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
