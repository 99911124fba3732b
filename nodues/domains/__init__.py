# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Business domains of the No-Dues notifier.

- reminders: deadline reminder evaluation and the reminder jobs
- payments: payment status change notifications
- users: welcome notification on first push token registration
"""
