# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event type definitions.

Every event is a document change observed in the fee records store.
Payloads share one shape:

    {"document_id": str, "before": dict | None, "after": dict}
"""


class EventTypes:
    """All event types organized by collection."""

    class Payment:
        """Changes to documents in payments."""

        UPDATED = "payment.updated"

    class User:
        """Changes to documents in users."""

        UPDATED = "user.updated"


class EventPatterns:
    """Wildcard patterns for subscribing to groups of events."""

    ALL_UPDATES = "*.updated"
