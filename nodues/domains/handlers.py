# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event bus subscriptions for the change-event notifiers."""

from typing import TypeVar

from pydantic import BaseModel

from nodues.domains.payments import PaymentSnapshot, PaymentStatusNotifier
from nodues.domains.users import UserLifecycleNotifier, UserSnapshot
from nodues.infrastructure.events import EventBus, EventData, EventPatterns, EventTypes
from nodues.utils.logging import get_logger

logger = get_logger(__name__)

SnapshotT = TypeVar("SnapshotT", bound=BaseModel)


def _snapshot_pair(
    event: EventData, model: type[SnapshotT]
) -> tuple[SnapshotT | None, SnapshotT]:
    before = event.payload.get("before")
    return (
        model.model_validate(before) if before is not None else None,
        model.model_validate(event.payload["after"]),
    )


def register_change_handlers(
    bus: EventBus,
    payment_notifier: PaymentStatusNotifier,
    user_notifier: UserLifecycleNotifier,
) -> None:
    """Subscribe the notifiers to document change events.

    Args:
        bus: Event bus to subscribe on.
        payment_notifier: Handles payment updates.
        user_notifier: Handles user updates.
    """

    async def on_payment_updated(event: EventData) -> None:
        before, after = _snapshot_pair(event, PaymentSnapshot)
        await payment_notifier.handle_update(event.document_id, before, after)

    async def on_user_updated(event: EventData) -> None:
        before, after = _snapshot_pair(event, UserSnapshot)
        await user_notifier.handle_update(event.document_id, before, after)

    async def on_any_update(event: EventData) -> None:
        logger.debug(
            "change_event_received",
            event_id=event.event_id,
            event_type=event.event_type,
            document_id=event.document_id,
        )

    bus.subscribe(EventTypes.Payment.UPDATED, on_payment_updated)
    bus.subscribe(EventTypes.User.UPDATED, on_user_updated)
    bus.subscribe(EventPatterns.ALL_UPDATES, on_any_update)
