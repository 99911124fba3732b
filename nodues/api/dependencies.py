# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module wires the API process's long-lived services:
- the fee records database
- the messaging gateway and notification ledger
- the event bus with the change-event notifiers subscribed

Example:
    @router.post("/events/payments/{payment_id}")
    async def payment_changed(
        bus: EventBus = Depends(get_bus),
        _: None = Depends(verify_webhook_secret),
    ):
        ...
"""

import hmac
import logging
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from nodues.core.config import Settings, get_settings
from nodues.domains.handlers import register_change_handlers
from nodues.domains.payments import PaymentStatusNotifier
from nodues.domains.users import UserLifecycleNotifier
from nodues.infrastructure.database import Database, StudentDirectory
from nodues.infrastructure.events import EventBus, get_event_bus, reset_event_bus
from nodues.infrastructure.notifications import (
    NotificationLedger,
    get_messaging_gateway,
    reset_messaging_gateway,
)

logger = logging.getLogger(__name__)

# Database singleton for the API process
_database: Database | None = None


async def init_services(settings: Settings) -> None:
    """Create the database and subscribe the notifiers to the event bus."""
    global _database
    _database = Database.from_settings(settings)

    gateway = get_messaging_gateway(settings)
    ledger = NotificationLedger(_database.session)

    register_change_handlers(
        get_event_bus(),
        payment_notifier=PaymentStatusNotifier(
            gateway=gateway,
            ledger=ledger,
            students=StudentDirectory(_database),
        ),
        user_notifier=UserLifecycleNotifier(
            gateway=gateway,
            ledger=ledger,
            app_name=settings.app_name,
        ),
    )


async def close_services() -> None:
    """Close the gateway and the database."""
    global _database

    gateway = get_messaging_gateway(get_settings())
    await gateway.aclose()
    reset_messaging_gateway()
    reset_event_bus()

    if _database is not None:
        await _database.dispose()
        _database = None


def get_database() -> Database | None:
    """Get the API process database, if initialized."""
    return _database


def get_bus() -> EventBus:
    """Get the event bus change events are published on."""
    return get_event_bus()


async def verify_webhook_secret(
    x_webhook_secret: Annotated[str | None, Header()] = None,
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject requests without the shared webhook secret.

    Raises:
        HTTPException: 401 if the header is missing or wrong.
    """
    expected = settings.api.webhook_secret.get_secret_value()
    if x_webhook_secret is None or not hmac.compare_digest(
        x_webhook_secret.encode(), expected.encode()
    ):
        logger.warning("Rejected change event with invalid webhook secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook secret",
        )
