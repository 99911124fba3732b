# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Change event webhook endpoints.

The fee records application posts the before/after state of each
updated payment or user document here. Events are accepted
immediately and handled after the response is sent.
"""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel, Field

from nodues.api.dependencies import get_bus, verify_webhook_secret
from nodues.domains.payments import PaymentSnapshot
from nodues.domains.users import UserSnapshot
from nodues.infrastructure.events import EventBus, EventTypes

router = APIRouter(dependencies=[Depends(verify_webhook_secret)])


class PaymentChangeRequest(BaseModel):
    """Payment document before and after an update."""

    before: PaymentSnapshot | None = None
    after: PaymentSnapshot


class UserChangeRequest(BaseModel):
    """User document before and after an update."""

    before: UserSnapshot | None = None
    after: UserSnapshot


class EventAcceptedResponse(BaseModel):
    """Acknowledgement of an accepted change event."""

    event_id: str = Field(description="Id of the published event")
    event_type: str = Field(description="Type of the published event")


def _accept(
    bus: EventBus,
    background_tasks: BackgroundTasks,
    event_type: str,
    document_id: str,
    before: BaseModel | None,
    after: BaseModel,
) -> EventAcceptedResponse:
    payload: dict[str, Any] = {
        "document_id": document_id,
        "before": before.model_dump() if before is not None else None,
        "after": after.model_dump(),
    }
    event = bus.create_event(event_type, payload)
    background_tasks.add_task(bus.dispatch, event)
    return EventAcceptedResponse(event_id=event.event_id, event_type=event_type)


@router.post(
    "/payments/{payment_id}",
    response_model=EventAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def payment_updated(
    payment_id: str,
    request: PaymentChangeRequest,
    background_tasks: BackgroundTasks,
    bus: EventBus = Depends(get_bus),
) -> EventAcceptedResponse:
    """Accept a payment document update."""
    return _accept(
        bus,
        background_tasks,
        EventTypes.Payment.UPDATED,
        payment_id,
        request.before,
        request.after,
    )


@router.post(
    "/users/{user_id}",
    response_model=EventAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def user_updated(
    user_id: str,
    request: UserChangeRequest,
    background_tasks: BackgroundTasks,
    bus: EventBus = Depends(get_bus),
) -> EventAcceptedResponse:
    """Accept a user document update."""
    return _accept(
        bus,
        background_tasks,
        EventTypes.User.UPDATED,
        user_id,
        request.before,
        request.after,
    )
