# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the in-memory event bus."""

import pytest

from nodues.infrastructure.events import (
    EventBus,
    EventData,
    EventPatterns,
    EventTypes,
    get_event_bus,
    reset_event_bus,
)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


class TestEventBus:
    """Tests for EventBus subscription and dispatch."""

    @pytest.mark.asyncio
    async def test_exact_and_pattern_handlers_receive_event(self, bus):
        received: list[str] = []

        async def exact(event: EventData) -> None:
            received.append(f"exact:{event.document_id}")

        async def pattern(event: EventData) -> None:
            received.append(f"pattern:{event.event_type}")

        bus.subscribe(EventTypes.Payment.UPDATED, exact)
        bus.subscribe(EventPatterns.ALL_UPDATES, pattern)

        await bus.publish(EventTypes.Payment.UPDATED, {"document_id": "pay-1"})

        assert sorted(received) == ["exact:pay-1", "pattern:payment.updated"]

    @pytest.mark.asyncio
    async def test_handler_error_does_not_stop_others(self, bus):
        received: list[str] = []

        async def broken(event: EventData) -> None:
            raise RuntimeError("handler failed")

        async def healthy(event: EventData) -> None:
            received.append(event.event_id)

        bus.subscribe(EventTypes.User.UPDATED, broken)
        bus.subscribe(EventTypes.User.UPDATED, healthy)

        event = await bus.publish(EventTypes.User.UPDATED, {"document_id": "stu-1"})

        assert received == [event.event_id]

    @pytest.mark.asyncio
    async def test_unsubscribe(self, bus):
        received: list[str] = []

        async def handler(event: EventData) -> None:
            received.append(event.event_type)

        bus.subscribe(EventTypes.User.UPDATED, handler)

        assert bus.unsubscribe(EventTypes.User.UPDATED, handler) is True
        assert bus.unsubscribe(EventTypes.User.UPDATED, handler) is False

        await bus.publish(EventTypes.User.UPDATED, {})
        assert received == []

    @pytest.mark.asyncio
    async def test_stats(self, bus):
        async def handler(event: EventData) -> None:
            return None

        bus.subscribe(EventTypes.Payment.UPDATED, handler)
        bus.subscribe(EventPatterns.ALL_UPDATES, handler)
        await bus.publish(EventTypes.Payment.UPDATED, {})

        stats = bus.get_stats()

        assert stats["total_handlers"] == 2
        assert stats["events_published"] == 1
        assert stats["patterns"] == ["*.updated"]

    def test_singleton_reset(self):
        first = get_event_bus()

        reset_event_bus()

        assert get_event_bus() is not first
        reset_event_bus()
