# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the notification ledger and the reminder dedup store."""

import pytest
from sqlalchemy.exc import IntegrityError

from nodues.infrastructure.database.models import NotificationRecord, ReminderDispatch
from nodues.infrastructure.notifications import (
    ChannelType,
    NotificationLedger,
    ReminderDedupStore,
)


class TestNotificationLedger:
    """Tests for NotificationLedger.record."""

    @pytest.mark.asyncio
    async def test_appends_unread_record(self, session_factory, mock_session):
        ledger = NotificationLedger(session_factory)

        record_id = await ledger.record(
            user_id="stu-1",
            notification_type="payment_verified",
            title="✅ Payment Verified",
            body="Your payment of ₹30000 has been verified successfully!",
            data={"type": "payment_verified", "paymentId": "pay-1"},
            channel=ChannelType.PUSH,
            delivery_message_id="m-1",
        )

        record = mock_session.add.call_args.args[0]
        assert isinstance(record, NotificationRecord)
        assert record.user_id == "stu-1"
        assert record.type == "payment_verified"
        assert record.channel == "push"
        assert record.read is False
        assert record.sent_at is not None
        assert record.delivery_message_id == "m-1"
        mock_session.flush.assert_awaited_once()
        assert record_id
        assert record_id == record.id


class TestReminderDedupStore:
    """Tests for ReminderDedupStore."""

    @pytest.mark.asyncio
    async def test_claim_inserts_marker(self, session_factory, mock_session):
        store = ReminderDedupStore(session_factory)

        assert await store.claim("push:fee_deadline:fee-1:stu-1:3:2025-11-20") is True

        marker = mock_session.add.call_args.args[0]
        assert isinstance(marker, ReminderDispatch)
        assert marker.dedup_key == "push:fee_deadline:fee-1:stu-1:3:2025-11-20"

    @pytest.mark.asyncio
    async def test_duplicate_claim_returns_false(self, session_factory, mock_session):
        mock_session.flush.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))
        store = ReminderDedupStore(session_factory)

        assert await store.claim("push:fee_deadline:fee-1:stu-1:3:2025-11-20") is False
        mock_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_release_deletes_marker(self, session_factory, mock_session):
        store = ReminderDedupStore(session_factory)

        await store.release("push:fee_deadline:fee-1:stu-1:3:2025-11-20")

        mock_session.execute.assert_awaited_once()
        statement = mock_session.execute.call_args.args[0]
        assert statement.table.name == "reminder_dispatches"
