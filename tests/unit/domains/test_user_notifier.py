# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the user lifecycle notifier."""

import pytest

from nodues.domains.users import UserLifecycleNotifier, UserSnapshot
from nodues.infrastructure.notifications import ChannelType


@pytest.fixture
def notifier(mock_gateway, mock_ledger):
    """Notifier with the default product name."""
    return UserLifecycleNotifier(
        gateway=mock_gateway,
        ledger=mock_ledger,
        app_name="APEC Digital No-Dues",
    )


def _user(**values) -> UserSnapshot:
    values.setdefault("name", "Asha")
    values.setdefault("role", "student")
    return UserSnapshot.model_validate(values)


class TestUserSnapshot:
    """Wire format of user documents."""

    def test_accepts_legacy_token_key(self):
        assert _user(fcmToken="abc").push_token == "abc"
        assert _user(pushToken="xyz").push_token == "xyz"


class TestUserLifecycleNotifier:
    """Tests for UserLifecycleNotifier.handle_update."""

    @pytest.mark.asyncio
    async def test_first_token_sends_welcome(self, notifier, mock_gateway, mock_ledger):
        message_id = await notifier.handle_update("stu-1", _user(), _user(pushToken="abc"))

        assert message_id == "push-msg-1"
        args, kwargs = mock_gateway.send_push.call_args
        assert args[0] == "abc"
        assert args[1] == "Welcome to APEC Digital No-Dues"
        assert args[2] == "Hello Asha! You can now manage your fee payments digitally."
        assert args[3] == {"type": "welcome"}
        record = mock_ledger.record.call_args.kwargs
        assert record["notification_type"] == "welcome"
        assert record["channel"] == ChannelType.PUSH

    @pytest.mark.asyncio
    async def test_token_refresh_sends_nothing(self, notifier, mock_gateway):
        """A token changing from one value to another is not a first sign-in."""
        message_id = await notifier.handle_update(
            "stu-1", _user(pushToken="abc"), _user(pushToken="xyz")
        )

        assert message_id is None
        mock_gateway.send_push.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_student_sends_nothing(self, notifier, mock_gateway):
        await notifier.handle_update("adm-1", _user(role="admin"), _user(role="admin", pushToken="abc"))

        mock_gateway.send_push.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_before_counts_as_absent_token(self, notifier, mock_gateway):
        await notifier.handle_update("stu-1", None, _user(pushToken="abc"))

        mock_gateway.send_push.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_send_is_not_ledgered(self, notifier, mock_gateway, mock_ledger):
        mock_gateway.send_push.return_value = None

        message_id = await notifier.handle_update("stu-1", _user(), _user(pushToken="abc"))

        assert message_id is None
        mock_ledger.record.assert_not_awaited()
