# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for logging configuration."""

import json
import logging

import pytest
import structlog

from nodues.core.config.settings import Settings
from nodues.domains.payments import PaymentSnapshot, PaymentStatusNotifier
from nodues.domains.users import UserLifecycleNotifier, UserSnapshot
from nodues.utils.logging import get_logger, setup_logging


@pytest.fixture
def configured_logging():
    """Apply setup_logging and restore logging state afterwards."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    def configure(**overrides) -> None:
        setup_logging(Settings(**overrides))

    yield configure

    structlog.reset_defaults()
    root_logger.handlers = handlers
    root_logger.setLevel(level)


class TestSetupLogging:
    """Loggers keep working once logging is configured."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"environment": "development", "debug": True},
            {"environment": "staging", "debug": False},
        ],
    )
    def test_domain_logger_emits_after_setup(self, configured_logging, overrides):
        configured_logging(**overrides)

        logger = get_logger("nodues.domains.sample")
        logger.info("reminder_sent", channel="push")
        logger.warning("reminder_failed", channel="email")

    def test_production_renders_json_lines(self, configured_logging, capsys):
        configured_logging(environment="staging", debug=False)

        get_logger("nodues.domains.sample").info("reminder_sent", user_id="stu-1")

        lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
        event = json.loads(lines[-1])
        assert event["event"] == "reminder_sent"
        assert event["user_id"] == "stu-1"
        assert event["level"] == "info"
        assert event["logger"] == "nodues.domains.sample"

    def test_stdlib_records_share_the_handler(self, configured_logging, capsys):
        configured_logging(environment="staging", debug=False)

        logging.getLogger("nodues.infrastructure.sample").info("Broker shutdown complete")

        event = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert event["event"] == "Broker shutdown complete"
        assert event["logger"] == "nodues.infrastructure.sample"

    def test_repeated_setup_keeps_one_handler(self, configured_logging):
        configured_logging(environment="staging", debug=False)
        configured_logging(environment="staging", debug=False)

        formatters = [
            h
            for h in logging.getLogger().handlers
            if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
        ]
        assert len(formatters) == 1


class TestNotifiersWithConfiguredLogging:
    """Change notifiers deliver while logging is configured."""

    @pytest.mark.asyncio
    async def test_verified_payment_is_delivered(
        self, configured_logging, mock_gateway, mock_ledger, mock_repository, make_student
    ):
        configured_logging(environment="staging", debug=False)
        mock_repository.get_student.return_value = make_student()
        notifier = PaymentStatusNotifier(
            gateway=mock_gateway,
            ledger=mock_ledger,
            students=mock_repository,
        )

        outcome = await notifier.handle_update(
            "pay-1",
            PaymentSnapshot.model_validate(
                {"studentId": "stu-1", "amount": "30000", "status": "submitted"}
            ),
            PaymentSnapshot.model_validate(
                {"studentId": "stu-1", "amount": "30000", "status": "verified"}
            ),
        )

        assert outcome.push_message_id == "push-msg-1"
        assert outcome.email_message_id == "email-msg-1"
        mock_gateway.send_push.assert_awaited_once()
        mock_gateway.send_email.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_welcome_push_is_delivered(self, configured_logging, mock_gateway, mock_ledger):
        configured_logging(environment="development", debug=True)
        notifier = UserLifecycleNotifier(
            gateway=mock_gateway,
            ledger=mock_ledger,
            app_name="APEC Digital No-Dues",
        )

        message_id = await notifier.handle_update(
            "stu-1",
            UserSnapshot.model_validate({"name": "Asha", "role": "student"}),
            UserSnapshot.model_validate({"name": "Asha", "role": "student", "pushToken": "abc"}),
        )

        assert message_id == "push-msg-1"
        mock_ledger.record.assert_awaited_once()
