# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment status notifier.

Reacts to payment document updates. Only an observed change of the
status value triggers anything; updates to other fields are ignored.
"""

from dataclasses import dataclass
from typing import Protocol

from nodues.domains.delivery import OutboundMessage, deliver
from nodues.domains.payments.messages import PaymentSnapshot, build_payment_messages
from nodues.infrastructure.database.models import StudentAccount
from nodues.infrastructure.notifications import (
    ChannelType,
    MessagingGateway,
    NotificationLedger,
)
from nodues.utils.logging import get_logger

logger = get_logger(__name__)


class StudentLookup(Protocol):
    async def get_student(self, student_id: str) -> StudentAccount | None: ...


@dataclass
class PaymentNotificationOutcome:
    """What was sent for one status change.

    Attributes:
        payment_id: Changed payment.
        status: New status.
        student_id: Notified student.
        push_message_id: Push message id, if a push was delivered.
        email_message_id: Email message id, if an email was delivered.
    """

    payment_id: str
    status: str
    student_id: str
    push_message_id: str | None = None
    email_message_id: str | None = None


class PaymentStatusNotifier:
    """Notifies students when an administrator changes a payment's status.

    Attributes:
        _gateway: Messaging gateway.
        _ledger: Notification ledger.
        _students: Student account lookup.
    """

    def __init__(
        self,
        gateway: MessagingGateway,
        ledger: NotificationLedger,
        students: StudentLookup,
    ) -> None:
        self._gateway = gateway
        self._ledger = ledger
        self._students = students

    async def handle_update(
        self,
        payment_id: str,
        before: PaymentSnapshot | None,
        after: PaymentSnapshot,
    ) -> PaymentNotificationOutcome | None:
        """Handle one payment update.

        Args:
            payment_id: Id of the updated payment.
            before: Payment before the update.
            after: Payment after the update.

        Returns:
            What was sent, or None when nothing was due.
        """
        previous_status = before.status if before is not None else None
        if previous_status == after.status:
            return None

        logger.info(
            "payment_status_changed",
            payment_id=payment_id,
            before=previous_status,
            after=after.status,
        )

        if not after.student_id:
            logger.error("payment_without_student", payment_id=payment_id)
            return None

        student = await self._students.get_student(after.student_id)
        if student is None:
            logger.error("student_not_found", student_id=after.student_id)
            return None

        messages = build_payment_messages(payment_id, after, student.name)
        if messages is None:
            logger.debug("payment_status_not_announced", status=after.status)
            return None

        outcome = PaymentNotificationOutcome(
            payment_id=payment_id,
            status=after.status,
            student_id=student.id,
        )

        if student.push_token:
            outcome.push_message_id = await self._send(
                ChannelType.PUSH, student.id, student.push_token, messages.push
            )
        else:
            logger.warning("no_push_token", student_id=student.id)

        if messages.email is not None:
            if student.email:
                outcome.email_message_id = await self._send(
                    ChannelType.EMAIL, student.id, student.email, messages.email
                )
            else:
                logger.warning("no_email_address", student_id=student.id)

        return outcome

    async def _send(
        self,
        channel: ChannelType,
        student_id: str,
        recipient: str,
        message: OutboundMessage,
    ) -> str | None:
        try:
            return await deliver(
                self._gateway, self._ledger, channel, student_id, recipient, message
            )
        except Exception as e:
            logger.error(
                "payment_notification_failed",
                channel=channel.value,
                student_id=student_id,
                error=str(e),
                exc_info=True,
            )
            return None
