# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User lifecycle notifier.

Sends a one-time welcome push when a student's app registers its first
push token, which happens on the student's first sign-in.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from nodues.domains.delivery import OutboundMessage, deliver
from nodues.infrastructure.database.models import STUDENT_ROLE
from nodues.infrastructure.notifications import (
    ChannelType,
    MessagingGateway,
    NotificationLedger,
)
from nodues.utils.logging import get_logger

logger = get_logger(__name__)

WELCOME_TYPE = "welcome"


class UserSnapshot(BaseModel):
    """A user document as seen before or after a change.

    The push token is accepted under pushToken or its legacy key
    fcmToken.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    email: str | None = None
    role: str | None = None
    push_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("pushToken", "fcmToken", "push_token"),
    )


def build_welcome_message(app_name: str, name: str | None) -> OutboundMessage:
    """Build the welcome push for a new student."""
    return OutboundMessage(
        notification_type=WELCOME_TYPE,
        title=f"Welcome to {app_name}",
        body=f"Hello {name or 'Student'}! You can now manage your fee payments digitally.",
        data={"type": WELCOME_TYPE},
    )


class UserLifecycleNotifier:
    """Welcomes students on their first push token registration.

    Attributes:
        _gateway: Messaging gateway.
        _ledger: Notification ledger.
        _app_name: Product name used in the welcome title.
    """

    def __init__(
        self,
        gateway: MessagingGateway,
        ledger: NotificationLedger,
        app_name: str,
    ) -> None:
        self._gateway = gateway
        self._ledger = ledger
        self._app_name = app_name

    @staticmethod
    def is_first_registration(before: UserSnapshot | None, after: UserSnapshot) -> bool:
        """Whether the push token went from absent to present on a student."""
        had_token = bool(before is not None and before.push_token)
        return not had_token and bool(after.push_token) and after.role == STUDENT_ROLE

    async def handle_update(
        self,
        user_id: str,
        before: UserSnapshot | None,
        after: UserSnapshot,
    ) -> str | None:
        """Handle one user update.

        Args:
            user_id: Id of the updated user.
            before: User before the update.
            after: User after the update.

        Returns:
            Message id of the welcome push, or None if none was sent.
        """
        if not self.is_first_registration(before, after):
            return None

        message_id = await deliver(
            self._gateway,
            self._ledger,
            ChannelType.PUSH,
            user_id,
            after.push_token,
            build_welcome_message(self._app_name, after.name),
        )

        if message_id is None:
            logger.error("welcome_notification_failed", user_id=user_id)
        else:
            logger.info("welcome_notification_sent", user_id=user_id, message_id=message_id)
        return message_id
