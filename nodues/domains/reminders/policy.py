# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Channel policies for deadline reminders.

The push and email reminder jobs walk the same terms and fee structures
but differ in which paths they evaluate and which students qualify.
A ReminderPolicy captures those differences so one evaluator serves
both jobs.
"""

from dataclasses import dataclass
from enum import Enum

from nodues.infrastructure.database.models import StudentAccount
from nodues.infrastructure.notifications.channels import ChannelType

DEFAULT_OFFSETS: tuple[int, ...] = (7, 3, 1)


class ReminderKind(str, Enum):
    """What a reminder is about."""

    TERM_END = "term_end"
    FEE_DEADLINE = "fee_deadline"


@dataclass(frozen=True)
class ReminderPolicy:
    """Eligibility rules for one reminder channel.

    Attributes:
        channel: Delivery channel.
        include_term_end: Evaluate the term-end path.
        require_pending_status: Only consider students whose lifetime
            status is "Pending" on the fee-structure path.
        exclude_verified_payments: Skip students holding a verified
            payment for the term on the fee-structure path.
        charge_outstanding: Remind with fee amount minus paid fee and
            skip students with nothing outstanding. Otherwise remind
            with the fee amount.
    """

    channel: ChannelType
    include_term_end: bool
    require_pending_status: bool
    exclude_verified_payments: bool
    charge_outstanding: bool

    @property
    def name(self) -> str:
        return self.channel.value

    def recipient_of(self, student: StudentAccount) -> str | None:
        """Address of the student on this channel, if any."""
        if self.channel == ChannelType.PUSH:
            return student.push_token or None
        return student.email or None


PUSH_POLICY = ReminderPolicy(
    channel=ChannelType.PUSH,
    include_term_end=False,
    require_pending_status=True,
    exclude_verified_payments=False,
    charge_outstanding=True,
)

EMAIL_POLICY = ReminderPolicy(
    channel=ChannelType.EMAIL,
    include_term_end=True,
    require_pending_status=False,
    exclude_verified_payments=True,
    charge_outstanding=False,
)
