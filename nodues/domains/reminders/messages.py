# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Message copy for deadline reminders."""

from html import escape
from typing import Any

from nodues.domains.delivery import OutboundMessage
from nodues.domains.reminders.evaluator import ReminderCandidate
from nodues.domains.reminders.policy import ReminderKind
from nodues.utils.datetime import format_iso, format_local_date
from nodues.utils.formatting import format_amount, format_rupees, pluralize

REMINDER_ACCENT_COLOR = "#FF6B35"
FEE_REMINDER_TYPE = "payment_reminder"
TERM_END_REMINDER_TYPE = "term_end_reminder"


def _reminder_data(candidate: ReminderCandidate, notification_type: str) -> dict[str, Any]:
    return {
        "type": notification_type,
        "amount": format_amount(candidate.amount),
        "deadline": format_iso(candidate.due_at),
        "daysRemaining": str(candidate.days_remaining),
    }


def build_push_reminder(candidate: ReminderCandidate) -> OutboundMessage:
    """Build the push notification for a reminder candidate."""
    amount = format_rupees(candidate.amount)
    days = candidate.days_remaining

    if candidate.kind == ReminderKind.TERM_END:
        return OutboundMessage(
            notification_type=TERM_END_REMINDER_TYPE,
            title="⚠️ Semester Ending Soon",
            body=f"Your semester ends in {days} day(s). Outstanding dues: {amount}",
            data=_reminder_data(candidate, TERM_END_REMINDER_TYPE),
            accent_color=REMINDER_ACCENT_COLOR,
        )

    return OutboundMessage(
        notification_type=FEE_REMINDER_TYPE,
        title="⚠️ Fee Payment Reminder",
        body=f"Your fee payment deadline is in {days} day(s). Amount due: {amount}",
        data=_reminder_data(candidate, FEE_REMINDER_TYPE),
        accent_color=REMINDER_ACCENT_COLOR,
    )


def build_email_reminder(
    candidate: ReminderCandidate,
    timezone: str,
    portal_url: str,
) -> OutboundMessage:
    """Build the email for a reminder candidate.

    Args:
        candidate: Reminder to render.
        timezone: Timezone dates are shown in.
        portal_url: Student portal linked from term-end reminders.

    Returns:
        Email content with subject, HTML and plain text.
    """
    days = candidate.days_remaining
    day_word = pluralize(days, "Day")
    amount = format_rupees(candidate.amount)
    due_date = format_local_date(candidate.due_at, timezone)
    name = escape(candidate.student_name or "Student")

    if candidate.kind == ReminderKind.TERM_END:
        html = f"""
<h2>Dear {name},</h2>
<p>Your semester is ending on {due_date}.</p>
<p>Our records show that you still have outstanding dues of <strong>{amount}</strong>.</p>
<p>Please clear all dues to be eligible for your <strong>No-Dues Certificate</strong> and exams.</p>
<a href="{escape(portal_url, quote=True)}" style="padding: 10px 20px; background: #f44336; color: white; text-decoration: none; border-radius: 5px;">Clear Dues Now</a>
"""
        return OutboundMessage(
            notification_type=TERM_END_REMINDER_TYPE,
            title=f"⚠️ Final Reminder: Semester Ending in {days} {day_word}",
            body=(
                f"Your semester is ending on {due_date}. "
                f"Outstanding dues: {amount}. Clear them at {portal_url}"
            ),
            data=_reminder_data(candidate, TERM_END_REMINDER_TYPE),
            html=html,
        )

    fee_name = escape(candidate.fee_name or "your fee payment")
    html = f"""
<div style="font-family: sans-serif; padding: 20px; border: 1px solid #eee;">
  <h2>Hello {name},</h2>
  <p>This is a reminder that the deadline for <strong>{fee_name}</strong> is in {days} {pluralize(days, "day")}.</p>
  <p><strong>Deadline:</strong> {due_date}</p>
  <p><strong>Amount:</strong> {amount}</p>
  <p>Please log in to the APEC No-Dues portal to complete your payment.</p>
</div>
"""
    return OutboundMessage(
        notification_type=FEE_REMINDER_TYPE,
        title=f"Payment Reminder: {days} {day_word} Left",
        body=f"Deadline for {candidate.fee_name or 'your fee payment'}: {due_date}. Amount: {amount}",
        data=_reminder_data(candidate, FEE_REMINDER_TYPE),
        html=html,
    )
