# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Message copy for payment status changes.

Verified and rejected payments are announced on push and email;
payments moved under review are announced on push only. Any other
status is silent.
"""

from dataclasses import dataclass
from decimal import Decimal
from html import escape

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from nodues.domains.delivery import OutboundMessage
from nodues.infrastructure.database.models import PaymentStatus
from nodues.utils.formatting import format_amount, format_rupees

VERIFIED_COLOR = "#4CAF50"
REJECTED_COLOR = "#F44336"
GENERIC_REJECTION_REASON = "Please contact admin"

_EMAIL_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: %(color)s; color: white; padding: 20px; text-align: center; }
    .content { padding: 20px; background: #f9f9f9; }
    .banner { background: %(color)s; color: white; padding: 15px; border-radius: 5px; margin: 20px 0; }
    .footer { text-align: center; padding: 20px; color: #666; font-size: 12px; }
"""


class PaymentSnapshot(BaseModel):
    """A payment document as seen before or after a change.

    Field names follow the document's camelCase keys on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    student_id: str | None = None
    amount: Decimal | None = None
    status: str | None = None
    rejection_reason: str | None = None
    transaction_id: str | None = None


@dataclass
class PaymentMessages:
    """Messages announcing one status change."""

    push: OutboundMessage
    email: OutboundMessage | None = None


def _email_html(title: str, color: str, student_name: str, inner_html: str) -> str:
    style = _EMAIL_STYLE % {"color": color}
    return f"""<!DOCTYPE html>
<html>
<head>
  <style>{style}</style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>{title}</h1>
    </div>
    <div class="content">
      <h2>Dear {escape(student_name or "Student")},</h2>
{inner_html}
    </div>
    <div class="footer">
      <p>APEC Digital No-Dues System</p>
    </div>
  </div>
</body>
</html>
"""


def build_payment_messages(
    payment_id: str,
    payment: PaymentSnapshot,
    student_name: str,
) -> PaymentMessages | None:
    """Build the messages for a payment's new status.

    Args:
        payment_id: Id of the payment document.
        payment: Payment after the change.
        student_name: Name used in the email greeting.

    Returns:
        Messages to send, or None when the status is not announced.
    """
    status = payment.status
    amount = format_rupees(payment.amount)

    if status == PaymentStatus.VERIFIED.value:
        notification_type = "payment_verified"
        push_title = "✅ Payment Verified"
        push_body = f"Your payment of {amount} has been verified successfully!"
        color = VERIFIED_COLOR
        email = OutboundMessage(
            notification_type=notification_type,
            title="✅ Payment Verified - APEC No-Dues",
            body=f"Your payment of {amount} has been verified.",
            html=_email_html(
                "Payment Verified!",
                VERIFIED_COLOR,
                student_name,
                f"""      <div class="banner" style="text-align: center;">
        <h3>✅ Your payment has been verified!</h3>
      </div>
      <h3>Payment Details:</h3>
      <ul>
        <li><strong>Amount:</strong> {amount}</li>
        <li><strong>Transaction ID:</strong> {escape(payment.transaction_id or "N/A")}</li>
        <li><strong>Status:</strong> Verified</li>
      </ul>
      <p>You can now download your No-Dues certificate from the app.</p>""",
            ),
        )
    elif status == PaymentStatus.REJECTED.value:
        notification_type = "payment_rejected"
        push_title = "❌ Payment Rejected"
        if payment.rejection_reason:
            push_body = f"Your payment was rejected. Reason: {payment.rejection_reason}"
        else:
            push_body = f"Your payment was rejected. {GENERIC_REJECTION_REASON}."
        color = REJECTED_COLOR
        reason = payment.rejection_reason or GENERIC_REJECTION_REASON
        email = OutboundMessage(
            notification_type=notification_type,
            title="❌ Payment Rejected - APEC No-Dues",
            body=f"Your payment submission was rejected. Reason: {reason}",
            html=_email_html(
                "Payment Rejected",
                REJECTED_COLOR,
                student_name,
                f"""      <div class="banner">
        <h3>❌ Your payment submission was rejected</h3>
      </div>
      <p><strong>Reason:</strong> {escape(reason)}</p>
      <p>Please resubmit your payment with the correct details.</p>""",
            ),
        )
    elif status == PaymentStatus.UNDER_REVIEW.value:
        notification_type = "payment_under_review"
        push_title = "🔍 Payment Under Review"
        push_body = f"Your payment of {amount} is being reviewed by the admin."
        color = REJECTED_COLOR
        email = None
    else:
        return None

    data = {
        "type": notification_type,
        "status": status,
        "paymentId": payment_id,
        "amount": format_amount(payment.amount),
    }
    if email is not None:
        email.data = dict(data)

    return PaymentMessages(
        push=OutboundMessage(
            notification_type=notification_type,
            title=push_title,
            body=push_body,
            data=data,
            accent_color=color,
        ),
        email=email,
    )
