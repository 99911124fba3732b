# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Email notification channel using the SendGrid v3 API.

The channel posts a mail/send request over httpx with a bearer API
key. Both a plain text and an HTML part are sent when available.

Configuration (via SendGridSettings):
- SENDGRID_API_KEY: API key
- SENDGRID_FROM_EMAIL: Verified sender address
- SENDGRID_FROM_NAME: Sender display name
"""

from email.utils import make_msgid
from typing import Any

import httpx

from nodues.core.config.settings import SendGridSettings
from nodues.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    NotificationPayload,
)

# SendGrid answers 202 Accepted for queued mail
ACCEPTED_STATUS_CODES = (200, 202)


class EmailChannel(BaseChannel):
    """Email notification channel using SendGrid.

    Args:
        settings: SendGrid configuration.
        http_client: Optional shared HTTP client. When omitted the
            channel creates and owns one.
    """

    def __init__(
        self,
        settings: SendGridSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the email channel."""
        super().__init__()
        self._settings = settings
        self._client = http_client
        self._owns_client = http_client is None
        self._warned_unconfigured = False

    @property
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        return ChannelType.EMAIL

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Send email notification via SendGrid.

        Args:
            payload: The notification payload.

        Returns:
            ChannelResult with delivery status.
        """
        if not payload.recipient_email:
            return self.create_skipped_result("No recipient email address")

        if not self._settings.is_configured:
            if not self._warned_unconfigured:
                self.logger.warning("Email notifications disabled: SENDGRID_API_KEY not set")
                self._warned_unconfigured = True
            return self.create_skipped_result("Email channel not configured")

        api_key = self._settings.api_key.get_secret_value()
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._get_client().post(
                self._settings.api_url,
                headers=headers,
                json=self.build_request(payload),
            )
        except httpx.HTTPError as e:
            self.logger.error(
                "Failed to send email to %s: %s",
                payload.recipient_email,
                str(e),
            )
            return self.create_failure_result(
                f"SendGrid transport error: {e}",
                metadata={"recipient": payload.recipient_email},
            )

        if response.status_code not in ACCEPTED_STATUS_CODES:
            self.logger.warning(
                "SendGrid request failed (%d): %s",
                response.status_code,
                response.text,
            )
            return self.create_failure_result(
                response.text,
                metadata={
                    "recipient": payload.recipient_email,
                    "status_code": response.status_code,
                },
            )

        message_id = response.headers.get("X-Message-Id") or make_msgid()
        self.logger.info("Email sent to %s: %s", payload.recipient_email, payload.title)
        return self.create_success_result(
            message_id=message_id,
            metadata={"recipient": payload.recipient_email},
        )

    def build_request(self, payload: NotificationPayload) -> dict[str, Any]:
        """Build the SendGrid mail/send request body.

        Args:
            payload: Notification payload.

        Returns:
            Request body dictionary.
        """
        content: list[dict[str, str]] = []
        if payload.message:
            content.append({"type": "text/plain", "value": payload.message})
        if payload.html_body:
            content.append({"type": "text/html", "value": payload.html_body})

        return {
            "personalizations": [{"to": [{"email": payload.recipient_email}]}],
            "from": {
                "email": self._settings.from_email,
                "name": self._settings.from_name,
            },
            "subject": payload.title,
            "content": content,
        }

    async def aclose(self) -> None:
        """Close the owned HTTP client."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
