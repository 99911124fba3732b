# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Push notification channel using Firebase Cloud Messaging.

This channel sends push notifications to mobile devices and browsers
using the FCM HTTP v1 API. It requires valid Firebase service account
credentials to be configured.

Configuration (via FirebaseSettings):
- FIREBASE_CREDENTIALS_PATH: Path to service account JSON file
- FIREBASE_PROJECT_ID: Firebase project ID
- FIREBASE_WEB_ICON: Icon used by browsers for web push
"""

import asyncio
import os
from typing import Any

import httpx
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from nodues.core.config.settings import FirebaseSettings
from nodues.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    NotificationPayload,
)

# FCM HTTP v1 API endpoint template
FCM_API_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
FCM_SCOPES = ["https://www.googleapis.com/auth/firebase.messaging"]


class PushChannel(BaseChannel):
    """Push notification channel using Firebase Cloud Messaging.

    One message is sent per token; FCM HTTP v1 has no multicast
    endpoint. Data payload values are coerced to strings as FCM
    requires.

    Args:
        settings: Firebase configuration.
        http_client: Optional shared HTTP client. When omitted the
            channel creates and owns one.
        credentials: Optional preloaded google-auth credentials.
    """

    def __init__(
        self,
        settings: FirebaseSettings,
        http_client: httpx.AsyncClient | None = None,
        credentials: Any | None = None,
    ) -> None:
        """Initialize the push channel."""
        super().__init__()
        self._settings = settings
        self._client = http_client
        self._owns_client = http_client is None
        self._credentials = credentials
        self._initialized = credentials is not None
        self._init_error: str | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def channel_type(self) -> ChannelType:
        """Return the channel type."""
        return ChannelType.PUSH

    def _ensure_initialized(self) -> bool:
        """Ensure Firebase credentials are loaded.

        Returns:
            True if initialization succeeded.
        """
        if self._initialized:
            return True

        if self._init_error:
            return False

        if not self._settings.is_configured:
            self._init_error = "Firebase credentials not configured"
            self.logger.warning(
                "Push notifications disabled: FIREBASE_CREDENTIALS_PATH or "
                "FIREBASE_PROJECT_ID not set"
            )
            return False

        credentials_path = self._settings.credentials_path
        if not os.path.exists(credentials_path):
            self._init_error = f"Credentials file not found: {credentials_path}"
            self.logger.error(self._init_error)
            return False

        try:
            self._credentials = service_account.Credentials.from_service_account_file(
                credentials_path,
                scopes=FCM_SCOPES,
            )
        except (ValueError, OSError) as e:
            self._init_error = f"Failed to load credentials: {e}"
            self.logger.error(self._init_error)
            return False

        self._initialized = True
        self.logger.info(
            "FCM push channel initialized for project %s", self._settings.project_id
        )
        return True

    async def _get_access_token(self) -> str | None:
        """Get OAuth2 access token for FCM API.

        Returns:
            Access token string or None if failed.
        """
        if not self._credentials:
            return None

        try:
            if not self._credentials.valid:
                async with self._refresh_lock:
                    # another send may have refreshed while this one waited
                    if not self._credentials.valid:
                        # google-auth refresh is blocking
                        loop = asyncio.get_running_loop()
                        await loop.run_in_executor(
                            None, self._credentials.refresh, Request()
                        )
            return self._credentials.token

        except Exception as e:
            self.logger.error("Failed to get FCM access token: %s", str(e))
            return None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Send push notification via FCM.

        Args:
            payload: The notification payload.

        Returns:
            ChannelResult with delivery status.
        """
        if not payload.push_token:
            return self.create_skipped_result("No push token available")

        if not self._ensure_initialized():
            return self.create_skipped_result(
                self._init_error or "Push channel not configured"
            )

        access_token = await self._get_access_token()
        if not access_token:
            return self.create_failure_result("Failed to obtain access token")

        url = FCM_API_URL.format(project_id=self._settings.project_id)
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }
        token_hint = payload.push_token[:20] + "..."

        try:
            response = await self._get_client().post(
                url,
                headers=headers,
                json={"message": self.build_message(payload)},
            )
        except httpx.HTTPError as e:
            self.logger.error("Failed to send push to %s: %s", token_hint, str(e))
            return self.create_failure_result(
                f"FCM transport error: {e}",
                metadata={"token": token_hint},
            )

        if response.status_code != 200:
            self.logger.warning(
                "FCM request failed (%d): %s",
                response.status_code,
                response.text,
            )
            return self.create_failure_result(
                response.text,
                metadata={"token": token_hint, "status_code": response.status_code},
            )

        message_id = response.json().get("name", "").split("/")[-1]
        self.logger.debug("Push sent successfully to %s: %s", token_hint, message_id)
        return self.create_success_result(
            message_id=message_id,
            metadata={"token": token_hint},
        )

    def build_message(self, payload: NotificationPayload) -> dict[str, Any]:
        """Build FCM message structure.

        Args:
            payload: Notification payload.

        Returns:
            FCM message dictionary.
        """
        android_notification: dict[str, Any] = {"sound": "default"}
        if payload.accent_color:
            android_notification["color"] = payload.accent_color

        return {
            "token": payload.push_token,
            "notification": {
                "title": payload.title,
                "body": payload.message,
            },
            "data": {key: str(value) for key, value in payload.data.items()},
            "android": {
                "priority": payload.priority,
                "notification": android_notification,
            },
            "webpush": {
                "notification": {
                    "icon": self._settings.web_icon,
                },
            },
        }

    async def aclose(self) -> None:
        """Close the owned HTTP client."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
