# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the application factory."""

from nodues import __version__
from nodues.api import create_app


class TestCreateApp:
    """Tests for create_app."""

    def test_registers_routes(self):
        app = create_app()

        paths = {route.path for route in app.routes}

        assert "/health" in paths
        assert "/ready" in paths
        assert "/api/v1/events/payments/{payment_id}" in paths
        assert "/api/v1/events/users/{user_id}" in paths

    def test_version(self):
        assert create_app().version == __version__
