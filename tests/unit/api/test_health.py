# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the health endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from nodues.api.dependencies import get_database
from nodues.api.routes import health


def _client(database) -> TestClient:
    app = FastAPI()
    app.include_router(health.router)
    app.dependency_overrides[get_database] = lambda: database
    return TestClient(app)


@pytest.fixture
def healthy_database() -> MagicMock:
    database = MagicMock()
    database.check_connection = AsyncMock(return_value=True)
    return database


class TestHealth:
    """GET /health and GET /ready."""

    def test_health_reports_database(self, healthy_database):
        response = _client(healthy_database).get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["database"]["status"] == "healthy"
        assert body["status"] in {"healthy", "degraded"}
        assert "task_count" in body["scheduler"]

    def test_health_without_database(self):
        body = _client(None).get("/health").json()

        assert body["status"] == "unhealthy"
        assert body["database"]["message"] == "Database not initialized"

    def test_ready(self, healthy_database):
        body = _client(healthy_database).get("/ready").json()

        assert body["ready"] is True

    def test_not_ready_when_database_unreachable(self, healthy_database):
        healthy_database.check_connection.return_value = False

        body = _client(healthy_database).get("/ready").json()

        assert body["ready"] is False
