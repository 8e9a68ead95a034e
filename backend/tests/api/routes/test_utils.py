"""Tests for /utils routes (liveness and health-check)."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from stager.core.config import Settings


def test_liveness_returns_200(client: TestClient) -> None:
    r = client.get("/utils/liveness/")
    assert r.status_code == 200
    assert r.json() is True


def test_health_check_returns_200_when_ready(client: TestClient) -> None:
    """GET /health-check/ returns 200 with true when templates, stage roots and engine are fine."""
    r = client.get("/utils/health-check/")
    assert r.status_code == 200
    assert r.json() is True


def test_health_check_reports_missing_template(
    client: TestClient, test_settings: Settings
) -> None:
    (test_settings.BASE_PATH / "downloads.28.png").unlink()
    r = client.get("/utils/health-check/")
    assert r.status_code == 503
    data = r.json()
    assert data["success"] is False
    assert data["data"] == ["template_missing:downloads.28.png"]


def test_health_check_returns_503_when_readiness_fails(client: TestClient) -> None:
    """GET /health-check/ returns 503 with envelope when readiness_check fails."""
    with patch(
        "stager.api.routes.utils.readiness_check", return_value=(False, ["storage_engine"])
    ):
        r = client.get("/utils/health-check/")
    assert r.status_code == 503
    data = r.json()
    assert data.get("success") is False
    assert "storage_engine" in data["data"]


def test_health_check_flags_missing_sqlite_shell(
    client: TestClient, test_settings: Settings
) -> None:
    test_settings.SQL_ENGINE = "sqlite-cli"
    test_settings.SQLITE_CLI_PATH = "/nonexistent/sqlite3"
    r = client.get("/utils/health-check/")
    assert r.status_code == 503
    assert "storage_engine" in r.json()["data"]
