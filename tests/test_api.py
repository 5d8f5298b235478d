"""Tests for the FastAPI routes.

Covers:
- POST /check-document-expiry : sweep summary, nothing-to-do, 500 errors
- OPTIONS /check-document-expiry : CORS pre-flight
- POST /send-notification-email : preference-gated single send
"""
from __future__ import annotations

from datetime import date, timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_mail_transport, get_record_store, get_today
from app.core.settings import Settings, get_settings

TODAY = date(2025, 3, 1)
DUE = TODAY + timedelta(days=30)


def _settings(**overrides) -> Settings:
    values = {
        "DATABASE_URL": "sqlite+pysqlite:///:memory:",
        "EMAIL_HOST": "smtp.example.com",
        "EMAIL_USER": "varsler@avisafe.example",
        "EMAIL_PASS": "secret",
    }
    values.update(overrides)
    return Settings(**values)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def app_settings() -> dict:
    return {"settings": _settings()}


@pytest.fixture()
def client(db_session: Session, fake_transport, app_settings, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    """TestClient with DB, mail transport, clock and settings overridden."""
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")

    get_settings.cache_clear()

    from app.api.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_mail_transport] = lambda: fake_transport
    app.dependency_overrides[get_today] = lambda: TODAY
    app.dependency_overrides[get_settings] = lambda: app_settings["settings"]
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()
    get_settings.cache_clear()


# ===========================================================================
# POST /check-document-expiry
# ===========================================================================

class TestCheckDocumentExpiry:
    def test_summary_for_due_document(self, client, records, fake_transport):
        company = records.company()
        records.user(company, "kari@example.com")
        records.user(company, "ola@example.com")
        records.document(company, "Operatørsertifikat", DUE)

        resp = client.post("/check-document-expiry")

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "documentsChecked": 1, "emailsSent": 2}
        assert resp.headers["access-control-allow-origin"] == "*"
        assert len(fake_transport.sent) == 2

    def test_nothing_to_do(self, client, records, fake_transport):
        company = records.company()
        records.user(company, "kari@example.com")
        records.document(company, "Operatørsertifikat", DUE + timedelta(days=3))

        resp = client.post("/check-document-expiry")

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "No notifications needed today"}
        assert fake_transport.sent == []

    def test_today_query_overrides_clock(self, client, records, fake_transport):
        company = records.company()
        records.user(company, "kari@example.com")
        records.document(company, "Operatørsertifikat", date(2025, 6, 30))

        resp = client.post("/check-document-expiry", params={"today": "2025-05-31"})

        assert resp.json() == {"success": True, "documentsChecked": 1, "emailsSent": 1}

    def test_loading_failure_returns_500(self, client):
        store = MagicMock()
        store.documents_with_expiry.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        client.app.dependency_overrides[get_record_store] = lambda: store

        resp = client.post("/check-document-expiry")

        assert resp.status_code == 500
        assert "Could not load documents" in resp.json()["error"]
        assert "success" not in resp.json()

    def test_unexpected_error_returns_json_500(self, client):
        store = MagicMock()
        store.documents_with_expiry.side_effect = ValueError("malformed row")
        client.app.dependency_overrides[get_record_store] = lambda: store

        resp = client.post("/check-document-expiry")

        assert resp.status_code == 500
        assert resp.json() == {"error": "malformed row"}
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_missing_mail_configuration_returns_500(self, client, app_settings, records, fake_transport):
        app_settings["settings"] = _settings(EMAIL_HOST=None)
        del client.app.dependency_overrides[get_mail_transport]
        company = records.company()
        records.user(company, "kari@example.com")
        records.document(company, "Operatørsertifikat", DUE)

        resp = client.post("/check-document-expiry")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Missing email configuration: EMAIL_HOST"}
        assert fake_transport.attempts == []

    def test_dedup_enabled_suppresses_second_run(self, client, app_settings, records, fake_transport):
        app_settings["settings"] = _settings(NOTIFICATION_DEDUP_ENABLED=True)
        company = records.company()
        records.user(company, "kari@example.com")
        records.document(company, "Operatørsertifikat", DUE)

        first = client.post("/check-document-expiry")
        second = client.post("/check-document-expiry")

        assert first.json()["emailsSent"] == 1
        assert second.json()["emailsSent"] == 0
        assert len(fake_transport.sent) == 1

    def test_preflight(self, client):
        resp = client.options("/check-document-expiry")

        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "apikey" in resp.headers["access-control-allow-headers"]


# ===========================================================================
# POST /send-notification-email
# ===========================================================================

class TestSendNotificationEmail:
    def _body(self, user_id, notification_type="email_new_incident") -> dict:
        return {
            "recipientId": str(user_id),
            "notificationType": notification_type,
            "subject": "Ny hendelse",
            "htmlContent": "<p>Ny hendelse registrert</p>",
        }

    def test_enabled_category_sends(self, client, records, fake_transport):
        company = records.company()
        user = records.user(company, "kari@example.com", email_new_incident=True)

        resp = client.post("/send-notification-email", json=self._body(user.id))

        assert resp.status_code == 200
        assert resp.json() == {"message": "Email sent successfully"}
        assert fake_transport.sent == [("kari@example.com", "Ny hendelse", "<p>Ny hendelse registrert</p>")]

    def test_disabled_category_is_not_sent(self, client, records, fake_transport):
        company = records.company()
        user = records.user(company, "kari@example.com")

        resp = client.post("/send-notification-email", json=self._body(user.id))

        assert resp.status_code == 200
        assert resp.json() == {"message": "User has disabled this notification type"}
        assert fake_transport.attempts == []

    def test_missing_email_returns_500(self, client, records):
        company = records.company()
        user = records.user(company, None, email_new_incident=True)

        resp = client.post("/send-notification-email", json=self._body(user.id))

        assert resp.status_code == 500
        assert resp.json() == {"error": "User email not found"}

    def test_unknown_user_without_preferences_is_disabled(self, client):
        resp = client.post("/send-notification-email", json=self._body(uuid4()))

        assert resp.status_code == 200
        assert resp.json()["message"] == "User has disabled this notification type"

    def test_delivery_failure_returns_500(self, client, records, fake_transport):
        fake_transport.fail_for.add("bad@example.com")
        company = records.company()
        user = records.user(company, "bad@example.com", email_new_incident=True)

        resp = client.post("/send-notification-email", json=self._body(user.id))

        assert resp.status_code == 500
        assert "mailbox unavailable" in resp.json()["error"]

    def test_invalid_notification_type_rejected(self, client):
        resp = client.post("/send-notification-email", json=self._body(uuid4(), "email_spam"))

        assert resp.status_code == 422
