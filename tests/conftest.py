import os
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.models import Company, Document, EmailTemplate, NotificationPreference, Profile
from app.notification.email_sender import DeliveryReceipt


class FakeTransport:
    """Records every send; fails for addresses listed in *fail_for*."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.fail_for = fail_for or set()
        self.sent: list[tuple[str, str, str]] = []
        self.attempts: list[tuple[str, str, str]] = []

    def send(self, to_address: str, subject: str, html_body: str) -> DeliveryReceipt:
        self.attempts.append((to_address, subject, html_body))
        if to_address in self.fail_for:
            return DeliveryReceipt(
                status="FAILED",
                timestamp=datetime.now(timezone.utc),
                error="550 mailbox unavailable",
            )
        self.sent.append((to_address, subject, html_body))
        return DeliveryReceipt(status="SENT", timestamp=datetime.now(timezone.utc))


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture()
def db_session():
    """In-memory SQLite session with all tables created."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")

    from app.core.settings import get_settings

    get_settings.cache_clear()

    from app.main import app

    with TestClient(app) as test_client:
        yield test_client

    get_settings.cache_clear()
    os.environ.pop("DATABASE_URL", None)


class RecordBuilder:
    """Insert companies, users and documents into the test session."""

    def __init__(self, session) -> None:
        self.session = session

    def company(self, name: str = "AviSafe AS"):
        company = Company(name=name)
        self.session.add(company)
        self.session.flush()
        return company

    def user(self, company, email: str | None, *, approved: bool | None = True, opted_in: bool | None = True, **flags):
        profile = Profile(company_id=company.id, email=email, full_name=email, approved=approved)
        self.session.add(profile)
        self.session.flush()
        if opted_in is not None:
            self.session.add(NotificationPreference(user_id=profile.id, email_document_expiry=opted_in, **flags))
            self.session.flush()
        return profile

    def document(self, company, title: str, expires_on, lead_days: int | None = 30, category: str = "Sertifikat"):
        doc = Document(
            company_id=company.id,
            title=title,
            category=category,
            expires_on=expires_on,
            lead_days=lead_days,
        )
        self.session.add(doc)
        self.session.flush()
        return doc

    def template(self, company, subject: str, content: str, template_type: str = "document_reminder"):
        tpl = EmailTemplate(company_id=company.id, template_type=template_type, subject=subject, content=content)
        self.session.add(tpl)
        self.session.flush()
        return tpl


@pytest.fixture
def records(db_session) -> RecordBuilder:
    return RecordBuilder(db_session)
