"""FastAPI dependency injection: database sessions, record store, mail transport."""
from __future__ import annotations

from collections.abc import Generator
from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.settings import Settings, get_settings
from app.db.session import get_session_factory
from app.notification.email_sender import EmailSender, MailTransport, SmtpConfig
from app.notification.store import RecordStore, SqlRecordStore


def get_db() -> Generator[Session, None, None]:
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    db = get_session_factory()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    return SqlRecordStore(db)


def get_mail_transport(settings: Settings = Depends(get_settings)) -> MailTransport:
    """SMTP transport built from settings read for this request.

    Raises ``MailConfigurationError`` before anything is sent when the
    relay is not fully configured.
    """
    return EmailSender(SmtpConfig.from_settings(settings))


def get_today(settings: Settings = Depends(get_settings)) -> date:
    """Current calendar date in the report timezone."""
    return datetime.now(ZoneInfo(settings.report_timezone)).date()
