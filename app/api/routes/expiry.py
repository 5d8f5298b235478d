"""Document expiry sweep trigger: POST /check-document-expiry.

Invoked once per day by the scheduler.  Returns a JSON summary
(``documentsChecked`` / ``emailsSent``), a "nothing to do" message, or a
500 with ``{"error": ...}`` when the document set or the mail relay is
unavailable.
"""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from app.api.cors import json_response, preflight_response
from app.api.deps import get_db, get_mail_transport, get_record_store, get_today
from app.core.settings import Settings, get_settings
from app.notification.email_sender import MailTransport
from app.notification.expiry_sweep import ExpirySweep
from app.notification.notification_log import NotificationLog
from app.notification.store import RecordStore

router = APIRouter(tags=["expiry"])


@router.options("/check-document-expiry", include_in_schema=False)
def check_document_expiry_preflight() -> Response:
    return preflight_response()


@router.post("/check-document-expiry", summary="Run the daily document expiry sweep")
def check_document_expiry(
    today: date | None = Query(default=None, description="Override the run date (YYYY-MM-DD)"),
    default_today: date = Depends(get_today),
    store: RecordStore = Depends(get_record_store),
    transport: MailTransport = Depends(get_mail_transport),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    notification_log = NotificationLog(db) if settings.notification_dedup_enabled else None
    sweep = ExpirySweep(
        store,
        transport,
        locale=settings.date_locale,
        notification_log=notification_log,
    )
    report = sweep.run(today or default_today)
    return json_response(report.to_response())
