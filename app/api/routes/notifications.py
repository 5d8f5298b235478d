"""Single-user notification route: POST /send-notification-email."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from app.api.cors import json_response, preflight_response
from app.api.deps import get_mail_transport, get_record_store
from app.notification.direct import send_user_notification
from app.notification.email_sender import MailTransport
from app.notification.store import RecordStore

router = APIRouter(tags=["notifications"])


class SendNotificationBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipient_id: UUID = Field(alias="recipientId")
    notification_type: Literal[
        "email_new_incident",
        "email_new_mission",
        "email_document_expiry",
        "email_new_user_pending",
        "email_followup_assigned",
    ] = Field(alias="notificationType")
    subject: str = Field(min_length=1)
    html_content: str = Field(alias="htmlContent")


@router.options("/send-notification-email", include_in_schema=False)
def send_notification_preflight() -> Response:
    return preflight_response()


@router.post("/send-notification-email", summary="Email one user if the notification type is enabled")
def send_notification_email(
    body: SendNotificationBody,
    store: RecordStore = Depends(get_record_store),
    transport: MailTransport = Depends(get_mail_transport),
) -> JSONResponse:
    result = send_user_notification(
        store,
        transport,
        body.recipient_id,
        body.notification_type,
        body.subject,
        body.html_content,
    )
    if result.status == "DISABLED":
        return json_response({"message": "User has disabled this notification type"})
    if result.status == "FAILED":
        return json_response({"error": result.receipt.error or "Email delivery failed"}, status_code=500)
    return json_response({"message": "Email sent successfully"})
