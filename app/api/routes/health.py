"""GET /health: liveness check plus mail relay configuration status."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.settings import Settings, get_settings
from app.notification.email_sender import MailConfigurationError, SmtpConfig

router = APIRouter(tags=["health"])


@router.get("/health", summary="Basic health check")
def health_check(settings: Settings = Depends(get_settings)) -> dict[str, str | bool]:
    try:
        SmtpConfig.from_settings(settings)
        mail_configured = True
    except MailConfigurationError:
        mail_configured = False
    return {
        "status": "ok",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
        "mail_configured": mail_configured,
    }
