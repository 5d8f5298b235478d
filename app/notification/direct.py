"""Single-recipient notifications gated by the user's preferences.

Used by the dashboard to notify one user about a new incident, mission,
pending account or follow-up assignment.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal
from uuid import UUID

from app.core.constants import NOTIFICATION_CATEGORIES
from app.notification.email_sender import DeliveryReceipt, MailTransport
from app.notification.store import RecordStore

logger = logging.getLogger(__name__)


class RecipientNotFoundError(LookupError):
    """The user does not exist or has no email address."""


@dataclass
class DirectNotificationResult:
    status: Literal["SENT", "FAILED", "DISABLED"]
    receipt: DeliveryReceipt | None = None


def send_user_notification(
    store: RecordStore,
    transport: MailTransport,
    user_id: UUID,
    category: str,
    subject: str,
    html_content: str,
) -> DirectNotificationResult:
    """Send *subject*/*html_content* to *user_id* if *category* is enabled.

    A missing preference row counts as disabled.
    """
    if category not in NOTIFICATION_CATEGORIES:
        raise ValueError(
            f"Invalid notification category {category!r}; "
            f"must be one of {sorted(NOTIFICATION_CATEGORIES)}"
        )

    prefs = store.preference_for(user_id)
    if prefs is None or not getattr(prefs, category):
        logger.info("User %s has disabled notification type %s", user_id, category)
        return DirectNotificationResult(status="DISABLED")

    profile = store.profile(user_id)
    if profile is None or not profile.email:
        raise RecipientNotFoundError("User email not found")

    receipt = transport.send(profile.email, subject, html_content)
    if receipt.sent:
        logger.info("Notification %s sent to user %s", category, user_id)
    else:
        logger.error("Notification %s to user %s failed: %s", category, user_id, receipt.error)
    return DirectNotificationResult(status=receipt.status, receipt=receipt)
