"""Append-only record of sent expiry reminders.

Consulted by the sweep (when deduplication is enabled) so that a second
invocation on the same day does not resend reminders already delivered.
Flushes but does **not** commit; the caller owns the transaction.
"""
from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from app.db.models import NotificationLogEntry
from app.db.repositories import NotificationLogRepository

logger = logging.getLogger(__name__)


class NotificationLog:
    def __init__(self, db: Session) -> None:
        self._repo = NotificationLogRepository(db)

    def already_sent(self, document_id: UUID, user_id: UUID, day: date) -> bool:
        return self._repo.exists(document_id, user_id, day)

    def record(self, document_id: UUID, user_id: UUID, day: date) -> NotificationLogEntry:
        entry = self._repo.create(document_id=document_id, user_id=user_id, notified_on=day)
        logger.debug("Logged reminder: document=%s user=%s day=%s", document_id, user_id, day)
        return entry
