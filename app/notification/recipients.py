"""Recipient resolution: approved accounts that opted in to a category."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from app.core.constants import NOTIFICATION_CATEGORIES
from app.notification.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipient:
    user_id: UUID
    email: str
    full_name: str | None = None


class RecipientResolver:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def resolve(self, company_id: UUID, category: str) -> list[Recipient]:
        """Return accounts of *company_id* that are approved and opted in.

        An empty list means nobody qualifies.  Store errors propagate so the
        caller can decide whether to skip the company.
        """
        if category not in NOTIFICATION_CATEGORIES:
            raise ValueError(
                f"Invalid notification category {category!r}; "
                f"must be one of {sorted(NOTIFICATION_CATEGORIES)}"
            )

        approved = [p for p in self.store.approved_profiles(company_id) if p.approved is True]
        if not approved:
            logger.info("No approved users in company %s", company_id)
            return []

        opted_in = self.store.opted_in_user_ids([p.id for p in approved], category)

        recipients: list[Recipient] = []
        for profile in approved:
            if profile.id not in opted_in:
                continue
            if not profile.email:
                logger.warning("User %s has no email address, skipping", profile.id)
                continue
            recipients.append(Recipient(user_id=profile.id, email=profile.email, full_name=profile.full_name))

        if not recipients:
            logger.info("No users with %s enabled in company %s", category, company_id)
        return recipients
