"""Read-only record access for the notification core.

``RecordStore`` is the narrow interface the sweep depends on; the
SQLAlchemy implementation delegates to the repositories in
``app.db.repositories``.  Tests may substitute any object with the same
methods.
"""
from __future__ import annotations

from collections.abc import Iterable
from contextlib import AbstractContextManager
from typing import Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from app.db.models import Company, Document, EmailTemplate, NotificationPreference, Profile
from app.db.repositories import (
    CompanyRepository,
    DocumentRepository,
    EmailTemplateRepository,
    NotificationPreferenceRepository,
    ProfileRepository,
)


class RecordStore(Protocol):
    def documents_with_expiry(self) -> list[Document]:
        ...

    def approved_profiles(self, company_id: UUID) -> list[Profile]:
        ...

    def opted_in_user_ids(self, user_ids: Iterable[UUID], category: str) -> set[UUID]:
        ...

    def preference_for(self, user_id: UUID) -> NotificationPreference | None:
        ...

    def profile(self, user_id: UUID) -> Profile | None:
        ...

    def company(self, company_id: UUID) -> Company | None:
        ...

    def email_template(self, company_id: UUID, template_type: str) -> EmailTemplate | None:
        ...

    def savepoint(self) -> AbstractContextManager:
        ...


class SqlRecordStore:
    """``RecordStore`` backed by a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self._documents = DocumentRepository(db)
        self._profiles = ProfileRepository(db)
        self._preferences = NotificationPreferenceRepository(db)
        self._companies = CompanyRepository(db)
        self._templates = EmailTemplateRepository(db)

    def documents_with_expiry(self) -> list[Document]:
        return self._documents.list_with_expiry()

    def approved_profiles(self, company_id: UUID) -> list[Profile]:
        return self._profiles.list_approved(company_id)

    def opted_in_user_ids(self, user_ids: Iterable[UUID], category: str) -> set[UUID]:
        return self._preferences.opted_in_user_ids(user_ids, category)

    def preference_for(self, user_id: UUID) -> NotificationPreference | None:
        return self._preferences.for_user(user_id)

    def profile(self, user_id: UUID) -> Profile | None:
        return self._profiles.get(user_id)

    def company(self, company_id: UUID) -> Company | None:
        return self._companies.get(company_id)

    def email_template(self, company_id: UUID, template_type: str) -> EmailTemplate | None:
        return self._templates.find(company_id, template_type)

    def savepoint(self) -> AbstractContextManager:
        """SAVEPOINT scope.

        An error inside it rolls back to the savepoint only; earlier flushed
        rows survive and the session stays usable on Postgres.
        """
        return self.db.begin_nested()
