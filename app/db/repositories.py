from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.constants import NOTIFICATION_CATEGORIES
from app.db import models

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def create(self, **kwargs) -> ModelT:
        entity = self.model(**kwargs)
        self.db.add(entity)
        self.db.flush()
        return entity

    def get(self, entity_id: UUID) -> ModelT | None:
        return self.db.get(self.model, entity_id)

    def list(self, limit: int = 100, offset: int = 0) -> list[ModelT]:
        stmt = select(self.model).offset(offset).limit(limit)
        return self.db.execute(stmt).scalars().all()

    def update(self, entity: ModelT, **kwargs) -> ModelT:
        for key, value in kwargs.items():
            setattr(entity, key, value)
        self.db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)
        self.db.flush()


class CompanyRepository(BaseRepository[models.Company]):
    model = models.Company


class ProfileRepository(BaseRepository[models.Profile]):
    model = models.Profile

    def list_approved(self, company_id: UUID) -> list[models.Profile]:
        """Approved accounts of *company_id*, ordered by id."""
        stmt = (
            select(models.Profile)
            .where(models.Profile.company_id == company_id)
            .where(models.Profile.approved.is_(True))
            .order_by(models.Profile.id)
        )
        return list(self.db.execute(stmt).scalars().all())


class NotificationPreferenceRepository(BaseRepository[models.NotificationPreference]):
    model = models.NotificationPreference

    def for_user(self, user_id: UUID) -> models.NotificationPreference | None:
        stmt = select(models.NotificationPreference).where(models.NotificationPreference.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def opted_in_user_ids(self, user_ids: Iterable[UUID], category: str) -> set[UUID]:
        """Subset of *user_ids* whose *category* flag is enabled.

        Users without a preference row are never returned.
        """
        if category not in NOTIFICATION_CATEGORIES:
            raise ValueError(
                f"Invalid notification category {category!r}; "
                f"must be one of {sorted(NOTIFICATION_CATEGORIES)}"
            )
        ids = list(user_ids)
        if not ids:
            return set()
        flag = getattr(models.NotificationPreference, category)
        stmt = (
            select(models.NotificationPreference.user_id)
            .where(models.NotificationPreference.user_id.in_(ids))
            .where(flag.is_(True))
        )
        return set(self.db.execute(stmt).scalars().all())


class DocumentRepository(BaseRepository[models.Document]):
    model = models.Document

    def list_with_expiry(self) -> list[models.Document]:
        """All documents, across companies, that carry an expiry date."""
        stmt = (
            select(models.Document)
            .where(models.Document.expires_on.is_not(None))
            .order_by(models.Document.company_id, models.Document.expires_on, models.Document.id)
        )
        return list(self.db.execute(stmt).scalars().all())


class EmailTemplateRepository(BaseRepository[models.EmailTemplate]):
    model = models.EmailTemplate

    def find(self, company_id: UUID, template_type: str) -> models.EmailTemplate | None:
        stmt = (
            select(models.EmailTemplate)
            .where(models.EmailTemplate.company_id == company_id)
            .where(models.EmailTemplate.template_type == template_type)
        )
        return self.db.execute(stmt).scalar_one_or_none()


class NotificationLogRepository(BaseRepository[models.NotificationLogEntry]):
    model = models.NotificationLogEntry

    def exists(self, document_id: UUID, user_id: UUID, notified_on: date) -> bool:
        stmt = (
            select(models.NotificationLogEntry.id)
            .where(models.NotificationLogEntry.document_id == document_id)
            .where(models.NotificationLogEntry.user_id == user_id)
            .where(models.NotificationLogEntry.notified_on == notified_on)
        )
        return self.db.execute(stmt).first() is not None
