"""Daily document-expiry sweep.

Loads every document with an expiry date, keeps those whose reminder is
due today, groups them by company and emails each approved, opted-in user
of that company once per due document.

Failure scopes:
- loading the document set fails   -> ``SweepError``, no report
- resolving one company fails      -> company skipped, sweep continues
- sending one message fails        -> counted as failed, sweep continues

The sweep is meant to run once per calendar day.  Without a
``NotificationLog`` a second run on the same day resends every reminder.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.core.constants import (
    CATEGORY_DOCUMENT_EXPIRY,
    DEFAULT_COMPANY_NAME,
    PLACEHOLDER_COMPANY_NAME,
    PLACEHOLDER_DOCUMENT_TITLE,
    PLACEHOLDER_EXPIRY_DATE,
    TEMPLATE_DOCUMENT_REMINDER,
)
from app.db.models import Document
from app.notification.email_sender import MailTransport
from app.notification.expiry_policy import days_until_expiry, is_due
from app.notification.notification_log import NotificationLog
from app.notification.recipients import Recipient, RecipientResolver
from app.notification.store import RecordStore
from app.notification.templates import format_long_date, render_document_reminder

logger = logging.getLogger(__name__)

MESSAGE_NO_DOCUMENTS = "No documents to check"
MESSAGE_NOTHING_DUE = "No notifications needed today"


class SweepState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    EVALUATING = "evaluating"
    DISPATCHING = "dispatching"
    COMPLETED = "completed"
    FAILED = "failed"


class SweepError(RuntimeError):
    """The document set could not be loaded; the run produced no report."""


# ---------------------------------------------------------------------------
# SweepReport
# ---------------------------------------------------------------------------

@dataclass
class SweepReport:
    run_date: date
    documents_checked: int = 0
    emails_sent: int = 0
    emails_failed: int = 0
    duplicates_skipped: int = 0
    companies_skipped: list[UUID] = field(default_factory=list)
    message: str | None = None

    @property
    def nothing_to_do(self) -> bool:
        return self.message is not None

    def to_response(self) -> dict[str, Any]:
        if self.nothing_to_do:
            return {"success": True, "message": self.message}
        return {
            "success": True,
            "documentsChecked": self.documents_checked,
            "emailsSent": self.emails_sent,
        }


# ---------------------------------------------------------------------------
# ExpirySweep
# ---------------------------------------------------------------------------

class ExpirySweep:
    def __init__(
        self,
        store: RecordStore,
        transport: MailTransport,
        *,
        locale: str = "nb-NO",
        notification_log: NotificationLog | None = None,
    ) -> None:
        self.store = store
        self.transport = transport
        self.locale = locale
        self.notification_log = notification_log
        self.resolver = RecipientResolver(store)
        self.state = SweepState.IDLE

    def run(self, today: date) -> SweepReport:
        report = SweepReport(run_date=today)

        self.state = SweepState.LOADING
        logger.info("Checking for expiring documents on %s", today.isoformat())
        try:
            documents = self.store.documents_with_expiry()
        except SQLAlchemyError as exc:
            self.state = SweepState.FAILED
            logger.error("Error fetching documents: %s", exc)
            raise SweepError(f"Could not load documents: {exc}") from exc

        if not documents:
            logger.info("No documents with expiry dates found")
            report.message = MESSAGE_NO_DOCUMENTS
            self.state = SweepState.COMPLETED
            return report

        self.state = SweepState.EVALUATING
        by_company = group_by_company(doc for doc in documents if is_due(doc, today))
        report.documents_checked = sum(len(docs) for docs in by_company.values())

        if not by_company:
            logger.info("No documents requiring notification today")
            report.message = MESSAGE_NOTHING_DUE
            self.state = SweepState.COMPLETED
            return report

        logger.info("Found %d documents requiring notification", report.documents_checked)

        self.state = SweepState.DISPATCHING
        for company_id, docs in by_company.items():
            self._dispatch_company(company_id, docs, today, report)

        self.state = SweepState.COMPLETED
        logger.info(
            "Document expiry check complete: %d sent, %d failed, %d companies skipped",
            report.emails_sent,
            report.emails_failed,
            len(report.companies_skipped),
        )
        return report

    # -- per company --------------------------------------------------------

    def _dispatch_company(
        self,
        company_id: UUID,
        docs: list[Document],
        today: date,
        report: SweepReport,
    ) -> None:
        logger.info("Processing %d documents for company %s", len(docs), company_id)
        try:
            with self.store.savepoint():
                recipients = self.resolver.resolve(company_id, CATEGORY_DOCUMENT_EXPIRY)
                if not recipients:
                    return
                company = self.store.company(company_id)
                template = self.store.email_template(company_id, TEMPLATE_DOCUMENT_REMINDER)
        except SQLAlchemyError as exc:
            logger.error("Skipping company %s: %s", company_id, exc)
            report.companies_skipped.append(company_id)
            return

        company_name = company.name if company is not None and company.name else DEFAULT_COMPANY_NAME

        for recipient in recipients:
            for doc in docs:
                message = render_document_reminder(
                    template,
                    self._fields_for(doc, company_name),
                    extras={
                        "document_category": doc.category or "",
                        "days_until_expiry": str(days_until_expiry(doc.expires_on, today)),
                    },
                )
                self._deliver(recipient, doc, message.subject, message.body, today, report)

    def _fields_for(self, doc: Document, company_name: str) -> dict[str, str]:
        """The placeholder set stored templates may reference."""
        return {
            PLACEHOLDER_DOCUMENT_TITLE: doc.title,
            PLACEHOLDER_EXPIRY_DATE: format_long_date(doc.expires_on, self.locale),
            PLACEHOLDER_COMPANY_NAME: company_name,
        }

    # -- per message --------------------------------------------------------

    def _deliver(
        self,
        recipient: Recipient,
        doc: Document,
        subject: str,
        body: str,
        today: date,
        report: SweepReport,
    ) -> None:
        if self.notification_log is not None and self.notification_log.already_sent(
            doc.id, recipient.user_id, today
        ):
            logger.info("Reminder for document %s already sent to user %s today", doc.id, recipient.user_id)
            report.duplicates_skipped += 1
            return

        receipt = self.transport.send(recipient.email, subject, body)
        if not receipt.sent:
            logger.error(
                "Error sending reminder for document %s to user %s: %s",
                doc.id,
                recipient.user_id,
                receipt.error,
            )
            report.emails_failed += 1
            return

        report.emails_sent += 1
        if self.notification_log is not None:
            self.notification_log.record(doc.id, recipient.user_id, today)


def group_by_company(documents) -> dict[UUID, list[Document]]:
    """Ordered mapping of company id to its documents, in first-seen order."""
    grouped: dict[UUID, list[Document]] = {}
    for doc in documents:
        grouped.setdefault(doc.company_id, []).append(doc)
    return grouped
