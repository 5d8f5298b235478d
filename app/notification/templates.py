"""Email template rendering.

Stored templates use ``{{token}}`` placeholders.  Substitution happens in a
single regex pass: every occurrence of a known token is replaced, unknown
tokens are left verbatim, and substituted values are never re-scanned, so a
value that itself looks like ``{{token}}`` is emitted literally.

When a company has no stored template the built-in Norwegian default is
used.  Dates must already be formatted (see ``format_long_date``) before
they are passed in as fields.
"""
from __future__ import annotations

import html
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from app.core.constants import (
    LONG_DATE_FORMATS,
    MONTH_NAMES,
    PLACEHOLDER_COMPANY_NAME,
    PLACEHOLDER_DOCUMENT_TITLE,
    PLACEHOLDER_EXPIRY_DATE,
)

_TOKEN_RE = re.compile(r"\{\{(\w+)\}\}")


@dataclass(frozen=True)
class RenderedMessage:
    subject: str
    body: str


class StoredTemplate(Protocol):
    subject: str
    content: str


# ---------------------------------------------------------------------------
# Substitution
# ---------------------------------------------------------------------------

def substitute(pattern: str, fields: Mapping[str, str]) -> str:
    """Replace every ``{{name}}`` in *pattern* whose name is in *fields*."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in fields:
            return str(fields[name])
        return match.group(0)

    return _TOKEN_RE.sub(_replace, pattern)


def render_template(subject_pattern: str, body_pattern: str, fields: Mapping[str, str]) -> RenderedMessage:
    return RenderedMessage(
        subject=substitute(subject_pattern, fields),
        body=substitute(body_pattern, fields),
    )


# ---------------------------------------------------------------------------
# Built-in default
# ---------------------------------------------------------------------------

_DEFAULT_SUBJECT = "Dokument utløper snart: {{document_title}}"

_DEFAULT_BODY = """\
<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
<h1 style="color: #333; font-size: 24px; margin-bottom: 20px;">Dokumenter som snart utløper</h1>
<p style="color: #666; margin-bottom: 20px;">Følgende dokument hos {{company_name}} krever din oppmerksomhet:</p>
<div style="background: #f8f9fa; padding: 15px; border-radius: 8px; margin-bottom: 15px; border-left: 4px solid #ef4444;">
<h3 style="color: #333; font-size: 16px; margin-bottom: 8px;">{{document_title}}</h3>
<div style="margin-bottom: 5px;"><strong style="color: #666;">Kategori:</strong> <span style="color: #333; margin-left: 8px;">{{document_category}}</span></div>
<div style="margin-bottom: 5px;"><strong style="color: #666;">Utløper:</strong> <span style="color: #ef4444; margin-left: 8px;">{{expiry_date}}{{days_until_expiry}}</span></div>
</div>
<p style="color: #666; margin-top: 20px; font-size: 14px;">Vennligst logg inn for å fornye eller oppdatere dette dokumentet.</p>
</body>
</html>
"""


def _days_phrase(days: str | int | None) -> str:
    if days is None or days == "":
        return ""
    count = int(days)
    unit = "dag" if count == 1 else "dager"
    return f" (om {count} {unit})"


def default_document_reminder(fields: Mapping[str, str]) -> RenderedMessage:
    """Render the built-in reminder purely from *fields*.

    Values are HTML-escaped in the body; the subject is plain text.
    """
    title = str(fields.get(PLACEHOLDER_DOCUMENT_TITLE, ""))
    body_fields = {
        PLACEHOLDER_DOCUMENT_TITLE: html.escape(title),
        PLACEHOLDER_EXPIRY_DATE: html.escape(str(fields.get(PLACEHOLDER_EXPIRY_DATE, ""))),
        PLACEHOLDER_COMPANY_NAME: html.escape(str(fields.get(PLACEHOLDER_COMPANY_NAME, ""))),
        "document_category": html.escape(str(fields.get("document_category", ""))),
        "days_until_expiry": _days_phrase(fields.get("days_until_expiry")),
    }
    return RenderedMessage(
        subject=substitute(_DEFAULT_SUBJECT, {PLACEHOLDER_DOCUMENT_TITLE: title}),
        body=substitute(_DEFAULT_BODY, body_fields),
    )


def render_document_reminder(
    template: StoredTemplate | None,
    fields: Mapping[str, str],
    *,
    extras: Mapping[str, str] | None = None,
) -> RenderedMessage:
    """Render with the company's stored template, or the built-in default.

    *extras* (category, days until expiry) only feed the built-in body;
    stored templates see *fields* alone.
    """
    if template is None:
        return default_document_reminder({**(extras or {}), **fields})
    return render_template(template.subject, template.content, fields)


# ---------------------------------------------------------------------------
# Date formatting
# ---------------------------------------------------------------------------

def format_long_date(value: date | datetime, locale: str = "nb-NO") -> str:
    """Long-form date: ``31. mars 2025`` (nb-NO) or ``March 31, 2025`` (en).

    Unsupported locales fall back to Norwegian.
    """
    if isinstance(value, datetime):
        value = value.date()
    language = locale.replace("_", "-").split("-")[0].lower()
    if language in ("no", "nn"):
        language = "nb"
    if language not in MONTH_NAMES:
        language = "nb"
    month = MONTH_NAMES[language][value.month - 1]
    return LONG_DATE_FORMATS[language].format(day=value.day, month=month, year=value.year)
