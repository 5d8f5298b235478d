"""Notification categories, template types and locale tables.

Notification categories
-----------------------
Each category is a boolean column on ``notification_preferences``. A user
receives a category only when the row exists *and* the flag is ``True``.

email_new_incident       : a new incident was reported in the company
email_new_mission        : a new mission was planned
email_document_expiry    : a document or certificate is about to expire
email_new_user_pending   : a new account is waiting for admin approval
email_followup_assigned  : the user was made responsible for an incident follow-up
"""
from __future__ import annotations

# ---------------------------------------------------------------------------
# Notification categories (preference flags)
# ---------------------------------------------------------------------------

CATEGORY_NEW_INCIDENT = "email_new_incident"
CATEGORY_NEW_MISSION = "email_new_mission"
CATEGORY_DOCUMENT_EXPIRY = "email_document_expiry"
CATEGORY_NEW_USER_PENDING = "email_new_user_pending"
CATEGORY_FOLLOWUP_ASSIGNED = "email_followup_assigned"

NOTIFICATION_CATEGORIES: frozenset[str] = frozenset({
    CATEGORY_NEW_INCIDENT,
    CATEGORY_NEW_MISSION,
    CATEGORY_DOCUMENT_EXPIRY,
    CATEGORY_NEW_USER_PENDING,
    CATEGORY_FOLLOWUP_ASSIGNED,
})

# ---------------------------------------------------------------------------
# Email template types
# ---------------------------------------------------------------------------

TEMPLATE_DOCUMENT_REMINDER = "document_reminder"

# Recognised placeholders for stored templates
PLACEHOLDER_DOCUMENT_TITLE = "document_title"
PLACEHOLDER_EXPIRY_DATE = "expiry_date"
PLACEHOLDER_COMPANY_NAME = "company_name"

DEFAULT_LEAD_DAYS = 30
DEFAULT_COMPANY_NAME = "Selskapet"

# ---------------------------------------------------------------------------
# Long-form month names per locale (index 0 = January)
# ---------------------------------------------------------------------------

MONTH_NAMES: dict[str, tuple[str, ...]] = {
    "nb": (
        "januar", "februar", "mars", "april", "mai", "juni",
        "juli", "august", "september", "oktober", "november", "desember",
    ),
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
}

# "{day}. {month} {year}" for Norwegian, "{month} {day}, {year}" for English
LONG_DATE_FORMATS: dict[str, str] = {
    "nb": "{day}. {month} {year}",
    "en": "{month} {day}, {year}",
}
