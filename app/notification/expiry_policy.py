"""Expiry trigger rules.

A document is flagged on exactly one calendar day: its expiry date minus
its lead days.  A sweep that does not run on that day never catches up.
All functions are pure; the current date is always passed in.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Protocol


class ExpiringRecord(Protocol):
    expires_on: date | None
    lead_days: int | None


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def notification_date(expiry_date: date | datetime, lead_days: int) -> date:
    """Calendar day on which a reminder for *expiry_date* is due."""
    return _as_date(expiry_date) - timedelta(days=lead_days)


def should_notify_today(expiry_date: date | datetime, lead_days: int, today: date | datetime) -> bool:
    return notification_date(expiry_date, lead_days) == _as_date(today)


def is_candidate(record: ExpiringRecord) -> bool:
    """Only records with an expiry date and a positive lead time qualify."""
    return record.expires_on is not None and bool(record.lead_days) and record.lead_days > 0


def is_due(record: ExpiringRecord, today: date | datetime) -> bool:
    return is_candidate(record) and should_notify_today(record.expires_on, record.lead_days, today)


def days_until_expiry(expiry_date: date | datetime, today: date | datetime) -> int:
    return (_as_date(expiry_date) - _as_date(today)).days
