#!/usr/bin/env python3
"""Run one document-expiry sweep (for cron / scheduler use).

Usage:
    python scripts/run_expiry_sweep.py                     # today in REPORT_TIMEZONE
    python scripts/run_expiry_sweep.py --today 2025-03-01  # explicit run date

Prints the JSON summary; exits 1 when the sweep could not run.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime
from zoneinfo import ZoneInfo

# Ensure project root is on sys.path
sys.path.insert(0, ".")

from app.core.logging import setup_logging
from app.core.settings import get_settings
from app.db.session import get_session_factory
from app.notification.email_sender import EmailSender, MailConfigurationError, SmtpConfig
from app.notification.expiry_sweep import ExpirySweep, SweepError
from app.notification.notification_log import NotificationLog
from app.notification.store import SqlRecordStore

logger = logging.getLogger("run_expiry_sweep")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--today", type=date.fromisoformat, default=None, help="run date (YYYY-MM-DD)")
    args = parser.parse_args(argv)

    setup_logging()
    settings = get_settings()
    today = args.today or datetime.now(ZoneInfo(settings.report_timezone)).date()

    try:
        transport = EmailSender(SmtpConfig.from_settings(settings))
    except MailConfigurationError as exc:
        logger.error("Mail relay not configured: %s", exc)
        print(json.dumps({"error": str(exc)}))
        return 1

    with get_session_factory()() as session:
        sweep = ExpirySweep(
            SqlRecordStore(session),
            transport,
            locale=settings.date_locale,
            notification_log=NotificationLog(session) if settings.notification_dedup_enabled else None,
        )
        try:
            report = sweep.run(today)
        except SweepError as exc:
            logger.error("Sweep failed: %s", exc)
            session.rollback()
            print(json.dumps({"error": str(exc)}))
            return 1
        session.commit()

    print(json.dumps(report.to_response()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
