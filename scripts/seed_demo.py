#!/usr/bin/env python3
"""Seed demo data: 1 company, 3 users, preferences, 3 expiring documents.

One document ("Operatørsertifikat") is due for a reminder today, so a sweep
run right after seeding sends two emails.

Usage:
    python scripts/seed_demo.py          # uses DATABASE_URL from env / .env
    DATABASE_URL=... python scripts/seed_demo.py
"""
from __future__ import annotations

import sys
from datetime import date, timedelta

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

# Ensure project root is on sys.path
sys.path.insert(0, ".")

from app.core.settings import get_settings
from app.db.base import Base
from app.db.models import Company, Document, EmailTemplate, NotificationPreference, Profile


def seed(session: Session) -> None:
    """Insert a demo company with users, preferences and documents."""
    today = date.today()

    company = Company(name="AviSafe Demo AS", contact_email="post@avisafe.example")
    session.add(company)
    session.flush()

    demo_users = [
        # (name, email, approved, document-expiry opt-in)
        ("Kari Nordmann", "kari@avisafe.example", True, True),
        ("Ola Nordmann", "ola@avisafe.example", True, True),
        ("Per Hansen", "per@avisafe.example", False, True),
    ]
    for name, email, approved, opted_in in demo_users:
        profile = Profile(company_id=company.id, full_name=name, email=email, approved=approved)
        session.add(profile)
        session.flush()
        session.add(NotificationPreference(user_id=profile.id, email_document_expiry=opted_in))

    demo_documents = [
        # (title, category, days until expiry, lead days)
        ("Operatørsertifikat", "Sertifikat", 30, 30),
        ("Forsikringsbevis drone DJI M300", "Forsikring", 60, 14),
        ("Driftshåndbok", "Manual", None, None),
    ]
    for title, category, days, lead in demo_documents:
        session.add(
            Document(
                company_id=company.id,
                title=title,
                category=category,
                expires_on=today + timedelta(days=days) if days is not None else None,
                lead_days=lead,
            )
        )

    session.add(
        EmailTemplate(
            company_id=company.id,
            template_type="document_reminder",
            subject="{{company_name}}: {{document_title}} utløper {{expiry_date}}",
            content="<p>Hei,</p><p>{{document_title}} utløper {{expiry_date}}.</p>",
        )
    )

    session.commit()
    print(f"Seeded company {company.id} with {len(demo_users)} users and {len(demo_documents)} documents.")


def main() -> None:
    settings = get_settings()
    engine = create_engine(settings.database_url)
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        seed(session)


if __name__ == "__main__":
    main()
