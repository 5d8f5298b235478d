"""Tests for app/notification/templates.py."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

import pytest

from app.notification.templates import (
    RenderedMessage,
    default_document_reminder,
    format_long_date,
    render_document_reminder,
    render_template,
    substitute,
)

FIELDS = {
    "document_title": "Operatørsertifikat",
    "expiry_date": "31. mars 2025",
    "company_name": "AviSafe AS",
}


@dataclass
class _Template:
    subject: str
    content: str


class TestSubstitute:
    def test_replaces_every_occurrence(self):
        out = substitute("{{document_title}} / {{document_title}}", FIELDS)
        assert out == "Operatørsertifikat / Operatørsertifikat"

    def test_unknown_token_left_verbatim(self):
        out = substitute("Hei {{unknown_field}}, {{company_name}}", FIELDS)
        assert out == "Hei {{unknown_field}}, AviSafe AS"

    def test_substituted_value_is_not_rescanned(self):
        fields = {"document_title": "{{company_name}}", "company_name": "X"}
        assert substitute("{{document_title}}", fields) == "{{company_name}}"

    def test_spaced_token_is_not_a_placeholder(self):
        assert substitute("{{ document_title }}", FIELDS) == "{{ document_title }}"


class TestRenderStoredTemplate:
    def test_subject_and_body_substituted(self):
        tpl = _Template(
            subject="{{document_title}} utløper {{expiry_date}}",
            content="<p>{{company_name}}: {{document_title}} ({{unknown_field}})</p>",
        )
        msg = render_document_reminder(tpl, FIELDS)

        assert msg.subject == "Operatørsertifikat utløper 31. mars 2025"
        assert msg.body == "<p>AviSafe AS: Operatørsertifikat ({{unknown_field}})</p>"

    def test_render_is_deterministic(self):
        first = render_template("{{document_title}}", "{{expiry_date}}", FIELDS)
        second = render_template("{{document_title}}", "{{expiry_date}}", FIELDS)
        assert first == second == RenderedMessage(subject="Operatørsertifikat", body="31. mars 2025")

    def test_extras_do_not_reach_stored_template(self):
        tpl = _Template(subject="{{document_title}}", content="{{document_category}} {{days_until_expiry}}")
        msg = render_document_reminder(
            tpl, FIELDS, extras={"document_category": "Sertifikat", "days_until_expiry": "30"}
        )

        assert msg.body == "{{document_category}} {{days_until_expiry}}"


class TestDefaultTemplate:
    def test_fallback_when_no_template(self):
        msg = render_document_reminder(
            None, FIELDS, extras={"document_category": "Sertifikat", "days_until_expiry": "30"}
        )

        assert msg.subject
        assert "Operatørsertifikat" in msg.subject
        assert "Dokumenter som snart utløper" in msg.body
        assert "Sertifikat" in msg.body
        assert "31. mars 2025" in msg.body
        assert "(om 30 dager)" in msg.body
        assert "{{" not in msg.body

    def test_single_day_wording(self):
        msg = default_document_reminder({**FIELDS, "days_until_expiry": "1"})
        assert "(om 1 dag)" in msg.body

    def test_body_values_are_escaped(self):
        msg = default_document_reminder({**FIELDS, "document_title": "<script>x</script>"})
        assert "<script>" not in msg.body
        assert "&lt;script&gt;" in msg.body

    def test_works_with_only_title(self):
        msg = default_document_reminder({"document_title": "Forsikring"})
        assert "Forsikring" in msg.subject
        assert "{{" not in msg.body


class TestFormatLongDate:
    def test_norwegian(self):
        assert format_long_date(date(2025, 3, 31)) == "31. mars 2025"

    def test_english(self):
        assert format_long_date(date(2025, 3, 31), "en-GB") == "March 31, 2025"

    def test_datetime_accepted(self):
        assert format_long_date(datetime(2025, 12, 1, 15, 30), "nb-NO") == "1. desember 2025"

    @pytest.mark.parametrize("locale", ["no", "nn-NO", "de-DE"])
    def test_other_locales_fall_back_to_norwegian(self, locale):
        assert format_long_date(date(2025, 5, 17), locale) == "17. mai 2025"
