"""SMTP email sender.

Delivers rendered notification emails through the configured mail relay.
A failed send is reported in the returned ``DeliveryReceipt`` and never
raised, so one bad mailbox cannot abort a batch.  There is no retry within
a single call.

Safety: recipient addresses are never logged.
"""
from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass
from datetime import datetime, timezone
from email.header import Header
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Literal, Protocol

from app.core.settings import Settings

logger = logging.getLogger(__name__)

_SMTP_TIMEOUT = 30  # seconds


class MailConfigurationError(RuntimeError):
    """Required outbound-mail settings are missing."""


# ---------------------------------------------------------------------------
# DeliveryReceipt
# ---------------------------------------------------------------------------

@dataclass
class DeliveryReceipt:
    """Outcome of a single send attempt."""

    status: Literal["SENT", "FAILED"]
    timestamp: datetime
    error: str | None = None

    @property
    def sent(self) -> bool:
        return self.status == "SENT"


class MailTransport(Protocol):
    def send(self, to_address: str, subject: str, html_body: str) -> DeliveryReceipt:
        ...


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int
    use_tls: bool
    username: str
    password: str
    sender: str

    @classmethod
    def from_settings(cls, settings: Settings) -> SmtpConfig:
        """Build from settings; raises ``MailConfigurationError`` when incomplete."""
        missing = [
            name
            for name, value in (
                ("EMAIL_HOST", settings.email_host),
                ("EMAIL_USER", settings.email_user),
                ("EMAIL_PASS", settings.email_pass),
            )
            if not value
        ]
        if missing:
            raise MailConfigurationError(
                f"Missing email configuration: {', '.join(missing)}"
            )
        return cls(
            host=settings.email_host,
            port=settings.email_port,
            use_tls=settings.email_secure if settings.email_secure is not None else settings.email_port == 465,
            username=settings.email_user,
            password=settings.email_pass,
            sender=settings.email_from or settings.email_user,
        )


# ---------------------------------------------------------------------------
# EmailSender
# ---------------------------------------------------------------------------

class EmailSender:
    """Send HTML emails via SMTP (implicit TLS when ``use_tls`` is set)."""

    def __init__(self, config: SmtpConfig) -> None:
        self.config = config

    def _connect(self) -> smtplib.SMTP:
        if self.config.use_tls:
            return smtplib.SMTP_SSL(
                self.config.host,
                self.config.port,
                timeout=_SMTP_TIMEOUT,
                context=ssl.create_default_context(),
            )
        return smtplib.SMTP(self.config.host, self.config.port, timeout=_SMTP_TIMEOUT)

    def _build_message(self, to_address: str, subject: str, html_body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = Header(subject, "utf-8")
        msg["From"] = self.config.sender
        msg["To"] = to_address
        msg.attach(MIMEText(html_body, "html", "utf-8"))
        return msg

    def send(self, to_address: str, subject: str, html_body: str) -> DeliveryReceipt:
        """Send one message and return a receipt; transport errors are not raised.

        Internationalised domains are IDNA-encoded.  An address smtplib still
        cannot put on the wire (non-ASCII local part) yields a FAILED receipt.
        """
        try:
            recipient = _idna_address(to_address)
            msg = self._build_message(recipient, subject, html_body)
            with self._connect() as server:
                server.ehlo()
                if not self.config.use_tls and server.has_extn("starttls"):
                    server.starttls(context=ssl.create_default_context())
                server.login(self.config.username, self.config.password)
                server.sendmail(self.config.sender, [recipient], msg.as_string())
        except (smtplib.SMTPException, OSError, UnicodeError, ValueError) as exc:
            logger.error("SMTP delivery failed: %s", exc)
            return DeliveryReceipt(
                status="FAILED",
                timestamp=datetime.now(timezone.utc),
                error=str(exc),
            )

        logger.debug("Delivered message %r", subject)
        return DeliveryReceipt(status="SENT", timestamp=datetime.now(timezone.utc))


def _idna_address(address: str) -> str:
    """``post@bløtekake.no`` -> ``post@xn--...no``; raises ``UnicodeError`` if invalid."""
    local, sep, domain = address.rpartition("@")
    if not sep or domain.isascii():
        return address
    return f"{local}@{domain.encode('idna').decode('ascii')}"
