"""Contact form relay: rate limiting, validation and mail rendering."""

import html
import logging
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Protocol

from pydantic import ValidationError

from portfolio_site.domain.contact import (
    FIELD_MESSAGES,
    ContactMessage,
    ContactReceipt,
    FieldError,
)
from portfolio_site.domain.errors import ContactValidationError, RateLimited, SendError
from portfolio_site.services.rate_limit import FixedWindowRateLimiter

SUBJECT_PREFIX = "Portfolio Contact: "

logger = logging.getLogger(__name__)


class MailTransport(Protocol):
    """Interface for outbound email delivery."""

    async def send(self, message: EmailMessage) -> None:
        """Hand a fully built message to the mail server."""


@dataclass
class ContactService:
    """Validate contact submissions and relay them by email."""

    transport: MailTransport
    rate_limiter: FixedWindowRateLimiter
    mail_from: str
    mail_to: str

    async def submit(self, identity: str, payload: object) -> ContactReceipt:
        """Relay one submission from identity.

        Raises RateLimited before anything else is looked at, then
        ContactValidationError listing every bad field, then SendError if the
        transport fails. Exactly one email is sent on success.
        """
        decision = self.rate_limiter.hit(identity)
        if not decision.allowed:
            logger.warning("Contact rate limit exceeded", extra={"identity": identity})
            raise RateLimited(identity, retry_after=decision.reset_after)

        contact = validate_contact(payload)
        email = build_email(contact, mail_from=self.mail_from, mail_to=self.mail_to)
        try:
            await self.transport.send(email)
        except Exception as exc:
            logger.exception(
                "Email send error",
                extra={"identity": identity, "reply_to": str(contact.email)},
            )
            raise SendError("Failed to send email") from exc
        logger.info("Contact message relayed", extra={"identity": identity})
        return ContactReceipt()


def validate_contact(payload: object) -> ContactMessage:
    """Parse a raw payload, reporting every invalid field at once."""
    data = payload if isinstance(payload, dict) else {}
    try:
        return ContactMessage.model_validate(data)
    except ValidationError as exc:
        failed = {
            str(error["loc"][0]) for error in exc.errors() if error.get("loc")
        }
        raise ContactValidationError(
            [
                FieldError(field=name, message=message)
                for name, message in FIELD_MESSAGES.items()
                if name in failed
            ]
        ) from exc


def build_email(contact: ContactMessage, mail_from: str, mail_to: str) -> EmailMessage:
    """Build the outbound message with plain text and escaped HTML parts."""
    message = EmailMessage()
    message["From"] = mail_from
    message["To"] = mail_to
    message["Reply-To"] = str(contact.email)
    message["Subject"] = SUBJECT_PREFIX + " ".join(contact.subject.split())
    message.set_content(render_text(contact))
    message.add_alternative(render_html(contact), subtype="html")
    return message


def render_text(contact: ContactMessage) -> str:
    return (
        "New message from your portfolio:\n"
        "\n"
        f"Name: {contact.name}\n"
        f"Email: {contact.email}\n"
        f"Subject: {contact.subject}\n"
        "\n"
        "Message:\n"
        f"{contact.message}"
    )


def render_html(contact: ContactMessage) -> str:
    """Render the HTML body; all user-supplied text is escaped."""
    return (
        '<div style="font-family:system-ui,-apple-system,Segoe UI,Roboto,'
        'Arial,sans-serif">\n'
        "  <h2>New portfolio contact</h2>\n"
        f"  <p><strong>Name:</strong> {escape_html(contact.name)}</p>\n"
        f"  <p><strong>Email:</strong> {escape_html(str(contact.email))}</p>\n"
        f"  <p><strong>Subject:</strong> {escape_html(contact.subject)}</p>\n"
        "  <p><strong>Message:</strong></p>\n"
        '  <pre style="white-space:pre-wrap;font-family:inherit">'
        f"{escape_html(contact.message)}</pre>\n"
        "</div>"
    )


def escape_html(value: str) -> str:
    """Escape &, <, >, double and single quotes for HTML embedding."""
    return html.escape(value, quote=True)
