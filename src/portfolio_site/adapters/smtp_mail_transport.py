"""SMTP mail transport built on aiosmtplib."""

from dataclasses import dataclass
from email.message import EmailMessage

import aiosmtplib

from portfolio_site.services.contact import MailTransport


@dataclass
class SmtpMailTransport(MailTransport):
    """Send messages through an authenticated SMTP relay."""

    host: str
    port: int
    secure: bool
    username: str
    password: str
    timeout: float = 20

    async def send(self, message: EmailMessage) -> None:
        """Send one message.

        With secure set the connection uses implicit TLS; otherwise STARTTLS
        is negotiated when the server advertises it.
        """
        await aiosmtplib.send(
            message,
            hostname=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
            use_tls=self.secure,
            start_tls=False if self.secure else None,
            timeout=self.timeout,
        )
