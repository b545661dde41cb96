"""
Outbound email over SMTP.

SmtpSender holds one set of credentials and opens a fresh implicit-TLS
connection (SMTP_SSL, port 465) for every message. Gmail on some hosts
times out on STARTTLS over 587, which is why the TLS port is the default.

smtplib is blocking, so send() runs the whole exchange in a worker thread.
Nothing here retries and no timeout is imposed beyond the socket default:
a hung server hangs the request that triggered the send.
"""

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Protocol

from signature_api.errors import TransportFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attachment:
    """A single named binary blob attached to an outgoing message."""

    filename: str
    content: bytes
    mime_type: str = "application/pdf"


class NotificationSender(Protocol):
    """Anything that can deliver a message and report its Message-ID."""

    async def send(
        self,
        from_name: str,
        recipients: list[str],
        subject: str,
        body: str,
        attachment: Attachment | None = None,
    ) -> str: ...


class SmtpSender:
    def __init__(self, host: str, port: int, user: str, password: str):
        self.host = host
        self.port = port
        self.user = user
        self.password = password

    def build_message(
        self,
        from_name: str,
        recipients: list[str],
        subject: str,
        body: str,
        attachment: Attachment | None = None,
    ) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = formataddr((from_name, self.user))
        msg["To"] = ", ".join(recipients)
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid(domain=self.user.rpartition("@")[2] or None)
        msg.set_content(body)

        if attachment is not None:
            maintype, _, subtype = attachment.mime_type.partition("/")
            msg.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment.filename,
            )
        return msg

    def _deliver(self, msg: EmailMessage, recipients: list[str]) -> None:
        context = ssl.create_default_context()
        with smtplib.SMTP_SSL(self.host, self.port, context=context) as server:
            server.login(self.user, self.password)
            server.send_message(msg, from_addr=self.user, to_addrs=recipients)

    async def send(
        self,
        from_name: str,
        recipients: list[str],
        subject: str,
        body: str,
        attachment: Attachment | None = None,
    ) -> str:
        """Send one message and return its Message-ID.

        Raises TransportFailure on any SMTP or network error."""
        msg = self.build_message(from_name, recipients, subject, body, attachment)

        try:
            await asyncio.to_thread(self._deliver, msg, recipients)
        except (smtplib.SMTPException, OSError) as e:
            raise TransportFailure(f"SMTP delivery via {self.host}:{self.port} failed: {e}") from e

        message_id = msg["Message-ID"]
        logger.info("Sent %r to %d recipient(s) as %s", subject, len(recipients), message_id)
        return message_id
