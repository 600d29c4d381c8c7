"""Abuse reports: logged, and mailed to the operator when SMTP is set up."""

import asyncio
import smtplib
from email.message import EmailMessage
from typing import Optional

from ...config import Settings, get_settings
from ..logging import get_logger

logger = get_logger("services.reports")


class ReportService:
    """Delivers note abuse reports."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def mail_enabled(self) -> bool:
        return bool(self.settings.smtp_host and self.settings.report_email_to)

    async def submit(self, note_id: str, report: str) -> bool:
        """Record a report. Returns True when an e-mail went out.

        Mail failures are logged and never raised; the reporter always gets
        the same answer.
        """
        logger.info(f"note {note_id} was reported", extra={"note_id": note_id, "report": report})
        if not self.mail_enabled:
            return False

        message = self._build_message(note_id, report)
        try:
            await asyncio.to_thread(self._send, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"couldn't send email: {e}", extra={"note_id": note_id})
            return False
        return True

    def _build_message(self, note_id: str, report: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = f"Note {note_id} reported"
        message["From"] = self.settings.smtp_from
        message["To"] = self.settings.report_email_to
        message.set_content(f"Note {note_id} was reported:\n\n{report}\n")
        return message

    def _send(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=10) as smtp:
            smtp.send_message(message)
