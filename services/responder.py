from __future__ import annotations

import base64
import logging
from email.message import EmailMessage

from services.errors import LabelExistsError, MailServiceError
from services.mail_service import MailService

LOGGER = logging.getLogger(__name__)
UNREAD_LABEL = "UNREAD"


def build_reply(subject: str, sender: str, body_text: str, message_id: str | None = None) -> str:
    """Return the reply as a base64url encoded RFC 822 message."""

    msg = EmailMessage()
    msg["Subject"] = f"Re: {subject}"
    msg["To"] = sender
    if message_id:
        msg["In-Reply-To"] = message_id
        msg["References"] = message_id
    msg.set_content(body_text)
    return base64.urlsafe_b64encode(msg.as_bytes()).decode("ascii")


class Responder:
    """Label an unreplied thread and answer it with a canned message."""

    def __init__(self, mail: MailService, label_name: str, mark_as_read: bool = False):
        self._mail = mail
        self._label_name = label_name
        self._mark_as_read = mark_as_read
        self._label_id: str | None = None

    def respond(
        self,
        thread_id: str,
        subject: str,
        sender: str,
        body_text: str,
        message_id: str | None = None,
    ) -> bool:
        try:
            raw = build_reply(subject, sender, body_text, message_id)
            label_id = self.ensure_label()
            remove = [UNREAD_LABEL] if self._mark_as_read else []
            self._mail.modify_thread_labels(thread_id, add=[label_id], remove=remove)
            self._mail.send_message(raw, thread_id)
        except (MailServiceError, ValueError) as exc:
            LOGGER.error("Error creating label or sending message: %s", exc)
            return False

        LOGGER.info("Reply sent.")
        return True

    def ensure_label(self) -> str:
        if self._label_id is not None:
            return self._label_id
        try:
            label_id = self._mail.create_label(self._label_name)
        except LabelExistsError:
            label_id = self._mail.find_label_id(self._label_name)
            if label_id is None:
                raise MailServiceError(f"Label {self._label_name} reported as existing but was not found")
        self._label_id = label_id
        return label_id
