from __future__ import annotations

import logging
from typing import Dict, Sequence

from models.reply_candidate import ReplyCandidate
from services.errors import MailServiceError, MissingHeaderError
from services.mail_service import MailService

LOGGER = logging.getLogger(__name__)


class ThreadInspector:
    """Decide whether a thread is unreplied and pull the headers a reply needs."""

    def __init__(self, mail: MailService):
        self._mail = mail

    def inspect(self, thread_id: str) -> ReplyCandidate | None:
        try:
            thread = self._mail.get_thread(thread_id)
        except MailServiceError as exc:
            LOGGER.error("An error occurred: %s", exc)
            return None

        messages = thread.get("messages") or []
        if len(messages) != 1:
            LOGGER.debug("Skipping thread %s with %s message(s)", thread_id, len(messages))
            return None

        try:
            candidate = candidate_from_message(thread_id, messages[0])
        except MissingHeaderError as exc:
            LOGGER.warning("Skipping thread: %s", exc)
            return None

        LOGGER.info("Subject: %s", candidate.subject)
        LOGGER.info("Sender Email: %s", candidate.sender)
        return candidate


def candidate_from_message(thread_id: str, message: Dict) -> ReplyCandidate:
    headers = _headers_to_dict(message.get("payload", {}).get("headers", []))
    for required in ("subject", "from"):
        if required not in headers:
            raise MissingHeaderError(required.title(), thread_id)
    return ReplyCandidate(
        thread_id=thread_id,
        subject=headers["subject"],
        sender=headers["from"],
        message_id=headers.get("message-id"),
    )


def _headers_to_dict(headers: Sequence[Dict[str, str]]) -> Dict[str, str]:
    mapped: Dict[str, str] = {}
    for header in headers:
        name = header.get("name", "").lower()
        # First occurrence wins, as with a sequential lookup.
        if name and name not in mapped:
            mapped[name] = header.get("value", "")
    return mapped
