from __future__ import annotations

import logging
from typing import List

from models.message_ref import MessageRef
from services.errors import MailServiceError
from services.mail_service import MailService
from utils.config import DEFAULT_QUERY

LOGGER = logging.getLogger(__name__)


class MailboxScanner:
    """Find unread, non-sent, non-chat messages that may need an auto-reply."""

    def __init__(self, mail: MailService, query: str = DEFAULT_QUERY):
        self._mail = mail
        self._query = query

    def list_candidates(self) -> List[MessageRef]:
        """Return one ref per thread, in the order the search returned them.

        A failed search is logged and yields an empty list so the current
        pass ends without touching any thread.
        """

        try:
            messages, estimate = self._mail.search_unread(self._query)
        except MailServiceError as exc:
            LOGGER.error("An error occurred: %s", exc)
            return []

        # resultSizeEstimate is approximate; only the list itself is trusted.
        LOGGER.debug("Search returned %s message(s), resultSizeEstimate=%s", len(messages), estimate)
        if not messages:
            LOGGER.info("No emails found.")
            return []

        seen: set[str] = set()
        unique: List[MessageRef] = []
        for ref in messages:
            if ref.thread_id in seen:
                continue
            seen.add(ref.thread_id)
            unique.append(ref)
        return unique
