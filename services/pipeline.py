from __future__ import annotations

import logging
from typing import Callable, Optional

from google.oauth2.credentials import Credentials

from models.pass_summary import PassSummary
from services.auth_service import AuthService
from services.mail_service import MailService
from services.persistence_service import RepliedThreadStore
from services.responder import Responder
from services.scanner import MailboxScanner
from services.statistics_service import StatisticsService
from services.thread_inspector import ThreadInspector
from utils.config import AppConfig

LOGGER = logging.getLogger(__name__)

MailServiceFactory = Callable[[Credentials], MailService]


class AutoReplyPipeline:
    """One pass of authorize, scan, inspect and respond.

    Threads are handled one at a time in the order the search returned them.
    Failures are logged where they happen; nothing raised during a pass
    escapes ``run_pass`` so the scheduler keeps running.
    """

    def __init__(
        self,
        config: AppConfig,
        authorizer: AuthService,
        mail_factory: MailServiceFactory,
        store: Optional[RepliedThreadStore] = None,
        stats: Optional[StatisticsService] = None,
    ):
        self._config = config
        self._authorizer = authorizer
        self._mail_factory = mail_factory
        self._store = store
        self._stats = stats

    @property
    def mailbox(self) -> str:
        return self._config.mailbox.user_id

    def run_pass(self) -> PassSummary:
        summary = PassSummary()
        try:
            creds = self._authorizer.authorize()
            mail = self._mail_factory(creds)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("An error occurred: %s", exc)
            summary.authorized = False
        else:
            try:
                self._process_mailbox(mail, summary)
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("An error occurred: %s", exc)
                summary.errors += 1

        if self._stats is not None:
            try:
                self._stats.record_pass(summary)
            except Exception as exc:  # noqa: BLE001
                LOGGER.warning("Could not record pass statistics: %s", exc)
        return summary

    def _process_mailbox(self, mail: MailService, summary: PassSummary) -> None:
        scanner = MailboxScanner(mail, self._config.search_query)
        inspector = ThreadInspector(mail)
        responder = Responder(mail, self._config.label_name, mark_as_read=self._config.mark_as_read)

        refs = scanner.list_candidates()
        summary.candidates = len(refs)
        for ref in refs:
            if self._store is not None and self._store.has_replied(self.mailbox, ref.thread_id):
                LOGGER.debug("Thread %s already answered, skipping", ref.thread_id)
                summary.skipped += 1
                continue

            candidate = inspector.inspect(ref.thread_id)
            if candidate is None:
                summary.skipped += 1
                continue

            sent = responder.respond(
                candidate.thread_id,
                candidate.subject,
                candidate.sender,
                self._config.reply_body,
                message_id=candidate.message_id,
            )
            if not sent:
                summary.errors += 1
                continue
            summary.replied += 1
            if self._store is not None:
                self._store.record_reply(self.mailbox, candidate)
