from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import pytest

from models.message_ref import MessageRef
from services.errors import LabelExistsError, MailServiceError
from services.mail_service import MailService
from utils.config import AppConfig, MailboxConfig


def make_thread(*headers: Sequence[Tuple[str, str]]) -> Dict:
    """Build a thread resource with one message per header list."""
    return {
        "messages": [
            {"payload": {"headers": [{"name": name, "value": value} for name, value in message_headers]}}
            for message_headers in headers
        ]
    }


class FakeMailService(MailService):
    def __init__(self):
        self.messages: List[MessageRef] = []
        self.estimate = 0
        self.threads: Dict[str, Dict] = {}
        self.labels: Dict[str, str] = {}
        self.search_error: Exception | None = None
        self.thread_errors: Dict[str, Exception] = {}
        self.create_label_error: Exception | None = None
        self.send_error: Exception | None = None
        self.calls: List[str] = []
        self.modified: List[Tuple[str, List[str], List[str]]] = []
        self.sent: List[Dict[str, str]] = []

    def search_unread(self, query: str):
        self.calls.append("search_unread")
        if self.search_error:
            raise self.search_error
        return list(self.messages), self.estimate

    def get_thread(self, thread_id: str) -> Dict:
        self.calls.append("get_thread")
        if thread_id in self.thread_errors:
            raise self.thread_errors[thread_id]
        return self.threads[thread_id]

    def create_label(self, name: str) -> str:
        self.calls.append("create_label")
        if self.create_label_error:
            raise self.create_label_error
        if name in self.labels:
            raise LabelExistsError(name)
        self.labels[name] = f"Label_{len(self.labels) + 1}"
        return self.labels[name]

    def find_label_id(self, name: str) -> str | None:
        self.calls.append("find_label_id")
        return self.labels.get(name)

    def modify_thread_labels(self, thread_id: str, add=(), remove=()) -> Dict:
        self.calls.append("modify_thread_labels")
        self.modified.append((thread_id, list(add), list(remove)))
        return {"id": thread_id}

    def send_message(self, raw: str, thread_id: str) -> Dict:
        self.calls.append("send_message")
        if self.send_error:
            raise self.send_error
        self.sent.append({"raw": raw, "threadId": thread_id})
        return {"id": f"sent-{len(self.sent)}", "threadId": thread_id}


@pytest.fixture
def fake_mail() -> FakeMailService:
    return FakeMailService()


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        mailbox=MailboxConfig(
            credentials_file=tmp_path / "credentials.json",
            token_file=tmp_path / "token.json",
            user_id="me",
        ),
        label_name="testing",
        reply_body="Your automatic reply message here.",
        search_query="is:unread -in:sent -in:chat",
        mark_as_read=False,
        min_interval_seconds=45,
        max_interval_seconds=120,
        log_dir=tmp_path / "logs",
        log_level="DEBUG",
        stats_file=tmp_path / "stats.json",
        db_path=tmp_path / "auto_reply.db",
    )


@pytest.fixture
def thread_factory():
    return make_thread


@pytest.fixture
def mail_error():
    def _build(message: str = "boom", status: int | None = 500) -> MailServiceError:
        return MailServiceError(message, status=status)

    return _build
