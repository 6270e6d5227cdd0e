from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from models.reply_candidate import ReplyCandidate

LOGGER = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS replied_threads (
    mailbox TEXT NOT NULL,
    thread_id TEXT NOT NULL,
    subject TEXT NOT NULL,
    sender TEXT NOT NULL,
    replied_at TEXT NOT NULL,
    PRIMARY KEY (mailbox, thread_id)
)
"""


@dataclass(slots=True)
class RepliedThread:
    mailbox: str
    thread_id: str
    subject: str
    sender: str
    replied_at: datetime


class RepliedThreadStore:
    """Durable log of threads that already got an auto-reply.

    A thread stays unread after the reply unless the mark-read option is on,
    so later searches keep returning it; this log is what stops a second
    reply. Rows are never removed.
    """

    def __init__(self, db_path: Path):
        self._db_path = db_path
        with self._connect() as conn:
            conn.execute(SCHEMA)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def has_replied(self, mailbox: str, thread_id: str) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM replied_threads WHERE mailbox=? AND thread_id=?",
                (mailbox, thread_id),
            ).fetchone()
        return row is not None

    def record_reply(self, mailbox: str, candidate: ReplyCandidate) -> None:
        replied_at = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            # A thread is answered once; keep the first timestamp if it shows up again.
            conn.execute(
                "INSERT OR IGNORE INTO replied_threads VALUES (?, ?, ?, ?, ?)",
                (mailbox, candidate.thread_id, candidate.subject, candidate.sender, replied_at),
            )
        LOGGER.debug("Recorded reply to thread %s (%s) for %s", candidate.thread_id, candidate.sender, mailbox)

    def reply_count(self, mailbox: str) -> int:
        with self._connect() as conn:
            (count,) = conn.execute(
                "SELECT COUNT(*) FROM replied_threads WHERE mailbox=?", (mailbox,)
            ).fetchone()
        return count

    def recent_replies(self, limit: int = 10) -> list[RepliedThread]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT mailbox, thread_id, subject, sender, replied_at FROM replied_threads "
                "ORDER BY replied_at DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [
            RepliedThread(mailbox, thread_id, subject, sender, datetime.fromisoformat(replied_at))
            for mailbox, thread_id, subject, sender, replied_at in rows
        ]
