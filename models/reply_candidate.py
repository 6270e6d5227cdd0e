from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ReplyCandidate:
    """Headers pulled from the single message of an unreplied thread."""

    thread_id: str
    subject: str
    sender: str
    message_id: str | None = None
