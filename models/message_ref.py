from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class MessageRef:
    """Message id and thread id pair returned by a mailbox search."""

    id: str
    thread_id: str
