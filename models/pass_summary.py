from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class PassSummary:
    candidates: int = 0
    replied: int = 0
    skipped: int = 0
    errors: int = 0
    authorized: bool = True
