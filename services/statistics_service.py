from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict

from models.pass_summary import PassSummary

LOGGER = logging.getLogger(__name__)
COUNTERS = ("passes", "candidates", "replies_sent", "skipped", "errors")


class StatisticsService:
    """Very small JSON-backed store of cumulative pass counters."""

    def __init__(self, stats_file: Path):
        self._stats_file = stats_file
        self._stats_file.parent.mkdir(parents=True, exist_ok=True)
        self._stats_file.touch(exist_ok=True)
        if not self._stats_file.read_text(encoding="utf-8").strip():
            self._write({})

    def _read(self) -> Dict:
        try:
            data = json.loads(self._stats_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, dict):
            LOGGER.warning("Stats file was corrupt, resetting %s", self._stats_file)
            self._write({})
            return {}
        return data

    def _write(self, payload: Dict) -> None:
        self._stats_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def record_pass(self, summary: PassSummary) -> None:
        stats = self._read()
        stats["passes"] = stats.get("passes", 0) + 1
        stats["candidates"] = stats.get("candidates", 0) + summary.candidates
        stats["replies_sent"] = stats.get("replies_sent", 0) + summary.replied
        stats["skipped"] = stats.get("skipped", 0) + summary.skipped
        stats["errors"] = stats.get("errors", 0) + summary.errors
        if not summary.authorized:
            stats["failed_authorizations"] = stats.get("failed_authorizations", 0) + 1
        stats["last_pass_at"] = datetime.now(timezone.utc).isoformat()
        self._write(stats)

    def snapshot(self) -> Dict:
        return self._read()
