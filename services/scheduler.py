from __future__ import annotations

import logging
import random
import time
from typing import Callable, List, Optional

import schedule

LOGGER = logging.getLogger(__name__)


class RandomIntervalScheduler:
    """Run a task repeatedly, waiting a random whole number of seconds between runs.

    Each run is a one-shot job on a private ``schedule.Scheduler``. The next
    job is armed only after the task returns, so runs never overlap and the
    wait is measured from the end of the previous run.
    """

    def __init__(
        self,
        task: Callable[[], object],
        min_seconds: int = 45,
        max_seconds: int = 120,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
        poll_seconds: float = 1.0,
    ):
        if min_seconds < 1 or min_seconds > max_seconds:
            raise ValueError(f"Invalid interval range {min_seconds}-{max_seconds}")
        self._task = task
        self._min_seconds = min_seconds
        self._max_seconds = max_seconds
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._poll_seconds = poll_seconds
        self._scheduler = schedule.Scheduler()
        self._running = False

    @property
    def jobs(self) -> List[schedule.Job]:
        return list(self._scheduler.jobs)

    @property
    def running(self) -> bool:
        return self._running

    def next_interval_ms(self) -> int:
        return self._rng.randint(self._min_seconds, self._max_seconds) * 1000

    def arm(self) -> schedule.Job:
        seconds = self.next_interval_ms() // 1000
        LOGGER.info("Next run in %s seconds.", seconds)
        return self._scheduler.every(seconds).seconds.do(self._fire)

    def _fire(self):
        try:
            self._task()
        except Exception:  # noqa: BLE001
            LOGGER.exception("Scheduled run failed")
        finally:
            if self._running:
                self.arm()
        return schedule.CancelJob

    def run_all(self) -> None:
        """Fire every pending job now, regardless of its due time."""
        self._scheduler.run_all()

    def run_forever(self, run_now: bool = False) -> None:
        self._running = True
        if run_now:
            self._scheduler.clear()
            self._fire()
        elif not self._scheduler.jobs:
            self.arm()
        while self._running:
            self._scheduler.run_pending()
            self._sleep(self._poll_seconds)

    def stop(self) -> None:
        self._running = False
        self._scheduler.clear()
        LOGGER.debug("Scheduler stopped")
