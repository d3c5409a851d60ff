"""Periodic sweep that purges expired events.

One background thread runs a sweep at start and then every ``interval``.
Sweeps never overlap: a sweep requested while another is running is skipped.
A failure on one event is logged and the sweep moves on to the next.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from events.domain import EventId
from events.domain.expiry import utc_now
from events.services.purge import EventPurger
from events.stores.interfaces import EventStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = timedelta(hours=6)


@dataclass
class SweepReport:
    started_at: datetime
    examined: int = 0
    purged: list[EventId] = field(default_factory=list)
    failed: list[EventId] = field(default_factory=list)


class CleanupScheduler:
    """Owns the sweep loop, its lock and its clock."""

    def __init__(
        self,
        store: EventStore,
        purger: EventPurger,
        *,
        interval: timedelta = DEFAULT_INTERVAL,
        clock: Callable[[], datetime] = utc_now,
        after_sweep: Callable[[], None] | None = None,
    ) -> None:
        if interval <= timedelta(0):
            raise ValueError("Cleanup interval must be positive")
        self._store = store
        self._purger = purger
        self._interval = interval
        self._clock = clock
        self._after_sweep = after_sweep
        self._sweep_lock = threading.Lock()
        self._stopping = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> timedelta:
        return self._interval

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stopping.clear()
        self._thread = threading.Thread(target=self._loop, name="event-cleanup", daemon=True)
        self._thread.start()
        logger.info("Cleanup scheduler started, interval %s", self._interval)

    def stop(self, timeout: float | None = None) -> None:
        self._stopping.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Cleanup scheduler stopped")

    def run_sweep(self) -> SweepReport | None:
        """Run one sweep now. Returns None if a sweep is already in progress."""
        if not self._sweep_lock.acquire(blocking=False):
            logger.warning("Cleanup sweep already in progress, skipping")
            return None
        try:
            return self._sweep()
        finally:
            self._sweep_lock.release()

    def _sweep(self) -> SweepReport:
        now = self._clock()
        report = SweepReport(started_at=now)
        logger.info("Starting cleanup sweep for events expired before %s", now.isoformat())

        try:
            expired = self._store.list_expired(now)
        except Exception:
            logger.exception("Could not list expired events")
            return report

        for event in expired:
            report.examined += 1
            try:
                self._purger.purge(event)
            except Exception:
                logger.exception("Cleanup of expired event %s (%s) failed", event.id, event.name)
                report.failed.append(event.id)
            else:
                report.purged.append(event.id)

        if report.examined:
            logger.info(
                "Cleanup sweep finished: %d expired, %d purged, %d failed",
                report.examined,
                len(report.purged),
                len(report.failed),
            )
        return report

    def _run_after_sweep(self) -> None:
        if self._after_sweep is None:
            return
        try:
            self._after_sweep()
        except Exception:
            logger.exception("Post-sweep hook failed")

    def _loop(self) -> None:
        while not self._stopping.is_set():
            try:
                self.run_sweep()
            finally:
                self._run_after_sweep()
            if self._stopping.wait(self._interval.total_seconds()):
                break
