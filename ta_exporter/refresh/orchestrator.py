"""Refresh orchestrator — one full cycle over every Trusted Advisor check.

Lists the checks, drains them from a shared queue with a fixed number of
worker threads, and joins every worker before returning.
"""

from __future__ import annotations

import logging
import queue
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ta_exporter.advisor.models import Check

if TYPE_CHECKING:
    from ta_exporter.advisor.client import AdvisorClient
    from ta_exporter.refresh.refresher import CheckRefresher

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 10


@dataclass
class CycleReport:
    """Outcome of one refresh cycle."""

    listed: int = 0
    refreshed: int = 0
    failed: int = 0
    pruned: int = 0
    started_at: str = ""
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class RefreshOrchestrator:
    """Fans out check refreshes across a bounded worker pool."""

    def __init__(
        self,
        client: AdvisorClient,
        refresher: CheckRefresher,
        concurrency: int = DEFAULT_CONCURRENCY,
        log: logging.Logger | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.client = client
        self.refresher = refresher
        self.concurrency = concurrency
        self._log = log or logger

    def refresh(self) -> CycleReport:
        """Run a full cycle. Raises AdvisorError if the checks cannot be listed."""
        report = CycleReport(started_at=datetime.now(timezone.utc).isoformat())
        t0 = time.perf_counter()
        self._log.info("refreshing trusted advisor checks and statuses")

        checks = self.client.list_checks()
        report.listed = len(checks)

        jobs: queue.Queue[Check] = queue.Queue()
        for check in checks:
            jobs.put(check)

        workers = min(self.concurrency, len(checks))
        self._log.info("refreshing %d checks with %d workers", len(checks), workers)

        if workers:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ta-worker") as pool:
                futures = [pool.submit(self._worker, i, jobs) for i in range(workers)]
                wait(futures)
            for fut in futures:
                ok, failed = fut.result()
                report.refreshed += ok
                report.failed += failed

        report.pruned = self._prune({c.id for c in checks})

        report.duration_seconds = round(time.perf_counter() - t0, 3)
        self._log.info(
            "cycle done: %d listed, %d refreshed, %d failed, %d pruned in %.1fs",
            report.listed, report.refreshed, report.failed, report.pruned,
            report.duration_seconds,
        )
        return report

    def _prune(self, listed: set[str]) -> int:
        """Remove series of checks absent from this cycle's listing.

        Listed checks whose fetch failed keep their previous value.
        """
        removed = 0
        for check_id in self.refresher.sink.check_ids() - listed:
            self._log.info("check %s no longer listed, removing its series", check_id)
            removed += self.refresher.forget(check_id)
        return removed

    def _worker(self, index: int, jobs: queue.Queue[Check]) -> tuple[int, int]:
        """Pull checks until the queue is empty. Returns (refreshed, failed)."""
        ok = failed = 0
        while True:
            try:
                check = jobs.get_nowait()
            except queue.Empty:
                return ok, failed
            self._log.info(
                "worker %d refreshing check %s (id %s, category %s)",
                index, check.name, check.id, check.category,
            )
            if self.refresher.refresh(check):
                ok += 1
            else:
                failed += 1
