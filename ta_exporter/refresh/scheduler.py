"""Refresh scheduler — startup cycle plus fixed-rate periodic cycles.

Lifecycle:
    scheduler = RefreshScheduler(orchestrator, period=300)
    scheduler.run_startup_cycle()   # raises if checks cannot be listed
    await scheduler.start()
    ...
    await scheduler.stop()

Ticks fire on a fixed wall-clock period whether or not the previous cycle
has finished, so a slow cycle can overlap the next one. With
``skip_overlapping=True`` a tick is dropped while a cycle is still running.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ta_exporter.advisor.client import AdvisorError

if TYPE_CHECKING:
    from ta_exporter.refresh.orchestrator import CycleReport, RefreshOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_PERIOD = 300  # seconds


class SchedulerState:
    """Counters and last-cycle details, read by the /status route."""

    def __init__(self) -> None:
        self.cycles_started: int = 0
        self.cycles_completed: int = 0
        self.cycles_failed: int = 0
        self.cycles_skipped: int = 0
        self.in_flight: int = 0
        self.last_report: CycleReport | None = None
        self.last_success: str | None = None
        self.last_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "cycles_started": self.cycles_started,
            "cycles_completed": self.cycles_completed,
            "cycles_failed": self.cycles_failed,
            "cycles_skipped": self.cycles_skipped,
            "in_flight": self.in_flight,
            "last_report": self.last_report.to_dict() if self.last_report else None,
            "last_success": self.last_success,
            "last_error": self.last_error,
        }


class RefreshScheduler:
    """Triggers the orchestrator at startup and then every ``period`` seconds."""

    def __init__(
        self,
        orchestrator: RefreshOrchestrator,
        period: float = DEFAULT_REFRESH_PERIOD,
        skip_overlapping: bool = False,
        log: logging.Logger | None = None,
    ) -> None:
        if period <= 0:
            raise ValueError("period must be > 0")
        self.orchestrator = orchestrator
        self.period = period
        self.skip_overlapping = skip_overlapping
        self.state = SchedulerState()
        self._log = log or logger
        self._task: asyncio.Task[None] | None = None
        self._cycles: set[asyncio.Task[None]] = set()
        self._running = False

    def run_startup_cycle(self) -> CycleReport:
        """Blocking first cycle so the first scrape already has data.

        A listing failure is not swallowed here: the process cannot serve
        anything useful without the initial list of checks.
        """
        self.state.cycles_started += 1
        try:
            report = self.orchestrator.refresh()
        except AdvisorError as e:
            self.state.cycles_failed += 1
            self.state.last_error = str(e)
            raise
        self._record(report)
        return report

    async def start(self) -> None:
        """Start the periodic ticker."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._tick_loop(), name="ta-refresh-ticker")
        self._log.info(
            "refresh scheduler started (period=%ss, skip_overlapping=%s)",
            self.period, self.skip_overlapping,
        )

    async def stop(self, timeout: float | None = None) -> None:
        """Stop ticking and wait for in-flight cycles to finish."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._cycles:
            await asyncio.wait(set(self._cycles), timeout=timeout)
        self._log.info("refresh scheduler stopped")

    async def _tick_loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.period
        while self._running:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            now = loop.time()
            # Fixed rate; ticks missed while the loop was blocked are dropped
            while next_tick <= now:
                next_tick += self.period
            self._dispatch()

    def _dispatch(self) -> None:
        if self.skip_overlapping and self._cycles:
            self.state.cycles_skipped += 1
            self._log.warning(
                "previous refresh cycle still running (%d in flight), skipping tick",
                len(self._cycles),
            )
            return
        task = asyncio.create_task(self._run_cycle())
        self._cycles.add(task)
        task.add_done_callback(self._cycles.discard)

    async def _run_cycle(self) -> None:
        loop = asyncio.get_running_loop()
        self.state.cycles_started += 1
        self.state.in_flight += 1
        try:
            report = await loop.run_in_executor(None, self.orchestrator.refresh)
        except AdvisorError as e:
            self.state.cycles_failed += 1
            self.state.last_error = str(e)
            self._log.error("cannot describe trusted advisor checks, skipping cycle: %s", e)
        except Exception as e:
            self.state.cycles_failed += 1
            self.state.last_error = f"{type(e).__name__}: {e}"
            self._log.exception("refresh cycle crashed")
        else:
            self._record(report)
        finally:
            self.state.in_flight -= 1

    def _record(self, report: CycleReport) -> None:
        self.state.cycles_completed += 1
        self.state.last_report = report
        self.state.last_success = datetime.now(timezone.utc).isoformat()
