"""Check refresher — fetch one check's result and reconcile its gauge series."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from ta_exporter.advisor.client import AdvisorError
from ta_exporter.advisor.models import Check, CheckResult
from ta_exporter.metrics.sink import LabelTuple, MetricsSink
from ta_exporter.refresh.retry import RetryPolicy

if TYPE_CHECKING:
    from ta_exporter.advisor.client import AdvisorClient

logger = logging.getLogger(__name__)


class CheckRefresher:
    """Refreshes a single check: fetch with retry, then clear-then-set.

    Failures never propagate. An exhausted fetch leaves whatever the sink
    already holds for the check until a later cycle succeeds.
    """

    def __init__(
        self,
        client: AdvisorClient,
        sink: MetricsSink,
        retry: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        log: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.sink = sink
        self.retry = retry or RetryPolicy()
        self._sleep = sleep
        self._log = log or logger
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def refresh(self, check: Check) -> bool:
        """Refresh ``check``. Returns False when every attempt failed."""
        result = self._fetch(check)
        if result is None:
            return False
        self._reconcile(check, result)
        return True

    def _fetch(self, check: Check) -> CheckResult | None:
        attempts = self.retry.max_attempts
        for attempt in range(1, attempts + 1):
            try:
                return self.client.get_check_result(check.id)
            except AdvisorError as e:
                self._log.warning(
                    "error refreshing check %s (id %s): %s (attempt %d/%d)",
                    check.name, check.id, e, attempt, attempts,
                )
                if self.retry.should_retry(attempt):
                    self._sleep(self.retry.delay_after(attempt))

        self._log.warning(
            "giving up on check %s (id %s) after %d attempts, keeping previous value",
            check.name, check.id, attempts,
        )
        return None

    def _lock_for(self, check_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(check_id)
            if lock is None:
                lock = self._locks[check_id] = threading.Lock()
            return lock

    def forget(self, check_id: str) -> int:
        """Drop every series and the lock of a check that is no longer listed."""
        with self._lock_for(check_id):
            removed = self.sink.clear_check(check_id)
        with self._locks_guard:
            self._locks.pop(check_id, None)
        return removed

    def _reconcile(self, check: Check, result: CheckResult) -> None:
        # Overlapping cycles may refresh the same check; serialize per check id
        with self._lock_for(check.id):
            # Clear by id so a renamed or recategorised check leaves no old tuple
            self.sink.clear_check(check.id)
            self.sink.set(
                LabelTuple(check.id, check.name, check.category, result.status.value),
                float(result.flagged_count),
            )
        self._log.debug(
            "check %s (id %s) -> %s (%d flagged)",
            check.name, check.id, result.status.value, result.flagged_count,
        )
