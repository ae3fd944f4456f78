"""Refresh pipeline — retry policy, check refresher, orchestrator, scheduler."""

from .orchestrator import CycleReport, RefreshOrchestrator
from .refresher import CheckRefresher
from .retry import RetryPolicy
from .scheduler import RefreshScheduler, SchedulerState
