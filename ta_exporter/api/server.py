"""FastAPI application serving the exporter's scrape endpoint."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ta_exporter import __version__
from ta_exporter.api.routes import router
from ta_exporter.metrics.sink import MetricsSink
from ta_exporter.refresh.scheduler import RefreshScheduler

logger = logging.getLogger(__name__)


def create_app(sink: MetricsSink, scheduler: RefreshScheduler | None = None) -> FastAPI:
    """Create the exporter app around an existing sink and scheduler.

    The scheduler's periodic ticker runs for the lifetime of the app; its
    startup cycle is expected to have run already.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if scheduler is not None:
            await scheduler.start()
        yield
        if scheduler is not None:
            await scheduler.stop()

    app = FastAPI(
        title="AWS Trusted Advisor Exporter",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.sink = sink
    app.state.scheduler = scheduler
    app.include_router(router)
    return app
