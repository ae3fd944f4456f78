"""HTTP routes.

Endpoints:
  GET /metrics — Prometheus text exposition of the check gauge
  GET /status  — refresh scheduler counters and last cycle report

Neither route reflects refresh-pipeline errors as HTTP errors: /metrics
always serves whatever the sink currently holds.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST

router = APIRouter()


@router.get("/metrics")
def metrics(request: Request) -> Response:
    """Scrape endpoint."""
    sink = request.app.state.sink
    return Response(content=sink.render(), media_type=CONTENT_TYPE_LATEST)


@router.get("/status")
def status(request: Request) -> dict[str, Any]:
    """Scheduler state, or an idle placeholder when none is wired."""
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        return {"scheduler": None}
    return {"scheduler": scheduler.state.to_dict()}
