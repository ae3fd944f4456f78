"""Entry point for the exporter — `ta-exporter` console script."""

from __future__ import annotations

import logging
import sys

import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from ta_exporter.advisor.client import AdvisorClient, AdvisorError
from ta_exporter.api.server import create_app
from ta_exporter.config import LANGUAGE, SUPPORT_REGION, Settings
from ta_exporter.metrics.sink import MetricsSink
from ta_exporter.refresh.orchestrator import RefreshOrchestrator
from ta_exporter.refresh.refresher import CheckRefresher
from ta_exporter.refresh.scheduler import RefreshScheduler

console = Console()
logger = logging.getLogger("ta_exporter")

EXIT_STARTUP_FAILED = 1
EXIT_BAD_CONFIG = 2


def load_settings() -> Settings:
    """Read settings from the environment, exiting on malformed values."""
    try:
        return Settings()
    except ValidationError as e:
        console.print(f"[bold red]Invalid configuration:[/bold red]\n{e}")
        sys.exit(EXIT_BAD_CONFIG)


def main() -> None:
    """Run the startup cycle, then serve /metrics while refreshing periodically."""
    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    console.print(
        Panel.fit(
            f"[bold]AWS Trusted Advisor Exporter[/bold]\n"
            f"Listen:      {settings.listen_host}:{settings.listen_port}\n"
            f"Refresh:     every {settings.refresh_period}s"
            f"{' (skip overlapping)' if settings.skip_overlapping_cycles else ''}\n"
            f"Concurrency: {settings.concurrency}\n"
            f"Region/lang: {SUPPORT_REGION}/{LANGUAGE}",
            title="ta-exporter",
            border_style="green",
        )
    )

    client = AdvisorClient(timeout=settings.api_timeout)
    sink = MetricsSink()
    refresher = CheckRefresher(client, sink)
    orchestrator = RefreshOrchestrator(client, refresher, concurrency=settings.concurrency)
    scheduler = RefreshScheduler(
        orchestrator,
        period=settings.refresh_period,
        skip_overlapping=settings.skip_overlapping_cycles,
    )

    try:
        scheduler.run_startup_cycle()
    except AdvisorError as e:
        logger.critical("cannot describe trusted advisor checks: %s", e)
        sys.exit(EXIT_STARTUP_FAILED)

    uvicorn.run(
        create_app(sink, scheduler),
        host=settings.listen_host,
        port=settings.listen_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
