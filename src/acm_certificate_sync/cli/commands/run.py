"""Run the sync controller until interrupted."""

from __future__ import annotations

import signal
import threading
from types import FrameType

import structlog

from acm_certificate_sync.cli.commands.common import (
    build_controller,
    console,
    load_config_or_exit,
)

logger = structlog.get_logger()


def run() -> None:
    """Watch Certificates and keep ACM in sync until SIGINT or SIGTERM."""
    config = load_config_or_exit()
    controller = build_controller(config)

    stop = threading.Event()

    def _request_stop(signum: int, frame: FrameType | None) -> None:
        logger.info("shutdown_requested", signal=signal.Signals(signum).name)
        stop.set()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)

    console.print(
        f"[green]Syncing certificates for[/green] {', '.join(config.sync.domain_patterns)} "
        f"[dim](region {config.acm.region})[/dim]"
    )
    controller.run(stop)
    console.print("[green]Stopped.[/green]")
