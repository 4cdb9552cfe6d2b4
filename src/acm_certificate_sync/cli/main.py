"""Main CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from acm_certificate_sync import __version__
from acm_certificate_sync.cli.commands import config, reconcile, run
from acm_certificate_sync.logging.config import configure_logging

app = typer.Typer(
    name="acm-sync",
    help="Synchronize cert-manager Certificates into AWS Certificate Manager.",
    add_completion=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"acm-sync version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json",
        help="Emit logs as JSON lines.",
        envvar="ACM_SYNC_JSON_LOGS",
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Also write JSON logs to this file.",
        envvar="ACM_SYNC_LOG_FILE",
        dir_okay=False,
    ),
) -> None:
    """acm-sync - keep ACM in step with cert-manager."""
    configure_logging(verbose=verbose, debug=debug, json_output=json_logs, log_file=log_file)


# Register subcommands
app.command()(run.run)
app.command()(reconcile.reconcile)
app.command("config")(config.show_config)


if __name__ == "__main__":
    app()
