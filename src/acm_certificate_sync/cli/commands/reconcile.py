"""One-shot reconcile of a single Certificate."""

from __future__ import annotations

import typer

from acm_certificate_sync.cli.commands.common import (
    EXIT_FAILURE,
    build_controller,
    console,
    load_config_or_exit,
)
from acm_certificate_sync.cli.output import Table
from acm_certificate_sync.integrations.kubernetes.models.base import ResourceKey
from acm_certificate_sync.services.sync.results import SyncResult, SyncStatus

_STATUS_STYLES = {
    SyncStatus.SUCCESS: "green",
    SyncStatus.SKIPPED: "yellow",
    SyncStatus.TRANSIENT_FAILURE: "yellow",
    SyncStatus.INVALID_INPUT: "red",
    SyncStatus.ERROR: "red",
}


def reconcile(
    target: str = typer.Argument(
        ...,
        help="Certificate to reconcile, as NAMESPACE/NAME (bare NAME uses 'default').",
    ),
) -> None:
    """Run a single reconcile pass for one Certificate and report the outcome.

    Admission filters are not applied: the named Certificate is reconciled
    even if its namespace or DNS names are out of scope.
    """
    try:
        key = ResourceKey.parse(target)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="TARGET") from e

    config = load_config_or_exit()
    controller = build_controller(config)
    result = controller.reconciler.reconcile(key)

    print_result(key, result)
    if result.is_failure:
        raise typer.Exit(EXIT_FAILURE)


def print_result(key: ResourceKey, result: SyncResult) -> None:
    style = _STATUS_STYLES.get(result.status, "white")
    table = Table(title="Reconcile Result")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_row("Certificate", str(key))
    table.add_row("Status", f"[{style}]{result.status.value}[/{style}]")
    table.add_row("Message", result.message or "-")
    if result.retry_after is not None:
        table.add_row("Retry after", f"{result.retry_after:g}s")
    if result.error is not None:
        table.add_row("Error", str(result.error))
    console.print(table)
