"""Show the resolved controller configuration."""

from __future__ import annotations

from acm_certificate_sync.cli.commands.common import console, load_config_or_exit
from acm_certificate_sync.cli.output import Table


def show_config() -> None:
    """Print the configuration read from the environment."""
    config = load_config_or_exit(require_region=False)

    table = Table(title="Controller Configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_column("Source", style="dim")

    sync = config.sync
    table.add_row(
        "Namespaces",
        ", ".join(sync.namespaces) if sync.namespaces else "all",
        "WATCHED_NAMESPACES",
    )
    table.add_row("Domain patterns", ", ".join(sync.domain_patterns), "DOMAIN_PATTERNS")
    table.add_row("Retry delay", f"{sync.retry_delay:g}s", "ACM_SYNC_RETRY_DELAY")
    table.add_row("Workers", str(sync.workers), "ACM_SYNC_WORKERS")
    table.add_row("Finalizer", sync.finalizer, "ACM_SYNC_FINALIZER")

    kube = config.kubernetes
    table.add_row("Kubeconfig", kube.kubeconfig or "auto", "ACM_SYNC_KUBECONFIG")
    table.add_row("Context", kube.context or "current", "ACM_SYNC_CONTEXT")

    acm = config.acm
    table.add_row("AWS region", acm.region or "[red]not set[/red]", "AWS_REGION")
    table.add_row("ACM endpoint", acm.endpoint_url or "default", "ACM_ENDPOINT_URL")
    table.add_row("Retry attempts", str(acm.retry_attempts), "ACM_SYNC_RETRY_ATTEMPTS")

    console.print(table)
