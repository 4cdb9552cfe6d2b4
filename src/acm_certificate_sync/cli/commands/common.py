"""Helpers shared by CLI commands."""

from __future__ import annotations

import structlog
import typer
from rich.console import Console

from acm_certificate_sync.core.config import ConfigurationError, ControllerConfig, load_config
from acm_certificate_sync.integrations.acm import AcmCertificateStore
from acm_certificate_sync.integrations.kubernetes import (
    KubernetesClient,
    KubernetesConnectionError,
)
from acm_certificate_sync.services.kubernetes import CertificateResourceManager
from acm_certificate_sync.services.sync import CertificateSyncController

console = Console()
logger = structlog.get_logger()

# Exit codes
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def load_config_or_exit(*, require_region: bool = True) -> ControllerConfig:
    """Load configuration, printing the problem and exiting on failure."""
    try:
        return load_config(require_region=require_region)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(EXIT_CONFIG_ERROR) from e


def build_controller(config: ControllerConfig) -> CertificateSyncController:
    """Connect to the cluster and ACM and wire up the controller."""
    try:
        client = KubernetesClient(config.kubernetes)
    except KubernetesConnectionError as e:
        console.print(f"[red]Cannot connect to Kubernetes:[/red] {e}")
        raise typer.Exit(EXIT_FAILURE) from e

    if not client.check_connection():
        console.print(
            f"[red]Kubernetes API server unreachable[/red] (context {client.current_context})"
        )
        raise typer.Exit(EXIT_FAILURE)

    logger.info("connected_to_cluster", context=client.current_context)
    resources = CertificateResourceManager(client)
    store = AcmCertificateStore(config.acm)
    return CertificateSyncController.from_config(config, resources, store)
