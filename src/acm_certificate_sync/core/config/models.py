"""Controller configuration models with Pydantic validation.

Configuration is read once at startup from environment variables and passed
explicitly into the admission filter, reconciler and controller.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from acm_certificate_sync.integrations.acm.config import AcmConfig
from acm_certificate_sync.integrations.kubernetes.config import KubernetesConfig

# Namespace allow-list values meaning "every namespace"
ALL_NAMESPACES_SENTINELS = frozenset({"all", "all-namespaces"})

DEFAULT_FINALIZER = "acm-certificate-sync.io/finalizer"
DEFAULT_RETRY_DELAY = 10.0
DEFAULT_WORKERS = 2


class ConfigurationError(Exception):
    """Raised when the startup configuration is missing or invalid."""


def _split_csv(value: str | list[str] | None) -> list[str]:
    """Split a comma-separated string, dropping blanks."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


class SyncConfig(BaseModel):
    """Scope and pacing of the sync controller."""

    model_config = ConfigDict(extra="forbid")

    namespaces: list[str] = Field(
        default_factory=list, description="Namespace allow-list; empty means all"
    )
    domain_patterns: list[str] = Field(description="Glob patterns of in-scope DNS names")
    retry_delay: float = Field(
        default=DEFAULT_RETRY_DELAY, description="Seconds before retrying a transient failure"
    )
    workers: int = Field(default=DEFAULT_WORKERS, description="Concurrent reconcile workers")
    finalizer: str = Field(default=DEFAULT_FINALIZER, description="Cleanup finalizer token")

    @field_validator("namespaces", mode="before")
    @classmethod
    def validate_namespaces(cls, v: Any) -> list[str]:
        """Accept a comma-separated string and fold the "all" sentinels to empty."""
        namespaces = _split_csv(v)
        if any(ns in ALL_NAMESPACES_SENTINELS for ns in namespaces):
            return []
        return namespaces

    @field_validator("domain_patterns", mode="before")
    @classmethod
    def validate_domain_patterns(cls, v: Any) -> list[str]:
        """Require at least one pattern; nothing is synced implicitly."""
        patterns = _split_csv(v)
        if not patterns:
            raise ValueError("at least one domain pattern is required")
        return patterns

    @field_validator("retry_delay")
    @classmethod
    def validate_retry_delay(cls, v: float) -> float:
        """Validate retry_delay is positive."""
        if v <= 0:
            raise ValueError("retry_delay must be positive")
        return v

    @field_validator("workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Validate there is at least one worker."""
        if v < 1:
            raise ValueError("workers must be at least 1")
        return v

    @field_validator("finalizer")
    @classmethod
    def validate_finalizer(cls, v: str) -> str:
        """Finalizers must be domain-qualified, e.g. ``example.io/cleanup``."""
        if "/" not in v or v.startswith("/") or v.endswith("/"):
            raise ValueError("finalizer must be of the form <domain>/<name>")
        return v

    @property
    def watches_all_namespaces(self) -> bool:
        """Whether the namespace allow-list is unrestricted."""
        return not self.namespaces

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> SyncConfig:
        """Create configuration with environment variable overrides.

        Supported environment variables:
            WATCHED_NAMESPACES: Comma-separated namespaces, or "all"
            DOMAIN_PATTERNS: Comma-separated glob patterns (required)
            ACM_SYNC_RETRY_DELAY: Seconds before retrying a transient failure
            ACM_SYNC_WORKERS: Number of reconcile workers
            ACM_SYNC_FINALIZER: Finalizer token placed on managed Certificates
        """
        config_dict = base_config.copy() if base_config else {}

        if namespaces := os.environ.get("WATCHED_NAMESPACES"):
            config_dict["namespaces"] = namespaces
        if patterns := os.environ.get("DOMAIN_PATTERNS"):
            config_dict["domain_patterns"] = patterns
        if retry_delay := os.environ.get("ACM_SYNC_RETRY_DELAY"):
            config_dict["retry_delay"] = float(retry_delay)
        if workers := os.environ.get("ACM_SYNC_WORKERS"):
            config_dict["workers"] = int(workers)
        if finalizer := os.environ.get("ACM_SYNC_FINALIZER"):
            config_dict["finalizer"] = finalizer

        return cls.model_validate(config_dict)


class ControllerConfig(BaseModel):
    """Complete controller configuration."""

    model_config = ConfigDict(extra="forbid")

    sync: SyncConfig
    kubernetes: KubernetesConfig = KubernetesConfig()
    acm: AcmConfig = AcmConfig()


def load_config(
    base_config: dict[str, Any] | None = None,
    *,
    require_region: bool = True,
) -> ControllerConfig:
    """Load and validate the controller configuration from the environment.

    Args:
        base_config: Optional values applied before environment overrides,
            keyed by section (``sync``, ``kubernetes``, ``acm``).
        require_region: Fail when no AWS region is configured.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If any section is invalid or the region is missing.
    """
    base = base_config or {}
    try:
        config = ControllerConfig(
            sync=SyncConfig.from_env(base.get("sync")),
            kubernetes=KubernetesConfig.from_env(base.get("kubernetes")),
            acm=AcmConfig.from_env(base.get("acm")),
        )
    except (ValidationError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    if require_region and not config.acm.region:
        raise ConfigurationError("Invalid configuration: AWS_REGION must be set")
    return config
