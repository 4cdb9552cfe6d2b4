"""Kubernetes connection configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class KubernetesConfig(BaseModel):
    """How the controller reaches the API server.

    When ``kubeconfig`` is unset the default kubeconfig location is tried
    first, then the in-cluster service account.
    """

    model_config = ConfigDict(extra="forbid")

    kubeconfig: str | None = None
    context: str | None = None
    timeout: int = 30
    watch_timeout: int = 300
    retry_attempts: int = 3

    @field_validator("timeout", "watch_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeouts are positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate retry_attempts is at least one."""
        if v < 1:
            raise ValueError("retry_attempts must be at least 1")
        return v

    @field_validator("kubeconfig")
    @classmethod
    def validate_kubeconfig(cls, v: str | None) -> str | None:
        """Expand ~ in kubeconfig path."""
        if not v:
            return None
        return str(Path(v).expanduser())

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> KubernetesConfig:
        """Create configuration with environment variable overrides.

        Supported environment variables:
            ACM_SYNC_KUBECONFIG: Path to a kubeconfig file
            ACM_SYNC_CONTEXT: Kubeconfig context to use
            ACM_SYNC_K8S_TIMEOUT: API request timeout in seconds
            ACM_SYNC_WATCH_TIMEOUT: Server-side watch timeout in seconds
            ACM_SYNC_RETRY_ATTEMPTS: Attempts for transient connection errors
        """
        config_dict = base_config.copy() if base_config else {}

        if kubeconfig := os.environ.get("ACM_SYNC_KUBECONFIG"):
            config_dict["kubeconfig"] = kubeconfig
        if context := os.environ.get("ACM_SYNC_CONTEXT"):
            config_dict["context"] = context
        if timeout := os.environ.get("ACM_SYNC_K8S_TIMEOUT"):
            config_dict["timeout"] = int(timeout)
        if watch_timeout := os.environ.get("ACM_SYNC_WATCH_TIMEOUT"):
            config_dict["watch_timeout"] = int(watch_timeout)
        if retry_attempts := os.environ.get("ACM_SYNC_RETRY_ATTEMPTS"):
            config_dict["retry_attempts"] = int(retry_attempts)

        return cls.model_validate(config_dict)
