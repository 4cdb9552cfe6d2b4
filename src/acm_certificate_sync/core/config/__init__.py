"""Configuration management with Pydantic validation."""

from acm_certificate_sync.core.config.models import (
    ConfigurationError,
    ControllerConfig,
    SyncConfig,
    load_config,
)

__all__ = [
    "ConfigurationError",
    "ControllerConfig",
    "SyncConfig",
    "load_config",
]
