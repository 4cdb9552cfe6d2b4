"""AWS Certificate Manager client configuration."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

MANAGED_BY_TAG = "managed-by"
MANAGED_BY_VALUE = "acm-certificate-sync"


class AcmConfig(BaseModel):
    """Connection settings for the ACM client."""

    model_config = ConfigDict(extra="forbid")

    region: str | None = None
    endpoint_url: str | None = None
    profile: str | None = None
    retry_attempts: int = 3
    retry_min_wait: float = 1
    retry_max_wait: float = 10
    tags: dict[str, str] = {MANAGED_BY_TAG: MANAGED_BY_VALUE}

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate retry_attempts is at least one."""
        if v < 1:
            raise ValueError("retry_attempts must be at least 1")
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: dict[str, str]) -> dict[str, str]:
        """ACM accepts at most 50 tags per certificate."""
        if len(v) > 50:
            raise ValueError("at most 50 tags can be attached to a certificate")
        return v

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> AcmConfig:
        """Create configuration with environment variable overrides.

        Supported environment variables:
            AWS_REGION: Region the certificates are imported into
            ACM_ENDPOINT_URL: Endpoint override (e.g. a local ACM emulator)
            AWS_PROFILE: Named credentials profile
            ACM_SYNC_RETRY_ATTEMPTS: Attempts for throttled or failed connections
        """
        config_dict = base_config.copy() if base_config else {}

        if region := os.environ.get("AWS_REGION"):
            config_dict["region"] = region
        if endpoint_url := os.environ.get("ACM_ENDPOINT_URL"):
            config_dict["endpoint_url"] = endpoint_url
        if profile := os.environ.get("AWS_PROFILE"):
            config_dict["profile"] = profile
        if retry_attempts := os.environ.get("ACM_SYNC_RETRY_ATTEMPTS"):
            config_dict["retry_attempts"] = int(retry_attempts)

        return cls.model_validate(config_dict)
