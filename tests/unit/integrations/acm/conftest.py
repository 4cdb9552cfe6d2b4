"""Shared fixtures for ACM integration tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from acm_certificate_sync.integrations.acm.client import AcmCertificateStore
from acm_certificate_sync.integrations.acm.config import AcmConfig


@pytest.fixture
def acm_config() -> AcmConfig:
    """ACM configuration with retries that do not sleep."""
    return AcmConfig(region="eu-west-1", retry_attempts=3, retry_min_wait=0, retry_max_wait=0)


@pytest.fixture
def mock_acm_client() -> MagicMock:
    """Mock boto3 ACM client whose listing is empty by default."""
    client = MagicMock()
    client.get_paginator.return_value.paginate.return_value = [{"CertificateSummaryList": []}]
    return client


@pytest.fixture
def store(acm_config: AcmConfig, mock_acm_client: MagicMock) -> AcmCertificateStore:
    """AcmCertificateStore over the mock client."""
    return AcmCertificateStore(acm_config, client=mock_acm_client)
