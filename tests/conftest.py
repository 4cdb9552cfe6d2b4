"""Shared pytest fixtures for acm_certificate_sync tests."""

from __future__ import annotations

import datetime
import os
from collections.abc import Callable

import pytest
import typer
from typer.testing import CliRunner

from acm_certificate_sync.cli.main import app

# Variables read by the configuration layer
CONFIG_ENV_VARS = (
    "WATCHED_NAMESPACES",
    "DOMAIN_PATTERNS",
    "AWS_REGION",
    "AWS_PROFILE",
    "ACM_ENDPOINT_URL",
)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("ACM_SYNC_") or key in CONFIG_ENV_VARS:
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture(scope="session")
def make_certificate_pem() -> Callable[[str], str]:
    """Return a factory producing self-signed PEM certificates for a common name."""
    from cryptography import x509
    from cryptography.hazmat.primitives import hashes, serialization
    from cryptography.hazmat.primitives.asymmetric import ec
    from cryptography.x509.oid import NameOID

    key = ec.generate_private_key(ec.SECP256R1())

    def _make(common_name: str) -> str:
        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
        now = datetime.datetime.now(datetime.UTC)
        cert = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + datetime.timedelta(days=1))
            .sign(key, hashes.SHA256())
        )
        return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")

    return _make
