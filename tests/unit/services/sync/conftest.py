"""Shared fixtures for sync service tests.

The reconciler is exercised against in-memory stand-ins for the Kubernetes
resource manager and the certificate store, so tests can inspect the state
a pass leaves behind rather than only the calls it made.
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from acm_certificate_sync.core.config.models import SyncConfig
from acm_certificate_sync.integrations.acm.base import CertificateStore
from acm_certificate_sync.integrations.acm.exceptions import AcmError
from acm_certificate_sync.integrations.acm.models import ExternalCertificateRecord
from acm_certificate_sync.integrations.kubernetes.exceptions import (
    KubernetesError,
    KubernetesNotFoundError,
)
from acm_certificate_sync.integrations.kubernetes.models.base import ResourceKey
from acm_certificate_sync.integrations.kubernetes.models.certmanager import (
    CertificateResource,
    CertManagerCondition,
)
from acm_certificate_sync.integrations.kubernetes.models.secret import SecretMaterial

FINALIZER = "acm-certificate-sync.io/finalizer"


class FakeResources:
    """In-memory Certificates and Secrets with finalizer patching."""

    def __init__(self) -> None:
        self.certificates: dict[ResourceKey, CertificateResource] = {}
        self.secrets: dict[ResourceKey, SecretMaterial] = {}
        self.patch_error: KubernetesError | None = None
        self.get_error: KubernetesError | None = None
        self.secret_reads = 0

    def put_certificate(
        self,
        name: str = "cert-a",
        namespace: str = "default",
        dns_names: Sequence[str] = ("example.com",),
        ready: bool = True,
        deleting: bool = False,
        finalizers: Sequence[str] = (),
    ) -> ResourceKey:
        cert = CertificateResource(
            name=name,
            namespace=namespace,
            resource_version="1",
            secret_name=f"{name}-tls",
            dns_names=list(dns_names),
            conditions=[
                CertManagerCondition(type="Ready", status="True" if ready else "False")
            ],
            finalizers=list(finalizers),
            deletion_timestamp="2026-01-01T00:00:00Z" if deleting else None,
        )
        self.certificates[cert.key] = cert
        return cert.key

    def put_secret(
        self,
        name: str = "cert-a-tls",
        namespace: str = "default",
        certificate: str | None = "LEAF",
        private_key: str | None = "KEY",
        chain: str | None = None,
    ) -> None:
        self.secrets[ResourceKey(namespace, name)] = SecretMaterial(
            name=name,
            namespace=namespace,
            certificate=certificate,
            private_key=private_key,
            chain=chain,
        )

    def get_certificate(self, name: str, namespace: str) -> CertificateResource:
        if self.get_error is not None:
            raise self.get_error
        try:
            return self.certificates[ResourceKey(namespace, name)]
        except KeyError:
            raise KubernetesNotFoundError(
                resource_type="Certificate", resource_name=name, namespace=namespace
            ) from None

    def get_secret_material(self, name: str, namespace: str) -> SecretMaterial:
        self.secret_reads += 1
        try:
            return self.secrets[ResourceKey(namespace, name)]
        except KeyError:
            raise KubernetesNotFoundError(
                resource_type="Secret", resource_name=name, namespace=namespace
            ) from None

    def add_finalizer(self, certificate: CertificateResource, token: str) -> CertificateResource:
        return self._patch(certificate, [*certificate.finalizers, token])

    def remove_finalizer(
        self, certificate: CertificateResource, token: str
    ) -> CertificateResource:
        return self._patch(certificate, [f for f in certificate.finalizers if f != token])

    def _patch(self, certificate: CertificateResource, finalizers: list[str]) -> CertificateResource:
        if self.patch_error is not None:
            raise self.patch_error
        updated = certificate.model_copy(update={"finalizers": finalizers})
        if updated.is_deleting and not finalizers:
            # The API server removes the object once its last finalizer is gone
            self.certificates.pop(updated.key, None)
        else:
            self.certificates[updated.key] = updated
        return updated


class FakeCertificateStore(CertificateStore):
    """Certificate store keeping one record per domain in memory."""

    def __init__(self) -> None:
        self.records: dict[str, tuple[str, str, str]] = {}
        self.imports: list[tuple[str, str, str]] = []
        self.deletes: list[str] = []
        self.failing: set[str] = set()
        self._next_id = 0

    @property
    def calls(self) -> int:
        return len(self.imports) + len(self.deletes)

    def find_by_domain(self, domain: str) -> ExternalCertificateRecord | None:
        if domain not in self.records:
            return None
        return ExternalCertificateRecord(domain_name=domain, certificate_arn=self.records[domain][0])

    def import_or_update(self, domain: str, cert_pem: str, key_pem: str) -> str:
        self.imports.append((domain, cert_pem, key_pem))
        if domain in self.failing:
            raise AcmError("import refused", operation="import_or_update", domain=domain)
        existing = self.find_by_domain(domain)
        if existing is not None:
            arn = existing.certificate_arn
        else:
            self._next_id += 1
            arn = f"arn:aws:acm:us-east-1:123456789012:certificate/{self._next_id:08d}"
        self.records[domain] = (arn, cert_pem, key_pem)
        return arn

    def delete_by_domain(self, domain: str) -> None:
        self.deletes.append(domain)
        if domain in self.failing:
            raise AcmError("delete refused", operation="delete_by_domain", domain=domain)
        self.records.pop(domain, None)


@pytest.fixture
def sync_config() -> SyncConfig:
    """Configuration matching the reference scenarios."""
    return SyncConfig(
        namespaces=["default"],
        domain_patterns=["*.example.com", "example.com"],
        retry_delay=10,
        finalizer=FINALIZER,
    )


@pytest.fixture
def resources() -> FakeResources:
    return FakeResources()


@pytest.fixture
def store() -> FakeCertificateStore:
    return FakeCertificateStore()
