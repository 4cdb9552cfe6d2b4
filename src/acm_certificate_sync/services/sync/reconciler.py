"""Certificate reconciliation state machine.

One ``reconcile`` call takes a Certificate from whatever state it is in one
step closer to its desired state:

    Unmanaged --attach finalizer--> Managed-NotReady --Ready--> Managed-Ready
    Managed-Ready --import every domain--> Synced
    any --deletion requested--> Deleting --delete every domain--> Finalized

The finalizer is attached before the readiness check and removed only once
the ACM certificates of every DNS name are gone, so a Certificate can never
disappear from the cluster while its ACM certificates are still around.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

import structlog

from acm_certificate_sync.integrations.acm.exceptions import AcmError
from acm_certificate_sync.integrations.kubernetes.exceptions import (
    KubernetesError,
    KubernetesNotFoundError,
)
from acm_certificate_sync.services.sync.results import SyncResult

if TYPE_CHECKING:
    from acm_certificate_sync.core.config.models import SyncConfig
    from acm_certificate_sync.integrations.acm.base import CertificateStore
    from acm_certificate_sync.integrations.kubernetes.models.base import ResourceKey
    from acm_certificate_sync.integrations.kubernetes.models.certmanager import (
        CertificateResource,
    )
    from acm_certificate_sync.services.kubernetes.certificate_manager import (
        CertificateResourceManager,
    )

logger = structlog.get_logger()


class CertificateReconciler:
    """Synchronizes one Certificate at a time into the certificate store.

    Holds no per-certificate state; every pass starts from a fresh read, so
    passes for different keys can run concurrently.

    Args:
        resources: Access to Certificates and their Secrets.
        store: Certificate store the material is pushed into.
        config: Finalizer token and retry delay.
    """

    def __init__(
        self,
        resources: CertificateResourceManager,
        store: CertificateStore,
        config: SyncConfig,
    ) -> None:
        self._resources = resources
        self._store = store
        self._finalizer = config.finalizer
        self._retry_delay = config.retry_delay
        self._log = logger.bind(component="reconciler")

    def reconcile(
        self,
        key: ResourceKey,
        cancel: threading.Event | None = None,
    ) -> SyncResult:
        """Run one reconcile pass for the Certificate at ``key``.

        Args:
            key: Namespace and name of the Certificate.
            cancel: When set, the pass stops before its next remote call
                without touching finalizers.

        Returns:
            The outcome of the pass.
        """
        log = self._log.bind(certificate=str(key))

        try:
            certificate = self._resources.get_certificate(key.name, key.namespace)
        except KubernetesNotFoundError:
            # Cleanup is driven by the finalizer only, never by absence
            log.debug("certificate_not_found")
            return SyncResult.skipped("certificate not found")
        except KubernetesError as e:
            log.error("certificate_fetch_failed", error=str(e))
            return SyncResult.failed(f"failed to get certificate: {e}", e)

        if certificate.is_deleting:
            return self._finalize(certificate, log, cancel)

        if not certificate.has_finalizer(self._finalizer):
            if _cancelled(cancel):
                return self._cancelled(log)
            try:
                certificate = self._resources.add_finalizer(certificate, self._finalizer)
            except KubernetesError as e:
                log.warning("finalizer_add_failed", error=str(e))
                return SyncResult.transient(
                    f"failed to add finalizer: {e}", self._retry_delay, e
                )
            log.info("finalizer_added", finalizer=self._finalizer)

        if not certificate.ready:
            log.info("certificate_not_ready")
            return SyncResult.skipped("certificate is not ready")

        return self._sync(certificate, log, cancel)

    def _sync(
        self,
        certificate: CertificateResource,
        log: Any,
        cancel: threading.Event | None,
    ) -> SyncResult:
        """Push the Secret material of a ready Certificate for each DNS name."""
        secret_name = certificate.secret_name
        if _cancelled(cancel):
            return self._cancelled(log)
        try:
            material = self._resources.get_secret_material(secret_name, certificate.namespace)
        except KubernetesError as e:
            # cert-manager may not have written the Secret yet
            log.warning("secret_fetch_failed", secret=secret_name, error=str(e))
            return SyncResult.transient(
                f"failed to get secret '{secret_name}': {e}", self._retry_delay, e
            )

        if not material.is_complete:
            log.error(
                "secret_incomplete",
                secret=secret_name,
                missing=material.missing_fields,
            )
            return SyncResult.invalid_input(
                f"secret '{secret_name}' is missing {', '.join(material.missing_fields)}"
            )

        cert_pem = material.certificate_with_chain
        key_pem = material.private_key or ""
        failed: list[str] = []
        errors: list[AcmError] = []
        domains = _unique(certificate.dns_names)
        for domain in domains:
            if _cancelled(cancel):
                return self._cancelled(log)
            try:
                arn = self._store.import_or_update(domain, cert_pem, key_pem)
            except AcmError as e:
                log.error("certificate_import_failed", domain=domain, error=str(e))
                failed.append(domain)
                errors.append(e)
                continue
            log.info("certificate_synced", domain=domain, certificate_arn=arn)

        if failed:
            return SyncResult.transient(
                f"import failed for {', '.join(failed)}", self._retry_delay, errors[0]
            )
        return SyncResult.success(f"synced {len(domains)} domain(s)")

    def _finalize(
        self,
        certificate: CertificateResource,
        log: Any,
        cancel: threading.Event | None,
    ) -> SyncResult:
        """Delete every DNS name's certificate, then release the finalizer."""
        if not certificate.has_finalizer(self._finalizer):
            log.debug("deletion_without_finalizer")
            return SyncResult.skipped("deleting, no cleanup pending")

        failed: list[str] = []
        errors: list[AcmError] = []
        for domain in _unique(certificate.dns_names):
            if _cancelled(cancel):
                return self._cancelled(log)
            try:
                self._store.delete_by_domain(domain)
            except AcmError as e:
                log.error("certificate_delete_failed", domain=domain, error=str(e))
                failed.append(domain)
                errors.append(e)

        if failed:
            return SyncResult.transient(
                f"delete failed for {', '.join(failed)}", self._retry_delay, errors[0]
            )

        if _cancelled(cancel):
            return self._cancelled(log)
        try:
            self._resources.remove_finalizer(certificate, self._finalizer)
        except KubernetesNotFoundError:
            log.info("certificate_already_removed")
            return SyncResult.success("certificate already removed")
        except KubernetesError as e:
            log.warning("finalizer_remove_failed", error=str(e))
            return SyncResult.transient(
                f"failed to remove finalizer: {e}", self._retry_delay, e
            )

        log.info("finalizer_removed", finalizer=self._finalizer)
        return SyncResult.success("external certificates deleted")

    def _cancelled(self, log: Any) -> SyncResult:
        log.info("reconcile_cancelled")
        return SyncResult.transient("reconcile cancelled", self._retry_delay)


def _cancelled(cancel: threading.Event | None) -> bool:
    return cancel is not None and cancel.is_set()


def _unique(names: list[str]) -> list[str]:
    """Drop repeated DNS names, keeping order."""
    return list(dict.fromkeys(names))
