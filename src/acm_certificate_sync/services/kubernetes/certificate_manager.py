"""Cert-manager Certificate and TLS Secret access for the sync controller.

Certificates are read, watched and finalized through ``CustomObjectsApi``;
their Secrets are read through ``CoreV1Api``.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import Any

from acm_certificate_sync.integrations.kubernetes.exceptions import (
    KubernetesError,
    KubernetesGoneError,
)
from acm_certificate_sync.integrations.kubernetes.models.certmanager import (
    CERT_MANAGER_GROUP,
    CERT_MANAGER_VERSION,
    CERTIFICATE_KIND,
    CERTIFICATE_PLURAL,
    CertificateEvent,
    CertificateResource,
    EventType,
)
from acm_certificate_sync.integrations.kubernetes.models.secret import SecretMaterial
from acm_certificate_sync.services.kubernetes.base import K8sBaseManager

_EVENT_TYPES = frozenset(t.value for t in EventType)


class CertificateResourceManager(K8sBaseManager):
    """Resource store used by the reconciler and the controller watch loop."""

    _entity_name = "certificate"

    # =========================================================================
    # Reads
    # =========================================================================

    def get_certificate(self, name: str, namespace: str) -> CertificateResource:
        """Get a Certificate by name.

        Raises:
            KubernetesNotFoundError: If the Certificate does not exist.
            KubernetesError: For any other API failure.
        """
        self._log.debug("getting_certificate", name=name, namespace=namespace)

        @self._client.make_retry_decorator()
        def _get() -> dict[str, Any]:
            try:
                result: dict[str, Any] = self._client.custom_objects.get_namespaced_custom_object(
                    CERT_MANAGER_GROUP,
                    CERT_MANAGER_VERSION,
                    namespace,
                    CERTIFICATE_PLURAL,
                    name,
                )
                return result
            except Exception as e:
                self._handle_api_error(e, CERTIFICATE_KIND, name, namespace)

        return CertificateResource.from_k8s_object(_get())

    def get_secret_material(self, name: str, namespace: str) -> SecretMaterial:
        """Read the TLS material of a Secret.

        Raises:
            KubernetesNotFoundError: If the Secret does not exist.
            KubernetesError: For any other API failure.
        """
        self._log.debug("getting_secret", name=name, namespace=namespace)

        @self._client.make_retry_decorator()
        def _get() -> Any:
            try:
                return self._client.core_v1.read_namespaced_secret(name=name, namespace=namespace)
            except Exception as e:
                self._handle_api_error(e, "Secret", name, namespace)

        return SecretMaterial.from_k8s_object(_get())

    # =========================================================================
    # Finalizers
    # =========================================================================

    def add_finalizer(self, certificate: CertificateResource, token: str) -> CertificateResource:
        """Append ``token`` to the Certificate's finalizers.

        Returns:
            The updated Certificate; unchanged if the token was already present.
        """
        if certificate.has_finalizer(token):
            return certificate
        return self._patch_finalizers(certificate, [*certificate.finalizers, token])

    def remove_finalizer(self, certificate: CertificateResource, token: str) -> CertificateResource:
        """Remove ``token`` from the Certificate's finalizers.

        Returns:
            The updated Certificate; unchanged if the token was not present.
        """
        if not certificate.has_finalizer(token):
            return certificate
        return self._patch_finalizers(
            certificate, [f for f in certificate.finalizers if f != token]
        )

    def _patch_finalizers(
        self,
        certificate: CertificateResource,
        finalizers: list[str],
    ) -> CertificateResource:
        """Write ``metadata.finalizers`` with a JSON patch.

        The patch is guarded by a ``test`` on ``metadata.resourceVersion`` so a
        concurrent writer's finalizers are never overwritten; a stale version
        fails the request and the caller retries from a fresh read.
        """
        name, namespace = certificate.name, certificate.namespace
        patch: list[dict[str, Any]] = []
        if certificate.resource_version:
            patch.append(
                {
                    "op": "test",
                    "path": "/metadata/resourceVersion",
                    "value": certificate.resource_version,
                }
            )
        patch.append({"op": "add", "path": "/metadata/finalizers", "value": finalizers})

        self._log.debug(
            "patching_finalizers",
            name=name,
            namespace=namespace,
            finalizers=finalizers,
        )
        try:
            result: dict[str, Any] = self._client.custom_objects.patch_namespaced_custom_object(
                CERT_MANAGER_GROUP,
                CERT_MANAGER_VERSION,
                namespace,
                CERTIFICATE_PLURAL,
                name,
                patch,
            )
        except Exception as e:
            self._handle_api_error(e, CERTIFICATE_KIND, name, namespace)

        self._log.info("patched_finalizers", name=name, namespace=namespace, finalizers=finalizers)
        return CertificateResource.from_k8s_object(result)

    # =========================================================================
    # Watch
    # =========================================================================

    def watch_certificates(
        self,
        namespace: str | None = None,
        *,
        stop: threading.Event | None = None,
    ) -> Iterator[CertificateEvent]:
        """Stream Certificate change events.

        The stream starts with an ADDED event for every existing Certificate,
        then follows changes. Server-side watch timeouts are resumed from the
        last seen resource version; an expired version (410) restarts from a
        fresh list, which replays ADDED events.

        Args:
            namespace: Namespace to watch, or None for all namespaces.
            stop: Ends the stream once set (checked between events).

        Yields:
            Typed Certificate events.

        Raises:
            KubernetesError: If the watch fails for a reason other than expiry.
        """
        resource_version: str | None = None
        while stop is None or not stop.is_set():
            if namespace:
                func: Any = self._client.custom_objects.list_namespaced_custom_object
                args: tuple[str, ...] = (
                    CERT_MANAGER_GROUP,
                    CERT_MANAGER_VERSION,
                    namespace,
                    CERTIFICATE_PLURAL,
                )
            else:
                func = self._client.custom_objects.list_cluster_custom_object
                args = (CERT_MANAGER_GROUP, CERT_MANAGER_VERSION, CERTIFICATE_PLURAL)

            kwargs: dict[str, Any] = {"timeout_seconds": self._client.watch_timeout}
            if resource_version:
                kwargs["resource_version"] = resource_version

            self._log.debug(
                "starting_watch",
                namespace=namespace or "*",
                resource_version=resource_version,
            )
            watch = self._client.new_watch()
            try:
                for raw in watch.stream(func, *args, **kwargs):
                    if stop is not None and stop.is_set():
                        watch.stop()
                        return

                    event_type = raw.get("type")
                    obj: dict[str, Any] = raw.get("object") or {}

                    if event_type == "ERROR":
                        code = obj.get("code")
                        if code == 410:
                            raise KubernetesGoneError(obj.get("message") or "watch expired")
                        raise KubernetesError(
                            obj.get("message") or "watch failed",
                            status_code=code,
                            resource_type=CERTIFICATE_KIND,
                            namespace=namespace,
                        )

                    rv = (obj.get("metadata") or {}).get("resourceVersion")
                    if rv:
                        resource_version = rv
                    if event_type not in _EVENT_TYPES:
                        continue  # BOOKMARK

                    yield CertificateEvent(
                        type=EventType(event_type),
                        certificate=CertificateResource.from_k8s_object(obj),
                    )
            except KubernetesGoneError:
                self._log.info("watch_expired", namespace=namespace or "*")
                resource_version = None
            except KubernetesError:
                raise
            except Exception as e:
                error = self._client.translate_api_exception(
                    e, resource_type=CERTIFICATE_KIND, namespace=namespace
                )
                if not isinstance(error, KubernetesGoneError):
                    raise error from e
                self._log.info("watch_expired", namespace=namespace or "*")
                resource_version = None
