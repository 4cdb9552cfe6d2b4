"""Certificate sync controller.

Feeds admitted watch events into a work queue and drains it with a pool of
worker threads running the reconciler:

    watch thread(s) -> AdmissionFilter -> WorkQueue -> worker(s) -> reconciler
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import structlog

from acm_certificate_sync.integrations.kubernetes.models.base import ResourceKey
from acm_certificate_sync.services.sync.filters import AdmissionFilter
from acm_certificate_sync.services.sync.queue import WorkQueue
from acm_certificate_sync.services.sync.reconciler import CertificateReconciler
from acm_certificate_sync.services.sync.results import SyncResult, SyncStatus

if TYPE_CHECKING:
    from acm_certificate_sync.core.config.models import ControllerConfig, SyncConfig
    from acm_certificate_sync.integrations.acm.base import CertificateStore
    from acm_certificate_sync.integrations.kubernetes.models.certmanager import (
        CertificateEvent,
    )
    from acm_certificate_sync.services.kubernetes.certificate_manager import (
        CertificateResourceManager,
    )

logger = structlog.get_logger()

# Pause before re-opening a watch that failed
WATCH_RESTART_DELAY = 5.0
WORKER_JOIN_TIMEOUT = 30.0


class CertificateSyncController:
    """Runs the watch, queue and worker machinery around the reconciler.

    Args:
        resources: Certificate access, used for watching.
        reconciler: Reconciler invoked per queued key.
        config: Namespaces to watch, worker count and default retry delay.
        admission: Event filter; built from ``config`` when omitted.
        queue: Work queue; a fresh one when omitted.
    """

    def __init__(
        self,
        resources: CertificateResourceManager,
        reconciler: CertificateReconciler,
        config: SyncConfig,
        admission: AdmissionFilter | None = None,
        queue: WorkQueue | None = None,
    ) -> None:
        self._resources = resources
        self._reconciler = reconciler
        self._config = config
        self._admission = admission if admission is not None else AdmissionFilter(config)
        self._queue = queue if queue is not None else WorkQueue()
        self._threads: list[threading.Thread] = []
        self._log = logger.bind(component="controller")

    @classmethod
    def from_config(
        cls,
        config: ControllerConfig,
        resources: CertificateResourceManager,
        store: CertificateStore,
    ) -> CertificateSyncController:
        """Wire a controller and its reconciler from the loaded configuration."""
        reconciler = CertificateReconciler(resources, store, config.sync)
        return cls(resources, reconciler, config.sync)

    @property
    def queue(self) -> WorkQueue:
        return self._queue

    @property
    def reconciler(self) -> CertificateReconciler:
        return self._reconciler

    # =========================================================================
    # Events
    # =========================================================================

    def handle_event(self, event: CertificateEvent) -> bool:
        """Queue the Certificate behind ``event`` if it is in scope.

        Returns:
            True if the event was admitted.
        """
        if not self._admission.admit(event):
            return False
        key = event.certificate.key
        self._log.debug("event_queued", event_type=event.type.value, certificate=str(key))
        self._queue.add(key)
        return True

    # =========================================================================
    # Workers
    # =========================================================================

    def process_next(self, cancel: threading.Event | None = None) -> bool:
        """Take one key off the queue and reconcile it.

        Returns:
            False once the queue has been shut down, True otherwise.
        """
        key = self._queue.get()
        if key is None:
            return False
        try:
            self.reconcile_key(key, cancel)  # type: ignore[arg-type]
        finally:
            self._queue.done(key)
        return True

    def reconcile_key(
        self,
        key: ResourceKey,
        cancel: threading.Event | None = None,
    ) -> SyncResult:
        """Reconcile ``key`` and schedule its next attempt from the result."""
        log = self._log.bind(certificate=str(key))
        try:
            result = self._reconciler.reconcile(key, cancel)
        except Exception as e:
            log.exception("reconcile_crashed")
            result = SyncResult.failed(f"reconcile crashed: {e}", e)

        if result.status == SyncStatus.TRANSIENT_FAILURE:
            delay = result.retry_after or self._config.retry_delay
            self._queue.forget(key)
            self._queue.add_after(key, delay)
            log.info("reconcile_requeued", reason=result.message, retry_after=delay)
        elif result.status == SyncStatus.ERROR:
            delay = self._queue.add_rate_limited(key)
            log.warning("reconcile_failed", reason=result.message, retry_after=delay)
        else:
            self._queue.forget(key)
            log.debug("reconcile_finished", status=result.status.value, reason=result.message)
        return result

    def _worker_loop(self, stop: threading.Event) -> None:
        while self.process_next(stop):
            pass

    # =========================================================================
    # Watches
    # =========================================================================

    def _watch_loop(self, namespace: str | None, stop: threading.Event) -> None:
        log = self._log.bind(namespace=namespace or "*")
        while not stop.is_set():
            try:
                for event in self._resources.watch_certificates(namespace, stop=stop):
                    self.handle_event(event)
            except Exception:
                log.exception("watch_failed")
            stop.wait(WATCH_RESTART_DELAY)

    def watched_namespaces(self) -> list[str | None]:
        """Namespaces to open watches for; ``[None]`` means cluster-wide."""
        if self._config.watches_all_namespaces:
            return [None]
        return list(self._config.namespaces)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self, stop: threading.Event) -> None:
        """Start watch and worker threads; returns immediately."""
        for namespace in self.watched_namespaces():
            thread = threading.Thread(
                target=self._watch_loop,
                args=(namespace, stop),
                name=f"watch-{namespace or 'all'}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)

        for index in range(self._config.workers):
            thread = threading.Thread(
                target=self._worker_loop,
                args=(stop,),
                name=f"worker-{index}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)

        self._log.info(
            "controller_started",
            namespaces=self._config.namespaces or "all",
            domain_patterns=self._config.domain_patterns,
            workers=self._config.workers,
        )

    def run(self, stop: threading.Event) -> None:
        """Run until ``stop`` is set, then drain workers and return."""
        self.start(stop)
        stop.wait()
        self.shutdown()

    def shutdown(self) -> None:
        """Stop the queue and wait for workers to finish their current key."""
        self._log.info("controller_stopping")
        self._queue.shutdown()
        for thread in self._threads:
            # Watch threads may sit in a blocking read; they are daemons
            if thread.name.startswith("worker-"):
                thread.join(WORKER_JOIN_TIMEOUT)
        self._threads.clear()
        self._log.info("controller_stopped")
