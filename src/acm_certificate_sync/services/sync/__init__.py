"""Certificate synchronization: admission, reconciliation and scheduling."""

from acm_certificate_sync.services.sync.controller import CertificateSyncController
from acm_certificate_sync.services.sync.filters import (
    AdmissionFilter,
    any_domain_matches,
    matches_domain,
)
from acm_certificate_sync.services.sync.queue import WorkQueue
from acm_certificate_sync.services.sync.reconciler import CertificateReconciler
from acm_certificate_sync.services.sync.results import SyncResult, SyncStatus

__all__ = [
    "AdmissionFilter",
    "CertificateReconciler",
    "CertificateSyncController",
    "SyncResult",
    "SyncStatus",
    "WorkQueue",
    "any_domain_matches",
    "matches_domain",
]
