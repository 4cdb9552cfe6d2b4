"""Scope filters deciding which Certificates the controller manages."""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase

import structlog

from acm_certificate_sync.core.config.models import SyncConfig
from acm_certificate_sync.integrations.kubernetes.models.certmanager import CertificateEvent

logger = structlog.get_logger()


def matches_domain(name: str, pattern: str) -> bool:
    """Shell-style, case-sensitive glob match of a DNS name.

    ``*`` matches any run of characters including dots, so ``*.example.com``
    matches ``a.b.example.com`` but not ``example.com`` itself.
    """
    return fnmatchcase(name, pattern)


def any_domain_matches(names: Iterable[str], patterns: Iterable[str]) -> bool:
    """Whether any name matches any pattern; no patterns match nothing."""
    pattern_list = list(patterns)
    return any(matches_domain(name, pattern) for name in names for pattern in pattern_list)


class AdmissionFilter:
    """Namespace AND domain predicate applied to every watch event.

    Create, update and delete events are judged the same way, so a
    Certificate admitted at creation is still admitted when it is deleted.
    """

    def __init__(self, config: SyncConfig) -> None:
        self._namespaces = frozenset(config.namespaces)
        self._patterns = tuple(config.domain_patterns)
        self._log = logger.bind(component="admission")

    def namespace_allowed(self, namespace: str) -> bool:
        """An empty allow-list admits every namespace."""
        return not self._namespaces or namespace in self._namespaces

    def domains_allowed(self, dns_names: Iterable[str]) -> bool:
        return any_domain_matches(dns_names, self._patterns)

    def admit(self, event: CertificateEvent) -> bool:
        """Decide whether ``event`` reaches the reconciler."""
        certificate = event.certificate
        admitted = self.namespace_allowed(certificate.namespace) and self.domains_allowed(
            certificate.dns_names
        )
        if not admitted:
            self._log.debug(
                "event_dropped",
                event_type=event.type.value,
                certificate=str(certificate.key),
            )
        return admitted
