"""Certificate store interface the reconciler depends on."""

from __future__ import annotations

from abc import ABC, abstractmethod

from acm_certificate_sync.integrations.acm.models import ExternalCertificateRecord


class CertificateStore(ABC):
    """Remote PKI store holding one certificate per domain."""

    @abstractmethod
    def find_by_domain(self, domain: str) -> ExternalCertificateRecord | None:
        """Return the record for ``domain``, or None when there is none.

        At most one match is expected; with several the first one listed wins.
        """

    @abstractmethod
    def import_or_update(self, domain: str, cert_pem: str, key_pem: str) -> str:
        """Import the material for ``domain`` and return the record handle.

        Must be safe to repeat with identical input: an existing record for
        the domain is re-imported in place so its handle is kept.
        """

    @abstractmethod
    def delete_by_domain(self, domain: str) -> None:
        """Delete the record for ``domain``; a missing record is not an error."""
