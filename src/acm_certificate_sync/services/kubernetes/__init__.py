"""Kubernetes resource access for the sync controller."""

from acm_certificate_sync.services.kubernetes.certificate_manager import (
    CertificateResourceManager,
)

__all__ = ["CertificateResourceManager"]
