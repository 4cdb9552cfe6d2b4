"""Kubernetes resource models."""

from acm_certificate_sync.integrations.kubernetes.models.base import K8sEntityBase, ResourceKey
from acm_certificate_sync.integrations.kubernetes.models.certmanager import (
    CertificateEvent,
    CertificateResource,
    CertManagerCondition,
    EventType,
)
from acm_certificate_sync.integrations.kubernetes.models.secret import SecretMaterial

__all__ = [
    "CertManagerCondition",
    "CertificateEvent",
    "CertificateResource",
    "EventType",
    "K8sEntityBase",
    "ResourceKey",
    "SecretMaterial",
]
