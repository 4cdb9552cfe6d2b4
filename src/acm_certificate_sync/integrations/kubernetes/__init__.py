"""Kubernetes integration - API client, configuration and exceptions."""

from acm_certificate_sync.integrations.kubernetes.client import KubernetesClient
from acm_certificate_sync.integrations.kubernetes.config import KubernetesConfig
from acm_certificate_sync.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesGoneError,
    KubernetesNotFoundError,
    KubernetesValidationError,
)

__all__ = [
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConfig",
    "KubernetesConflictError",
    "KubernetesConnectionError",
    "KubernetesError",
    "KubernetesGoneError",
    "KubernetesNotFoundError",
    "KubernetesValidationError",
]
