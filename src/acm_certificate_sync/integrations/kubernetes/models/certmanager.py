"""Cert-manager Certificate models.

Cert-manager CRDs are accessed via ``CustomObjectsApi`` which returns raw
``dict`` objects rather than typed SDK classes.  The ``from_k8s_object``
classmethods therefore use ``dict.get()`` instead of ``getattr()``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from acm_certificate_sync.integrations.kubernetes.models.base import (
    K8sEntityBase,
    _metadata_fields,
)

# cert-manager.io CRD coordinates
CERT_MANAGER_GROUP = "cert-manager.io"
CERT_MANAGER_VERSION = "v1"
CERTIFICATE_PLURAL = "certificates"
CERTIFICATE_KIND = "Certificate"

READY_CONDITION = "Ready"


class CertManagerCondition(BaseModel):
    """Cert-manager status condition from ``.status.conditions[]``."""

    model_config = ConfigDict(extra="ignore")

    type: str = Field(default="", description="Condition type (Ready, Issuing, etc.)")
    status: str = Field(default="Unknown", description="Condition status (True, False, Unknown)")
    reason: str = Field(default="", description="Machine-readable reason")
    message: str | None = Field(default=None, description="Human-readable message")

    @classmethod
    def from_k8s_object(cls, obj: dict[str, Any]) -> CertManagerCondition:
        """Create from a condition dict."""
        return cls(
            type=obj.get("type", ""),
            status=obj.get("status", "Unknown"),
            reason=obj.get("reason", ""),
            message=obj.get("message"),
        )


def _is_ready(conditions: list[CertManagerCondition]) -> bool:
    """Ready iff some Ready condition carries status True."""
    return any(c.type == READY_CONDITION and c.status == "True" for c in conditions)


def _parse_conditions(status: dict[str, Any]) -> list[CertManagerCondition]:
    """Parse ``.status.conditions`` into a list of CertManagerCondition."""
    raw: list[dict[str, Any]] = status.get("conditions") or []
    return [CertManagerCondition.from_k8s_object(c) for c in raw]


class CertificateResource(K8sEntityBase):
    """A cert-manager Certificate as seen by the sync controller."""

    _entity_name: ClassVar[str] = "certificate"

    secret_name: str = Field(default="", description="Secret holding the issued material")
    dns_names: list[str] = Field(default_factory=list, description="Subject Alternative Names")
    conditions: list[CertManagerCondition] = Field(
        default_factory=list, description="Status conditions"
    )
    finalizers: list[str] = Field(default_factory=list, description="metadata.finalizers")
    deletion_timestamp: str | None = Field(
        default=None, description="Set once deletion has been requested"
    )

    @property
    def ready(self) -> bool:
        """Whether cert-manager reports the certificate as issued."""
        return _is_ready(self.conditions)

    @property
    def is_deleting(self) -> bool:
        """Whether deletion has been requested but not yet finalized."""
        return self.deletion_timestamp is not None

    def has_finalizer(self, token: str) -> bool:
        """Check whether ``token`` is among the finalizers."""
        return token in self.finalizers

    @classmethod
    def from_k8s_object(cls, obj: dict[str, Any]) -> CertificateResource:
        """Create from a cert-manager Certificate CRD dict."""
        metadata: dict[str, Any] = obj.get("metadata") or {}
        spec: dict[str, Any] = obj.get("spec") or {}
        status: dict[str, Any] = obj.get("status") or {}

        return cls(
            **_metadata_fields(metadata),
            secret_name=spec.get("secretName", ""),
            dns_names=spec.get("dnsNames") or [],
            conditions=_parse_conditions(status),
            finalizers=metadata.get("finalizers") or [],
            deletion_timestamp=metadata.get("deletionTimestamp"),
        )


class EventType(StrEnum):
    """Watch event types delivered by the API server."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"


class CertificateEvent(BaseModel):
    """A change notification that always carries a Certificate."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    certificate: CertificateResource
