"""Base models for Kubernetes resources."""

from __future__ import annotations

from typing import Any, ClassVar, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_NAMESPACE = "default"


class ResourceKey(NamedTuple):
    """Namespace-qualified resource name, the unit of reconciliation."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"

    @classmethod
    def parse(cls, value: str, default_namespace: str = DEFAULT_NAMESPACE) -> ResourceKey:
        """Parse ``namespace/name`` (or a bare ``name``) into a key.

        Raises:
            ValueError: If either part is empty or there is more than one slash.
        """
        parts = value.strip().split("/")
        if len(parts) == 1:
            namespace, name = default_namespace, parts[0]
        elif len(parts) == 2:
            namespace, name = parts
        else:
            raise ValueError(f"invalid resource key '{value}': expected namespace/name")
        if not namespace or not name:
            raise ValueError(f"invalid resource key '{value}': expected namespace/name")
        return cls(namespace=namespace, name=name)


class K8sEntityBase(BaseModel):
    """Base class for models built from Kubernetes objects."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(description="Resource name")
    namespace: str = Field(default=DEFAULT_NAMESPACE, description="Resource namespace")
    uid: str | None = Field(default=None, description="Kubernetes UID")
    resource_version: str | None = Field(default=None, description="Optimistic lock version")
    labels: dict[str, str] | None = Field(default=None, description="Resource labels")

    _entity_name: ClassVar[str] = "entity"

    @property
    def key(self) -> ResourceKey:
        """Namespace-qualified key of this resource."""
        return ResourceKey(namespace=self.namespace, name=self.name)


def _metadata_fields(metadata: dict[str, Any]) -> dict[str, Any]:
    """Extract the K8sEntityBase fields from a raw ``metadata`` dict."""
    return {
        "name": metadata.get("name", ""),
        "namespace": metadata.get("namespace") or DEFAULT_NAMESPACE,
        "uid": metadata.get("uid"),
        "resource_version": metadata.get("resourceVersion"),
        "labels": metadata.get("labels") or None,
    }
