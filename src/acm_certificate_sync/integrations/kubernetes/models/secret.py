"""TLS secret material model."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from pydantic import ConfigDict, Field

from acm_certificate_sync.integrations.kubernetes.models.base import K8sEntityBase

TLS_CERT_KEY = "tls.crt"
TLS_PRIVATE_KEY_KEY = "tls.key"
TLS_CHAIN_KEY = "tls.chain"


def _decode(value: str | None) -> str | None:
    """Decode a base64 ``Secret.data`` value; undecodable values count as absent."""
    if value is None:
        return None
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None


class SecretMaterial(K8sEntityBase):
    """PEM material read from the Secret a Certificate points at.

    Read-only from the controller's point of view; cert-manager owns it.
    """

    # PEM blobs are passed through byte for byte
    model_config = ConfigDict(str_strip_whitespace=False)

    certificate: str | None = Field(default=None, description="tls.crt: leaf plus chain")
    private_key: str | None = Field(default=None, description="tls.key")
    chain: str | None = Field(default=None, description="tls.chain, optional")

    @property
    def missing_fields(self) -> list[str]:
        """Required keys that are absent or empty."""
        missing = []
        if not self.certificate:
            missing.append(TLS_CERT_KEY)
        if not self.private_key:
            missing.append(TLS_PRIVATE_KEY_KEY)
        return missing

    @property
    def is_complete(self) -> bool:
        """Whether both required blobs are present."""
        return not self.missing_fields

    @property
    def certificate_with_chain(self) -> str:
        """``tls.crt`` with a separately supplied ``tls.chain`` appended."""
        cert = self.certificate or ""
        if not self.chain:
            return cert
        if cert and not cert.endswith("\n"):
            cert += "\n"
        return cert + self.chain

    @classmethod
    def from_k8s_object(cls, obj: Any) -> SecretMaterial:
        """Create from a ``V1Secret``; ``data`` values are base64 encoded."""
        metadata = obj.metadata
        data: dict[str, str] = obj.data or {}
        return cls(
            name=metadata.name,
            namespace=metadata.namespace or "default",
            uid=metadata.uid,
            resource_version=metadata.resource_version,
            certificate=_decode(data.get(TLS_CERT_KEY)),
            private_key=_decode(data.get(TLS_PRIVATE_KEY_KEY)),
            chain=_decode(data.get(TLS_CHAIN_KEY)),
        )
