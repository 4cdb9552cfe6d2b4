"""Unit tests for cert-manager Certificate models."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from acm_certificate_sync.integrations.kubernetes.models.certmanager import (
    CertificateEvent,
    CertificateResource,
    CertManagerCondition,
    EventType,
)


def _certificate(**overrides: Any) -> dict[str, Any]:
    obj: dict[str, Any] = {
        "metadata": {
            "name": "web-tls",
            "namespace": "apps",
            "uid": "uid-cert-123",
            "resourceVersion": "1001",
            "finalizers": ["other.io/keep"],
        },
        "spec": {
            "secretName": "web-tls-secret",
            "dnsNames": ["example.com", "www.example.com"],
        },
        "status": {
            "conditions": [
                {"type": "Issuing", "status": "False", "reason": "Done"},
                {"type": "Ready", "status": "True", "reason": "Ready"},
            ]
        },
    }
    obj["metadata"].update(overrides)
    return obj


@pytest.mark.unit
@pytest.mark.kubernetes
class TestCertificateResource:
    """Tests for CertificateResource."""

    def test_from_k8s_object(self) -> None:
        cert = CertificateResource.from_k8s_object(_certificate())

        assert cert.name == "web-tls"
        assert cert.namespace == "apps"
        assert cert.resource_version == "1001"
        assert cert.secret_name == "web-tls-secret"
        assert cert.dns_names == ["example.com", "www.example.com"]
        assert cert.finalizers == ["other.io/keep"]
        assert cert.ready is True
        assert cert.is_deleting is False
        assert str(cert.key) == "apps/web-tls"

    def test_minimal_object(self) -> None:
        cert = CertificateResource.from_k8s_object({"metadata": {"name": "bare"}})

        assert cert.namespace == "default"
        assert cert.dns_names == []
        assert cert.finalizers == []
        assert cert.ready is False

    @pytest.mark.parametrize(
        "conditions",
        [
            [],
            [{"type": "Ready", "status": "False"}],
            [{"type": "Ready", "status": "Unknown"}],
            [{"type": "Issuing", "status": "True"}],
        ],
    )
    def test_not_ready(self, conditions: list[dict[str, str]]) -> None:
        obj = _certificate()
        obj["status"]["conditions"] = conditions

        assert CertificateResource.from_k8s_object(obj).ready is False

    def test_deleting(self) -> None:
        cert = CertificateResource.from_k8s_object(
            _certificate(deletionTimestamp="2026-01-01T00:00:00Z")
        )

        assert cert.is_deleting is True

    def test_has_finalizer(self) -> None:
        cert = CertificateResource.from_k8s_object(_certificate())

        assert cert.has_finalizer("other.io/keep")
        assert not cert.has_finalizer("acm-certificate-sync.io/finalizer")


@pytest.mark.unit
@pytest.mark.kubernetes
class TestConditionsAndEvents:
    """Tests for conditions and watch events."""

    def test_condition_defaults(self) -> None:
        condition = CertManagerCondition.from_k8s_object({})

        assert condition.type == ""
        assert condition.status == "Unknown"
        assert condition.message is None

    def test_event_is_frozen(self) -> None:
        event = CertificateEvent(
            type=EventType.ADDED,
            certificate=CertificateResource(name="web"),
        )

        with pytest.raises(ValidationError):
            event.type = EventType.DELETED  # type: ignore[misc]

    def test_event_type_from_watch_string(self) -> None:
        assert EventType("MODIFIED") is EventType.MODIFIED
