"""AWS Certificate Manager integration - certificate store client and models."""

from acm_certificate_sync.integrations.acm.base import CertificateStore
from acm_certificate_sync.integrations.acm.client import AcmCertificateStore
from acm_certificate_sync.integrations.acm.config import AcmConfig
from acm_certificate_sync.integrations.acm.exceptions import (
    AcmAuthError,
    AcmConnectionError,
    AcmError,
    AcmNotFoundError,
    AcmThrottlingError,
    AcmValidationError,
)
from acm_certificate_sync.integrations.acm.models import ExternalCertificateRecord

__all__ = [
    "AcmAuthError",
    "AcmCertificateStore",
    "AcmConfig",
    "AcmConnectionError",
    "AcmError",
    "AcmNotFoundError",
    "AcmThrottlingError",
    "AcmValidationError",
    "CertificateStore",
    "ExternalCertificateRecord",
]
