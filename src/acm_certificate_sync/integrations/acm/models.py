"""ACM certificate record model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ExternalCertificateRecord(BaseModel):
    """A certificate held by ACM, located by its domain name."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    domain_name: str = Field(description="Primary domain of the certificate")
    certificate_arn: str = Field(description="ACM certificate ARN")
    status: str | None = Field(default=None, description="ISSUED, EXPIRED, ...")
    type: str | None = Field(default=None, description="IMPORTED or AMAZON_ISSUED")

    @classmethod
    def from_summary(cls, summary: dict[str, Any]) -> ExternalCertificateRecord:
        """Create from a ``ListCertificates`` ``CertificateSummaryList`` entry."""
        return cls(
            domain_name=summary.get("DomainName", ""),
            certificate_arn=summary["CertificateArn"],
            status=summary.get("Status"),
            type=summary.get("Type"),
        )
