"""AWS Certificate Manager certificate store.

Imports, re-imports and deletes certificates in ACM, locating them by the
domain name of the certificate. Re-importing over an existing ARN keeps the
ARN stable, so load balancers and CloudFront distributions referencing it
pick up the renewed certificate without changes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    HTTPClientError,
    NoCredentialsError,
    PartialCredentialsError,
)
from botocore.exceptions import ConnectionError as BotoConnectionError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from acm_certificate_sync.integrations.acm.base import CertificateStore
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
from acm_certificate_sync.utils.pem import PemError, split_certificate_chain

logger = structlog.get_logger()

# ListCertificates only returns RSA_2048 certificates unless asked otherwise
ALL_KEY_TYPES = [
    "RSA_1024",
    "RSA_2048",
    "RSA_3072",
    "RSA_4096",
    "EC_prime256v1",
    "EC_secp384r1",
    "EC_secp521r1",
]

_AUTH_CODES = frozenset(
    {
        "AccessDenied",
        "AccessDeniedException",
        "ExpiredTokenException",
        "InvalidClientTokenId",
        "UnrecognizedClientException",
    }
)
_THROTTLING_CODES = frozenset(
    {
        "RequestLimitExceeded",
        "Throttling",
        "ThrottlingException",
        "TooManyRequestsException",
    }
)
_VALIDATION_CODES = frozenset(
    {
        "InvalidArgsException",
        "InvalidArnException",
        "InvalidParameterException",
        "InvalidTagException",
        "TagPolicyException",
        "ValidationException",
    }
)
_NOT_FOUND_CODES = frozenset({"ResourceNotFoundException"})

# Certificates ACM issued itself can be neither re-imported nor owned by us
IMPORTED_TYPE = "IMPORTED"


class AcmCertificateStore(CertificateStore):
    """Certificate store backed by AWS Certificate Manager.

    Throttling and connection failures are retried in-call with exponential
    backoff; every other AWS error is translated into an ``AcmError`` subclass
    and left to the reconciler's requeue policy.

    Example:
        ```python
        store = AcmCertificateStore(AcmConfig.from_env())
        arn = store.import_or_update("example.com", fullchain_pem, key_pem)
        ```
    """

    def __init__(self, config: AcmConfig, client: Any | None = None) -> None:
        """Initialize the store.

        Args:
            config: ACM connection configuration.
            client: Pre-built boto3 ``acm`` client; built lazily when omitted.
        """
        self._config = config
        self._client = client
        self._log = logger.bind(store="acm", region=config.region)

    @property
    def client(self) -> Any:
        """Get or create the boto3 ACM client."""
        if self._client is None:
            import boto3

            session = boto3.Session(
                profile_name=self._config.profile,
                region_name=self._config.region,
            )
            self._client = session.client("acm", endpoint_url=self._config.endpoint_url)
            self._log.debug("acm_client_created", endpoint_url=self._config.endpoint_url)
        return self._client

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    def translate_error(
        e: Exception,
        operation: str | None = None,
        domain: str | None = None,
    ) -> AcmError:
        """Translate a botocore exception into an AcmError subclass.

        Args:
            e: The original exception.
            operation: Store operation being performed.
            domain: Domain the operation was performed for.

        Returns:
            An appropriate AcmError subclass.
        """
        if isinstance(e, AcmError):
            return e

        if isinstance(e, ClientError):
            error = e.response.get("Error", {})
            code = error.get("Code", "Unknown")
            message = error.get("Message") or str(e)
            error_cls: type[AcmError] = AcmError
            if code in _AUTH_CODES:
                error_cls = AcmAuthError
            elif code in _THROTTLING_CODES:
                error_cls = AcmThrottlingError
            elif code in _VALIDATION_CODES:
                error_cls = AcmValidationError
            elif code in _NOT_FOUND_CODES:
                error_cls = AcmNotFoundError
            return error_cls(message, operation=operation, domain=domain, error_code=code)

        if isinstance(e, (NoCredentialsError, PartialCredentialsError)):
            return AcmAuthError(str(e), operation=operation, domain=domain)

        if isinstance(e, (BotoConnectionError, HTTPClientError)):
            return AcmConnectionError(
                f"Failed to reach ACM: {e}", operation=operation, domain=domain
            )

        return AcmError(str(e), operation=operation, domain=domain)

    def _call(self, operation: str, domain: str, request: Callable[[], Any]) -> Any:
        """Run an ACM request with retry and error translation.

        Args:
            operation: Store operation name, for error context.
            domain: Domain the request is made for, for error context.
            request: Zero-argument callable performing the boto3 call(s).

        Returns:
            Whatever ``request`` returns.

        Raises:
            AcmError: Translated error once retries are exhausted.
        """

        @retry(
            retry=retry_if_exception_type((AcmThrottlingError, AcmConnectionError)),
            stop=stop_after_attempt(self._config.retry_attempts),
            wait=wait_exponential(
                multiplier=1,
                min=self._config.retry_min_wait,
                max=self._config.retry_max_wait,
            ),
            reraise=True,
        )
        def _request() -> Any:
            try:
                return request()
            except (ClientError, BotoCoreError) as e:
                raise self.translate_error(e, operation, domain) from e

        return _request()

    # =========================================================================
    # CertificateStore
    # =========================================================================

    def find_by_domain(self, domain: str) -> ExternalCertificateRecord | None:
        """Find the imported ACM certificate whose domain name is ``domain``.

        Certificates issued by ACM itself (``AMAZON_ISSUED``, ``PRIVATE``) are
        passed over. A summary without a ``Type`` is treated as imported.

        Args:
            domain: Exact domain name to look for.

        Returns:
            The first matching record, or None.
        """

        def _search() -> ExternalCertificateRecord | None:
            paginator = self.client.get_paginator("list_certificates")
            for page in paginator.paginate(Includes={"keyTypes": ALL_KEY_TYPES}):
                for summary in page.get("CertificateSummaryList", []):
                    if summary.get("DomainName") != domain:
                        continue
                    if summary.get("Type", IMPORTED_TYPE) != IMPORTED_TYPE:
                        self._log.debug(
                            "skipped_issued_certificate",
                            domain=domain,
                            certificate_arn=summary.get("CertificateArn"),
                            type=summary.get("Type"),
                        )
                        continue
                    return ExternalCertificateRecord.from_summary(summary)
            return None

        record: ExternalCertificateRecord | None = self._call("find_by_domain", domain, _search)
        self._log.debug(
            "searched_certificate",
            domain=domain,
            found=record is not None,
            certificate_arn=record.certificate_arn if record else None,
        )
        return record

    def import_or_update(self, domain: str, cert_pem: str, key_pem: str) -> str:
        """Import ``cert_pem`` for ``domain``, re-importing over an existing ARN.

        Args:
            domain: Domain the certificate is filed under.
            cert_pem: Leaf certificate optionally followed by its chain.
            key_pem: Private key of the leaf certificate.

        Returns:
            ARN of the imported certificate.

        Raises:
            AcmValidationError: If ``cert_pem`` holds no parsable certificate
                or ACM rejects the material.
            AcmError: For any other ACM failure.
        """
        existing = self.find_by_domain(domain)

        try:
            leaf, chain = split_certificate_chain(cert_pem)
        except PemError as e:
            raise AcmValidationError(str(e), operation="import_or_update", domain=domain) from e

        params: dict[str, Any] = {
            "Certificate": leaf.encode("utf-8"),
            "PrivateKey": key_pem.encode("utf-8"),
        }
        if chain:
            params["CertificateChain"] = chain.encode("utf-8")
        if existing is not None:
            params["CertificateArn"] = existing.certificate_arn
        elif self._config.tags:
            # Tags are only accepted on the first import of a certificate
            params["Tags"] = [{"Key": k, "Value": v} for k, v in self._config.tags.items()]

        response = self._call(
            "import_or_update",
            domain,
            lambda: self.client.import_certificate(**params),
        )
        arn: str = response["CertificateArn"]

        if existing is not None:
            self._log.info("updated_certificate", domain=domain, certificate_arn=arn)
        else:
            self._log.info("imported_certificate", domain=domain, certificate_arn=arn)
        return arn

    def delete_by_domain(self, domain: str) -> None:
        """Delete the ACM certificate filed under ``domain``, if any.

        Args:
            domain: Domain whose certificate should be removed.

        Raises:
            AcmError: If the lookup or the deletion fails. ACM refuses to
                delete certificates still attached to a resource.
        """
        existing = self.find_by_domain(domain)
        if existing is None:
            self._log.info("certificate_not_found", domain=domain)
            return

        try:
            self._call(
                "delete_by_domain",
                domain,
                lambda: self.client.delete_certificate(CertificateArn=existing.certificate_arn),
            )
        except AcmNotFoundError:
            self._log.info(
                "certificate_already_deleted",
                domain=domain,
                certificate_arn=existing.certificate_arn,
            )
            return

        self._log.info(
            "deleted_certificate",
            domain=domain,
            certificate_arn=existing.certificate_arn,
        )
