"""AWS Certificate Manager integration exceptions."""

from __future__ import annotations


class AcmError(Exception):
    """Base exception for certificate store operations.

    Attributes:
        message: Human-readable error message.
        operation: Store operation that failed (e.g. "import_or_update").
        domain: Domain the operation was performed for.
        error_code: AWS error code, when the error came from the API.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        domain: str | None = None,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.domain = domain
        self.error_code = error_code

    def __str__(self) -> str:
        """Return the message with operation, domain and error code."""
        parts = [self.message]
        if self.error_code:
            parts.append(f"({self.error_code})")
        if self.operation:
            loc = f"[{self.operation}"
            if self.domain:
                loc += f" for {self.domain}"
            loc += "]"
            parts.append(loc)
        return " ".join(parts)


class AcmConnectionError(AcmError):
    """Raised when the ACM endpoint cannot be reached."""


class AcmAuthError(AcmError):
    """Raised when AWS credentials are missing, expired or lack permissions."""


class AcmThrottlingError(AcmError):
    """Raised when ACM rate limits the caller."""


class AcmNotFoundError(AcmError):
    """Raised when a certificate ARN no longer exists."""


class AcmValidationError(AcmError):
    """Raised when ACM rejects the certificate material or a parameter."""
