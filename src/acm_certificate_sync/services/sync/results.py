"""Reconciliation outcomes reported to the work queue."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class SyncStatus(StrEnum):
    """Outcome of one reconcile pass."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    TRANSIENT_FAILURE = "transient_failure"
    INVALID_INPUT = "invalid_input"
    ERROR = "error"


@dataclass(frozen=True)
class SyncResult:
    """Result of reconciling one Certificate.

    Attributes:
        status: What happened.
        message: Short human-readable explanation.
        retry_after: Seconds to wait before the next attempt (transient only).
        error: The underlying exception, if any.
    """

    status: SyncStatus
    message: str = ""
    retry_after: float | None = None
    error: Exception | None = None

    @property
    def requeue(self) -> bool:
        """Whether the scheduler should try this key again on its own."""
        return self.status in (SyncStatus.TRANSIENT_FAILURE, SyncStatus.ERROR)

    @property
    def is_failure(self) -> bool:
        return self.status in (
            SyncStatus.TRANSIENT_FAILURE,
            SyncStatus.INVALID_INPUT,
            SyncStatus.ERROR,
        )

    @classmethod
    def success(cls, message: str = "") -> SyncResult:
        return cls(SyncStatus.SUCCESS, message)

    @classmethod
    def skipped(cls, message: str) -> SyncResult:
        return cls(SyncStatus.SKIPPED, message)

    @classmethod
    def transient(
        cls,
        message: str,
        retry_after: float,
        error: Exception | None = None,
    ) -> SyncResult:
        return cls(SyncStatus.TRANSIENT_FAILURE, message, retry_after, error)

    @classmethod
    def invalid_input(cls, message: str) -> SyncResult:
        return cls(SyncStatus.INVALID_INPUT, message)

    @classmethod
    def failed(cls, message: str, error: Exception | None = None) -> SyncResult:
        return cls(SyncStatus.ERROR, message, error=error)
