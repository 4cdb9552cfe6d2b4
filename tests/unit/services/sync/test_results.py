"""Unit tests for reconcile results."""

from __future__ import annotations

import pytest

from acm_certificate_sync.services.sync.results import SyncResult, SyncStatus


@pytest.mark.unit
@pytest.mark.sync
class TestSyncResult:
    """Tests for SyncResult constructors and flags."""

    def test_success(self) -> None:
        result = SyncResult.success("done")

        assert result.status == SyncStatus.SUCCESS
        assert not result.requeue
        assert not result.is_failure

    def test_skipped(self) -> None:
        result = SyncResult.skipped("not ready")

        assert not result.requeue
        assert not result.is_failure

    def test_transient(self) -> None:
        error = RuntimeError("x")
        result = SyncResult.transient("later", 10, error)

        assert result.requeue
        assert result.is_failure
        assert result.retry_after == 10
        assert result.error is error

    def test_invalid_input_not_requeued(self) -> None:
        result = SyncResult.invalid_input("missing tls.key")

        assert not result.requeue
        assert result.is_failure

    def test_failed(self) -> None:
        result = SyncResult.failed("boom")

        assert result.status == SyncStatus.ERROR
        assert result.requeue
        assert result.retry_after is None

    def test_status_values(self) -> None:
        assert SyncStatus.TRANSIENT_FAILURE == "transient_failure"
