"""Tests for the error taxonomy and circuit breaker."""

import time

import pytest

from void_feed.core.errors import (
    CircuitBreaker,
    ConfigurationError,
    ErrorCategory,
    ErrorSeverity,
    FeedError,
    ResolverUnavailable,
    SessionClosedError,
    StoreQueryError,
    StoreUnavailable,
)


class TestErrorTaxonomy:
    """Categories, severities and retryability of feed errors."""

    @pytest.mark.parametrize(
        "error_cls, category, retryable",
        [
            (StoreUnavailable, ErrorCategory.STORE_ERROR, True),
            (StoreQueryError, ErrorCategory.QUERY_ERROR, False),
            (ResolverUnavailable, ErrorCategory.RESOLVER_ERROR, True),
            (ConfigurationError, ErrorCategory.CONFIGURATION_ERROR, False),
        ],
    )
    def test_error_classification(self, error_cls, category, retryable):
        error = error_cls("boom", details={"endpoint": "memos"})

        assert isinstance(error, FeedError)
        assert error.category is category
        assert error.retryable is retryable
        assert error.details == {"endpoint": "memos"}
        assert str(error) == "boom"
        assert error.timestamp

    def test_default_severities(self):
        assert StoreUnavailable("x").severity is ErrorSeverity.HIGH
        assert StoreQueryError("x").severity is ErrorSeverity.CRITICAL
        assert SessionClosedError().severity is ErrorSeverity.LOW

    def test_repr_includes_details(self):
        assert repr(StoreQueryError("bad", details={"max_count": 0})) == (
            "StoreQueryError('bad', details={'max_count': 0})"
        )


class TestCircuitBreaker:
    """Test suite for CircuitBreaker functionality."""

    def test_initial_state(self):
        cb = CircuitBreaker()
        assert cb.state == "closed"
        assert cb.failure_count == 0
        assert cb.can_proceed() is True

    def test_failure_threshold(self):
        cb = CircuitBreaker(failure_threshold=3, reset_timeout=60)

        for _ in range(3):
            cb.record_failure()

        assert cb.state == "open"
        assert cb.can_proceed() is False

    def test_success_resets_failure_count(self):
        cb = CircuitBreaker(failure_threshold=3)
        cb.record_failure()
        cb.record_failure()
        cb.record_success()
        cb.record_failure()

        assert cb.state == "closed"

    def test_half_open_after_timeout(self):
        cb = CircuitBreaker(failure_threshold=1, reset_timeout=0.05)
        cb.record_failure()
        assert cb.can_proceed() is False

        time.sleep(0.06)

        assert cb.can_proceed() is True
        assert cb.state == "half-open"

    def test_half_open_failure_reopens(self):
        cb = CircuitBreaker(failure_threshold=3, reset_timeout=0)
        for _ in range(3):
            cb.record_failure()
        assert cb.can_proceed() is True
        assert cb.state == "half-open"

        cb.record_failure()

        assert cb.state == "open"

    def test_half_open_success_closes(self):
        cb = CircuitBreaker(failure_threshold=1, reset_timeout=0)
        cb.record_failure()
        cb.can_proceed()

        cb.record_success()

        assert cb.state == "closed"
