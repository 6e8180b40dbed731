"""Error definitions for the void feed."""

import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Categories of errors that can occur in the system."""

    STORE_ERROR = "store_error"
    QUERY_ERROR = "query_error"
    RESOLVER_ERROR = "resolver_error"
    CONFIGURATION_ERROR = "configuration_error"
    SESSION_ERROR = "session_error"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FeedError(Exception):
    """Base error class for all void feed errors."""

    retryable = False

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        severity: ErrorSeverity,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize base error.

        Args:
            message: Error message
            category: Error category
            severity: Error severity
            details: Optional error details
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details})"


class StoreUnavailable(FeedError):
    """Raised when the content store cannot be reached or fails to answer."""

    retryable = True

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, ErrorCategory.STORE_ERROR, severity, details)


class StoreQueryError(FeedError):
    """Raised when a candidate filter is malformed or rejected by the store."""

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.CRITICAL,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, ErrorCategory.QUERY_ERROR, severity, details)


class ResolverUnavailable(FeedError):
    """Raised when the author lookup fails as a whole."""

    retryable = True

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, ErrorCategory.RESOLVER_ERROR, severity, details)


class ConfigurationError(FeedError):
    """Raised when configuration values are invalid."""

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.CRITICAL,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, ErrorCategory.CONFIGURATION_ERROR, severity, details)


class SessionClosedError(FeedError):
    """Raised when an operation is attempted on a closed feed session."""

    def __init__(
        self,
        message: str = "Feed session has been closed",
        severity: ErrorSeverity = ErrorSeverity.LOW,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, ErrorCategory.SESSION_ERROR, severity, details)


class CircuitBreaker:
    """Circuit breaker for protecting a backend endpoint from repeated failures."""

    def __init__(self, failure_threshold: int = 5, reset_timeout: float = 30.0):
        """Initialize circuit breaker with configurable thresholds.

        Args:
            failure_threshold: Number of consecutive failures before opening circuit
            reset_timeout: Seconds to wait before letting a trial request through
        """
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.failure_count = 0
        self.last_failure_time = 0.0
        self.state = "closed"

    def __repr__(self) -> str:
        return (
            f"CircuitBreaker(state={self.state}, "
            f"failures={self.failure_count}, "
            f"threshold={self.failure_threshold}, "
            f"timeout={self.reset_timeout})"
        )

    def can_proceed(self) -> bool:
        """Check if a request can proceed based on circuit state."""
        if self.state == "open":
            if time.monotonic() - self.last_failure_time >= self.reset_timeout:
                self.state = "half-open"
                return True
            return False
        return True

    def record_failure(self) -> None:
        """Record a failure and update circuit state."""
        self.failure_count += 1
        self.last_failure_time = time.monotonic()
        if self.state == "half-open" or self.failure_count >= self.failure_threshold:
            self.state = "open"
            self.failure_count = 0

    def record_success(self) -> None:
        """Record a success and close the circuit."""
        self.state = "closed"
        self.failure_count = 0
        self.last_failure_time = 0.0
