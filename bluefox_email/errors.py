"""
Error model for the Bluefox API client.

Every failure is represented by a single BluefoxError carrying a stable
ErrorCode. Validation problems are raised directly; transport and server
failures are returned inside an Err result.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Closed set of error codes used by the client."""
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    RATE_LIMIT_ERROR = 'RATE_LIMIT_ERROR'
    AUTHENTICATION_ERROR = 'AUTHENTICATION_ERROR'
    NETWORK_ERROR = 'NETWORK_ERROR'
    TIMEOUT_ERROR = 'TIMEOUT_ERROR'
    SERVER_ERROR = 'SERVER_ERROR'
    UNKNOWN_ERROR = 'UNKNOWN_ERROR'
    METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
    DUPLICATE_EMAIL = 'DUPLICATE_EMAIL'
    INVALID_DATE = 'INVALID_DATE'
    INSUFFICIENT_CREDITS = 'INSUFFICIENT_CREDITS'
    MISSING_AWS_CONFIG = 'MISSING_AWS_CONFIG'
    MISSING_PARAMETERS = 'MISSING_PARAMETERS'


RETRYABLE_CODES = frozenset({ErrorCode.SERVER_ERROR, ErrorCode.NETWORK_ERROR})


class BluefoxError(Exception):
    """Error raised or returned by the Bluefox client.

    Attributes:
        code: ErrorCode classifying the failure
        message: Human readable message
        status: HTTP status (0 when no response was received)
        details: Optional extra data (e.g. parsed error body)
    """

    def __init__(self, code: ErrorCode, message: str, status: int = 500,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status
        self.details = details

    def __repr__(self) -> str:
        return f"BluefoxError(code={self.code.value}, status={self.status}, message={self.message!r})"

    @property
    def is_retryable(self) -> bool:
        """Only server and network errors are worth another attempt."""
        return self.code in RETRYABLE_CODES

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON output."""
        result: Dict[str, Any] = {
            'code': self.code.value,
            'message': self.message,
            'status': self.status,
        }
        if self.details:
            result['details'] = self.details
        return result

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def validation(cls, message: str, details: Optional[Dict] = None) -> 'BluefoxError':
        return cls(ErrorCode.VALIDATION_ERROR, message, 400, details)

    @classmethod
    def rate_limit(cls, reset: float) -> 'BluefoxError':
        """Client-side rate limit rejection.

        Args:
            reset: Epoch milliseconds at which the quota window resets
        """
        try:
            reset_at = datetime.fromtimestamp(reset / 1000, tz=timezone.utc).isoformat()
        except (ValueError, OverflowError, OSError):
            # Reset outside the datetime range
            reset_at = f"{reset}ms"
        return cls(
            ErrorCode.RATE_LIMIT_ERROR,
            f"Rate limit exceeded. Resets at {reset_at}",
            429,
            {'reset': reset},
        )

    @classmethod
    def timeout(cls, message: str = "Request timeout exceeded") -> 'BluefoxError':
        return cls(ErrorCode.TIMEOUT_ERROR, message, 408)

    @classmethod
    def network(cls, message: str = "Network error occurred") -> 'BluefoxError':
        return cls(ErrorCode.NETWORK_ERROR, message, 0)

    @classmethod
    def unknown(cls, message: str, status: int = 0,
                details: Optional[Dict] = None) -> 'BluefoxError':
        return cls(ErrorCode.UNKNOWN_ERROR, message, status, details)

    @classmethod
    def authentication(cls, message: str, status: int = 401,
                       details: Optional[Dict] = None) -> 'BluefoxError':
        return cls(ErrorCode.AUTHENTICATION_ERROR, message, status, details)
