"""Base exception and error codes for git-analytics.

Error Code Convention:
    GA1xx - Query input errors (dates, patterns)
    GA2xx - Repository and history errors
    GA3xx - Configuration errors
    GA4xx - Cancellation
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Structured error codes for logging and CLI output."""

    GA100 = "GA100"  # Invalid date range
    GA101 = "GA101"  # Invalid exclude pattern
    GA102 = "GA102"  # Unknown metric

    GA200 = "GA200"  # Repository unavailable
    GA201 = "GA201"  # History read failed

    GA300 = "GA300"  # Invalid configuration
    GA301 = "GA301"  # Config file unreadable

    GA400 = "GA400"  # Query cancelled


class GitAnalyticsError(Exception):
    """Base exception for all git-analytics errors."""

    code: ErrorCode = ErrorCode.GA300

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_json(self) -> Dict[str, Any]:
        """Structured form for JSON output."""
        return {
            "error_code": self.code.value,
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }
