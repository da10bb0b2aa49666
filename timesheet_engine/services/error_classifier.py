"""
Classification of notification delivery failures.

Notifications are sent after the approval transaction has committed, so a
failed card never undoes a decision. Failures are classified so the log
says whether a later resend has a chance of succeeding.
"""

import logging
import socket
from enum import Enum
from typing import Any, Dict, Optional

import requests.exceptions

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Classification of error types."""

    RETRYABLE = "retryable"  # 429, 5xx, network errors
    FATAL = "fatal"  # other 4xx: bad token, unknown conversation
    UNKNOWN = "unknown"


class ErrorClassifier:
    """
    Classifies delivery errors as retryable or fatal.

    Features:
    - HTTP status code classification for bot connector responses
    - Network error detection
    - Error description generation
    - Statistics tracking
    """

    def __init__(self):
        self._stats: Dict[str, int] = {
            "retryable": 0,
            "fatal": 0,
            "unknown": 0,
            "total": 0,
        }

    @staticmethod
    def _status_code(exception: Exception) -> Optional[int]:
        if isinstance(exception, requests.exceptions.HTTPError):
            response = exception.response
            if response is not None:
                return response.status_code
        return None

    def _type_of(self, exception: Exception) -> ErrorType:
        status_code = self._status_code(exception)
        if status_code is not None:
            if status_code == 429 or 500 <= status_code < 600:
                return ErrorType.RETRYABLE
            if 400 <= status_code < 500:
                return ErrorType.FATAL

        if isinstance(
            exception,
            (
                socket.timeout,
                requests.exceptions.ConnectionError,
                requests.exceptions.Timeout,
            ),
        ):
            return ErrorType.RETRYABLE

        return ErrorType.UNKNOWN

    def classify(self, exception: Exception) -> ErrorType:
        """
        Classify an exception and record it in the statistics.

        Args:
            exception: The exception to classify

        Returns:
            ErrorType classification
        """
        error_type = self._type_of(exception)
        self._stats["total"] += 1
        self._stats[error_type.value] += 1
        return error_type

    def is_retryable(self, exception: Exception) -> bool:
        return self.classify(exception) == ErrorType.RETRYABLE

    def describe(self, exception: Exception) -> str:
        """
        Human-readable description of an exception and its classification.

        Does not update the statistics.
        """
        error_type = self._type_of(exception)
        status_code = self._status_code(exception)

        if status_code == 429:
            return f"Rate limit error (HTTP 429) - {error_type.value}"
        if status_code is not None and 500 <= status_code < 600:
            return f"Server error (HTTP {status_code}) - {error_type.value}"
        if status_code in (401, 403):
            return f"Authorization error (HTTP {status_code}) - {error_type.value}"
        if status_code is not None and 400 <= status_code < 500:
            return f"Client error (HTTP {status_code}) - {error_type.value}"

        if isinstance(exception, (socket.timeout, requests.exceptions.Timeout)):
            return f"Network timeout error - {error_type.value}"

        if isinstance(exception, requests.exceptions.ConnectionError):
            return f"Network connection error - {error_type.value}"

        return f"{type(exception).__name__}: {exception} - {error_type.value}"

    def get_statistics(self) -> Dict[str, Any]:
        return self._stats.copy()

    def reset_statistics(self):
        self._stats = {"retryable": 0, "fatal": 0, "unknown": 0, "total": 0}
