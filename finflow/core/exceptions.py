"""Exception hierarchy for FinFlow.

The aggregation engine never raises for malformed individual records; those
are isolated as rejections. Exceptions here cover API misuse and the I/O
edges (configuration, snapshot files).
"""

from typing import Any


class FinflowError(Exception):
    """Base exception for all FinFlow errors.

    Attributes:
        message: Human-readable error message.
        details: Additional error context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class ConfigError(FinflowError):
    """Raised when configuration loading or validation fails."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file does not exist."""


class SnapshotError(FinflowError):
    """Raised when a transaction/budget snapshot cannot be read."""


class InvalidReferenceDateError(FinflowError):
    """Raised when the reference date of a computation cannot be parsed."""


class RecordRejectedError(FinflowError):
    """Raised inside the normalizer when a raw record fails a check.

    Never escapes the normalizer: it is converted into a Rejection.
    """

    def __init__(self, reason: Any, detail: str) -> None:
        super().__init__(detail, {"reason": getattr(reason, "value", reason)})
        self.reason = reason
        self.detail = detail
