"""
Error taxonomy for the QoS monitor.

Every failure raised by the codec, the stores, the verification engine and the
monitor service derives from :class:`QoSMonitorError` and carries a stable
:class:`ErrorCode`. :class:`ErrorDetails` renders any of them as structured
JSON for command-line and tooling consumers.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Standardized error codes"""

    MISSING_PARAMETER = "MISSING_PARAMETER"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    UNKNOWN_PROFILE = "UNKNOWN_PROFILE"
    NO_SAMPLES = "NO_SAMPLES"
    RULE_NOT_FOUND = "RULE_NOT_FOUND"
    DUPLICATE_RULE = "DUPLICATE_RULE"
    WRITE_CONFLICT = "WRITE_CONFLICT"
    CONNECTION_FAILURE = "CONNECTION_FAILURE"
    STORAGE_ERROR = "STORAGE_ERROR"


class QoSMonitorError(Exception):
    """Base class for all QoS monitor failures."""

    code: ErrorCode = ErrorCode.STORAGE_ERROR

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_details(self) -> "ErrorDetails":
        """Return a serializable description of this error."""
        return ErrorDetails(
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


class MissingParameter(QoSMonitorError):
    """A required measurement field is absent from the input."""

    code = ErrorCode.MISSING_PARAMETER

    def __init__(self, parameter: str) -> None:
        super().__init__(f"Parameter missing: {parameter}", parameter=parameter)
        self.parameter = parameter


class InvalidParameter(QoSMonitorError):
    """A required measurement field is present but not a finite number."""

    code = ErrorCode.INVALID_PARAMETER

    def __init__(self, parameter: str, value: Any = None) -> None:
        super().__init__(
            f"Value of parameter {parameter} is not parsable. Please make sure "
            "that no invalid characters are present",
            parameter=parameter,
            value=None if value is None else str(value),
        )
        self.parameter = parameter


class UnknownProfile(QoSMonitorError):
    """No verification profile is registered under the requested identifier."""

    code = ErrorCode.UNKNOWN_PROFILE

    def __init__(self, profile_type: str, available: Optional[list] = None) -> None:
        super().__init__(
            f"Unknown QoS profile: {profile_type}",
            profile_type=profile_type,
            available_options=available or [],
        )
        self.profile_type = profile_type


class NoSamples(QoSMonitorError):
    """Verification was requested with an empty sample sequence."""

    code = ErrorCode.NO_SAMPLES


class RuleNotFound(QoSMonitorError):
    """Verification was requested for a pair without a registered rule."""

    code = ErrorCode.RULE_NOT_FOUND


class DuplicateRule(QoSMonitorError):
    """A rule already exists for the ordered identity pair."""

    code = ErrorCode.DUPLICATE_RULE


class WriteConflict(QoSMonitorError):
    """The storage backend could not satisfy the majority write concern."""

    code = ErrorCode.WRITE_CONFLICT


class ConnectionFailure(QoSMonitorError):
    """The storage backend is unreachable."""

    code = ErrorCode.CONNECTION_FAILURE


class StorageError(QoSMonitorError):
    """Any other storage backend failure."""

    code = ErrorCode.STORAGE_ERROR


class ErrorDetails(BaseModel):
    """Structured error response"""

    code: ErrorCode
    message: str
    details: Optional[Dict[str, Any]] = None
