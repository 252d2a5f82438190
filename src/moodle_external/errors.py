"""Validation exceptions for external function parameters and responses."""

from enum import Enum
from typing import Any


class ErrorReason(str, Enum):
    """Why a value was rejected."""

    TYPE_MISMATCH = "type_mismatch"
    MISSING_FIELD = "missing_field"
    UNEXPECTED_FIELDS = "unexpected_fields"
    INVALID_VALUE = "invalid_value"
    DEPTH_EXCEEDED = "depth_exceeded"
    INVALID_DESCRIPTION = "invalid_description"


class ExternalValidationError(Exception):
    """Base exception for values that do not match their description.

    The ``path`` holds the structure keys (and list indices, when enabled)
    leading from the root description to the node that failed, root first.
    """

    def __init__(
        self,
        message: str,
        reason: ErrorReason = ErrorReason.INVALID_VALUE,
        debuginfo: str | None = None,
        path: tuple[Any, ...] = (),
        fields: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.debuginfo = debuginfo
        self.path = tuple(path)
        self.fields = tuple(fields)

    def prepend(self, segment: Any) -> "ExternalValidationError":
        """Add a parent key in front of the current path and return self."""
        self.path = (segment, *self.path)
        return self

    @property
    def dotted_path(self) -> str:
        return ".".join(str(segment) for segment in self.path)

    def __str__(self) -> str:
        parts = [str(segment) for segment in self.path]
        parts.append(self.message)
        text = " => ".join(parts)
        if self.debuginfo and self.debuginfo != self.message:
            text = f"{text}: {self.debuginfo}"
        return text


class InvalidParameterError(ExternalValidationError):
    """The caller sent parameters that do not match the description."""

    pass


class InvalidResponseError(ExternalValidationError):
    """An external function produced a return value that does not match its description."""

    pass


class CodingError(Exception):
    """An external function descriptor is malformed."""

    pass


class FunctionNotFoundError(LookupError):
    """No external function is registered under the requested name."""

    pass
