"""
Typed failures raised by the inspector pipeline.

Every failure is created where it happens and carried unchanged up to the
tool layer, which renders it with :func:`format_error`.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class InspectorErrorKind(str, Enum):
    """Closed set of failure categories.

    INVALID_RESPONSE and CONNECTION_FAILED are reserved; the pipeline itself
    never raises them.
    """

    SPAWN_FAILED = "SPAWN_FAILED"
    EXECUTION_FAILED = "EXECUTION_FAILED"
    PARSE_FAILED = "PARSE_FAILED"
    TIMEOUT = "TIMEOUT"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    CONNECTION_FAILED = "CONNECTION_FAILED"


class InspectorError(Exception):
    """A failure of one inspector invocation."""

    def __init__(
        self,
        kind: InspectorErrorKind,
        message: str,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = InspectorErrorKind(kind)
        self.message = message
        self.details = details

    def __repr__(self) -> str:
        return (
            f"InspectorError(kind={self.kind.value!r}, message={self.message!r}, "
            f"details={self.details!r})"
        )


def format_error(error: InspectorError) -> str:
    """Render a failure as ``Error [KIND]: message`` plus an optional details line."""
    text = f"Error [{error.kind.value}]: {error.message}"
    if error.details:
        text += f"\nDetails: {error.details}"
    return text
