"""Decoding of inspector CLI output."""

from __future__ import annotations

import json
from typing import Any

from .errors import InspectorError, InspectorErrorKind


def parse_json(text: str) -> Any:
    """Parse a JSON document, raising PARSE_FAILED on malformed input."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InspectorError(
            InspectorErrorKind.PARSE_FAILED,
            "Failed to parse JSON response",
            str(e),
        ) from e


def decode_output(stdout: str) -> Any:
    """Decode the JSON document the inspector CLI printed on stdout.

    Surrounding whitespace is ignored and empty output decodes to ``{}``.
    The shape of the result is not checked.
    """
    return parse_json(stdout.strip() or "{}")
