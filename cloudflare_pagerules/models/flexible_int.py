"""
Integer type that decodes from either a JSON number or a JSON string of digits.

The Cloudflare API switches between quoted and unquoted integers depending on
the endpoint (``"priority": 1`` vs ``"priority": "1"``).
"""

import json
import re
from typing import Annotated, Any, Union

from pydantic import BeforeValidator

from ..errors import DecodeError

# JSON integer grammar: no "+" sign, no leading zeros
_INTEGER_PATTERN = re.compile(r"-?(?:0|[1-9][0-9]*)")


def parse_flexible_int(value: Any) -> int:
    """
    Normalize an already-parsed JSON value to an int.

    Accepts ints and strings holding a base-10 integer. ``None`` is the zero
    value. Booleans, floats and anything else are rejected.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise DecodeError(f"expected an integer, got boolean {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        # JSON whitespace only; NBSP and other Unicode spaces are not allowed
        digits = value.strip(" \t\n\r")
        if not _INTEGER_PATTERN.fullmatch(digits):
            raise DecodeError(f"expected an integer string, got {value!r}")
        return int(digits)
    raise DecodeError(f"expected an integer, got {type(value).__name__} {value!r}")


def decode_flexible_int(raw: Union[bytes, str]) -> int:
    """
    Decode raw JSON for a single value into an int.

    Args:
        raw: The JSON text of the value, e.g. ``b'42'`` or ``b'"42"'``

    Returns:
        The decoded integer

    Raises:
        DecodeError: If the JSON is malformed or does not hold an integer
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        value = json.loads(text)
    except ValueError as e:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        raise DecodeError("malformed integer value", e) from e
    return parse_flexible_int(value)


def encode_flexible_int(value: int) -> bytes:
    """Encode an int in its canonical wire form, a bare JSON number."""
    return json.dumps(parse_flexible_int(value)).encode("utf-8")


FlexibleInt = Annotated[int, BeforeValidator(parse_flexible_int)]
