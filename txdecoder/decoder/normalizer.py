"""
Decoded value normalization: Borsh layout output to JSON-safe values.

Integers become exact decimal strings (u64/u128 amounts do not fit a JSON
number), pubkeys become base58, "0x" hex strings become decimal strings and
raw bytes become a list of byte values. Containers are walked recursively.
Never raises: anything unrecognised is returned unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from solders.pubkey import Pubkey

HEX_PREFIX = "0x"
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
# construct attaches the parse stream to every Container it builds
_CONSTRUCT_INTERNAL_KEYS = frozenset({"_io"})


def _hex_to_decimal(value: str) -> str:
    digits = value[len(HEX_PREFIX):]
    if not _HEX_DIGITS.fullmatch(digits):
        return value
    return str(int(digits, 16))


def _float_to_str(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def normalize(value: Any) -> Any:
    """Recursively convert a decoded value into its JSON transport form."""
    if isinstance(value, Pubkey):
        return str(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        if value.startswith(HEX_PREFIX):
            return _hex_to_decimal(value)
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return list(bytes(value))
    if isinstance(value, (list, tuple)):
        return [normalize(item) for item in value]
    if isinstance(value, Mapping):
        return {
            key: normalize(item)
            for key, item in value.items()
            if key not in _CONSTRUCT_INTERNAL_KEYS
        }
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return value
        return _float_to_str(value)
    return value
