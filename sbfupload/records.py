"""Inverter value records, "not a number" markers and string hashing."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

__all__ = [
    "SBFSPOT_VERSION",
    "LRI_MASK",
    "NAN_PATTERNS",
    "Rec40Att",
    "Rec40S32",
    "is_nan",
    "djb_hash",
]

SBFSPOT_VERSION = "3.10.0"

LRI_MASK = 0x00FFFF00

# kind -> (bit width, bit pattern that marks a missing value)
NAN_PATTERNS: dict[str, tuple[int, int]] = {
    "s16": (16, 0x8000),
    "u16": (16, 0xFFFF),
    "s32": (32, 0x80000000),
    "u32": (32, 0xFFFFFFFF),
    "s64": (64, 0x8000000000000000),
    "u64": (64, 0xFFFFFFFFFFFFFFFF),
}

_HASH_MASK = (1 << 64) - 1
_HASH_SEED = 5381


def _unpack(fmt: str, data: bytes) -> tuple[int, ...]:
    size = struct.calcsize(fmt)
    if len(data) != size:
        raise ValueError(f"expected {size} bytes, got {len(data)}")
    return struct.unpack(fmt, data)


@dataclass
class Rec40Att:
    """A status/attribute record: LRI, timestamp and attribute word."""

    raw_lri: int = 0
    datetime: int = 0
    attrib: int = 0

    _FORMAT = "<3i"

    @classmethod
    def from_bytes(cls, data: bytes) -> "Rec40Att":
        """Build a record from its 12-byte little-endian wire form."""
        return cls(*_unpack(cls._FORMAT, data))

    def lri(self) -> int:
        """The logical record identifier without its class and data-type bits."""
        return self.raw_lri & LRI_MASK


@dataclass
class Rec40S32:
    """A signed 32-bit record with lower, upper and actual levels."""

    raw_lri: int = 0
    datetime: int = 0
    min_ll: int = 0  # lower level
    max_ll: int = 0
    min_ul: int = 0  # upper level
    max_ul: int = 0
    min_actual: int = 0  # current
    max_actual: int = 0
    res1: int = 0  # reserved
    res2: int = 0  # reserved

    _FORMAT = "<10i"

    @classmethod
    def from_bytes(cls, data: bytes) -> "Rec40S32":
        """Build a record from its 40-byte little-endian wire form."""
        return cls(*_unpack(cls._FORMAT, data))

    def lri(self) -> int:
        """The logical record identifier without its class and data-type bits."""
        return self.raw_lri & LRI_MASK

    def min_power_limit(self) -> int:
        return self.min_ll

    def max_power_limit(self) -> int:
        return self.min_ul

    def actual_power_limit(self) -> int:
        return self.min_actual

    def actual_power_limit_pct(self) -> float:
        """The actual power limit as a percentage of the maximum limit."""
        if self.min_ul == 0:
            if self.min_actual == 0:
                return math.nan
            return math.copysign(math.inf, self.min_actual)
        return self.min_actual / self.min_ul * 100.0


def is_nan(value: int, kind: str) -> bool:
    """Tell whether ``value`` is the missing-value marker for integer ``kind``.

    ``kind`` is one of s16, u16, s32, u32, s64, u64. Signed values may be
    given either as negative numbers or as their raw bit pattern.
    """
    try:
        bits, pattern = NAN_PATTERNS[kind.lower()]
    except KeyError:
        raise ValueError(f"unknown integer kind: {kind!r}") from None
    return (value & ((1 << bits) - 1)) == pattern


def djb_hash(text: str | bytes) -> int:
    """Bernstein's string hash, as a 64-bit unsigned value.

    Characters are folded in from the last to the first, each byte taken
    as a signed char.
    """
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    result = _HASH_SEED
    for byte in reversed(data):
        char = byte - 256 if byte >= 128 else byte
        result = ((result * 33) ^ (char & _HASH_MASK)) & _HASH_MASK
    return result