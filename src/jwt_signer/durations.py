"""
Duration strings such as "15m", "1h30m" or "1.5s".

The accepted syntax is a sequence of decimal numbers, each with an optional
fraction and a mandatory unit suffix, with an optional leading sign. Valid
units are "ns", "us" (or "µs"), "ms", "s", "m" and "h".
"""

import re
from datetime import timedelta

# Expressed in nanoseconds so that fractional values of every unit are exact.
_UNIT_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek small letter mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 60 * 60 * 1_000_000_000,
}

# Durations are bounded by a signed 64-bit nanosecond count.
_MAX_NANOSECONDS = 2**63 - 1

_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration string into a timedelta.

    Raises:
        ValueError: If the string is empty or malformed
    """
    orig = text
    if not text:
        raise ValueError(f"invalid duration {orig!r}")

    negative = False
    if text[0] in "+-":
        negative = text[0] == "-"
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {orig!r}")

    total_ns = 0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        whole, frac, unit = match.group(1), match.group(2), match.group(3)
        if not whole and not frac:
            raise ValueError(f"invalid duration {orig!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {orig!r}")
        if unit not in _UNIT_NANOSECONDS:
            raise ValueError(f"unknown unit {unit!r} in duration {orig!r}")

        scale = _UNIT_NANOSECONDS[unit]
        total_ns += int(whole or "0") * scale
        if frac:
            total_ns += int(frac) * scale // (10 ** len(frac))
        pos = match.end()

    if total_ns > _MAX_NANOSECONDS:
        raise ValueError(f"duration {orig!r} out of range")

    if negative:
        total_ns = -total_ns

    return timedelta(microseconds=total_ns // 1_000)
