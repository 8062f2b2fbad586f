"""Parsing of HTTP ``Range`` headers (RFC 7233 byte ranges).

The resolver is pure: it never touches the resource, the caller supplies the
current size. Any failure is logged and reported as ``None`` so the caller can
answer ``416 Range Not Satisfiable``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from core.utils.logger import logger

BYTES_UNIT = "bytes"

# first-byte-pos "-" [ last-byte-pos ]  |  "-" suffix-length
_RANGE_SPEC_RE = re.compile(r"^\s*(\d*)\s*-\s*(\d*)\s*$")


@dataclass(frozen=True)
class ByteRange:
    """One requested sub-range. ``end`` is None when the client omitted it."""

    start: int
    end: int | None = None


@dataclass(frozen=True)
class RangeSpec:
    """Parsed, satisfiable ``Range`` header for a resource of a given size."""

    unit: str = BYTES_UNIT
    ranges: list[ByteRange] = field(default_factory=list)


def _parse_range_set(range_set: str) -> list[tuple[str, str]] | None:
    """Split ``0-10,-500`` into raw (first, last) pairs, None on bad syntax."""
    specs = []
    for element in range_set.split(","):
        if not element.strip():
            continue
        match = _RANGE_SPEC_RE.match(element)
        if not match:
            return None
        first, last = match.groups()
        if not first and not last:
            return None
        specs.append((first, last))
    return specs or None


def _bind(first: str, last: str, size: int) -> ByteRange | None:
    """Turn a raw pair into a ByteRange, None when it cannot be satisfied."""
    if not first:
        # Suffix range: the last N bytes of the resource.
        suffix = int(last)
        if suffix == 0 or size == 0:
            return None
        return ByteRange(start=max(0, size - suffix), end=size - 1)

    start = int(first)
    end = int(last) if last else None
    if start >= size:
        return None
    if end is not None and end < start:
        return None
    return ByteRange(start=start, end=end)


def resolve_range(range_header: str | None, size: int) -> RangeSpec | None:
    """Resolve a ``Range`` header against a resource size.

    Args:
        range_header: Raw header value, or None when the client sent none.
        size: Current size of the resource in bytes.

    Returns:
        A RangeSpec holding the satisfiable sub-ranges in client order, or
        None when the header is absent, malformed or unsatisfiable.
    """
    if not range_header:
        return None

    unit, sep, range_set = range_header.partition("=")
    if not sep or unit.strip().lower() != BYTES_UNIT:
        logger.error(f"Malformed range request: Invalid Range format ({range_header!r})")
        return None

    raw_specs = _parse_range_set(range_set)
    if raw_specs is None:
        logger.error(f"Malformed range request: Invalid Range format ({range_header!r})")
        return None

    ranges = [
        byte_range
        for byte_range in (_bind(first, last, size) for first, last in raw_specs)
        if byte_range is not None
    ]
    if not ranges:
        logger.error(
            f"Unsatisfiable range request: Range exceeds content size "
            f"({range_header!r}, size={size})"
        )
        return None

    return RangeSpec(unit=BYTES_UNIT, ranges=ranges)
