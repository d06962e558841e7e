"""UTF-8 byte-offset helpers for the append-only typing channel.

Offsets are measured in UTF-8 bytes so that a typed prefix can be compared
across transcripts regardless of how many code points each one holds.
"""

from __future__ import annotations


def byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def common_prefix_byte_length(a: str, b: str) -> int:
    """Return the byte length of the longest common code-point prefix of a and b.

    The walk stops at the first mismatching code point, so the result is
    always a valid split point in both strings.
    """
    length = 0
    for ca, cb in zip(a, b):
        if ca != cb:
            break
        length += len(ca.encode("utf-8"))
    return length


def slice_utf8(text: str, start: int, end: int | None = None) -> str:
    """Slice text by UTF-8 byte offsets without splitting a code point.

    A start offset inside a multi-byte character moves forward to the next
    boundary, an end offset inside one moves back to the previous boundary.
    """
    encoded = text.encode("utf-8")
    start = _clamp(encoded, start)
    while start < len(encoded) and _is_continuation(encoded[start]):
        start += 1
    stop = len(encoded) if end is None else _clamp(encoded, end)
    while stop < len(encoded) and stop > 0 and _is_continuation(encoded[stop]):
        stop -= 1
    if stop <= start:
        return ""
    return encoded[start:stop].decode("utf-8")


def _clamp(encoded: bytes, offset: int) -> int:
    return max(0, min(offset, len(encoded)))


def _is_continuation(byte: int) -> bool:
    # 0b10xxxxxx
    return (byte & 0xC0) == 0x80
