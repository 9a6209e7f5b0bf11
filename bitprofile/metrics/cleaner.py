"""
Sequence cleaning and text/binary conversion.

Every metric in this package operates on the clean view of a sequence:
the '0'/'1' symbols of the raw input, in their original order.

Usage:
    from bitprofile.metrics.cleaner import to_sequence

    seq = to_sequence("1010 1100\n0011")
    seq.clean  # "101011000011"
"""

from __future__ import annotations

import re

from bitprofile.exceptions import EmptySequenceError
from bitprofile.models.metrics_models import Sequence

_NON_BINARY = re.compile(r"[^01]")
_BINARY_ONLY = re.compile(r"[01]+")

BYTE_WIDTH = 8


def clean_sequence(raw: str) -> str:
    """Strip every character that is not '0' or '1'."""
    return _NON_BINARY.sub("", raw)


def to_sequence(raw: str) -> Sequence:
    """Build a Sequence from raw input.

    Raises:
        EmptySequenceError: If no '0'/'1' symbols remain after cleaning.
    """
    if not isinstance(raw, str):
        raise TypeError(f"raw input must be str, got {type(raw).__name__}")
    clean = clean_sequence(raw)
    if not clean:
        raise EmptySequenceError(raw)
    return Sequence(raw=raw, clean=clean)


def is_binary(text: str) -> bool:
    return bool(_BINARY_ONLY.fullmatch(text))


def encode_text(text: str) -> str:
    """Convert arbitrary text into a binary string.

    Text that is already pure binary is returned unchanged; otherwise each
    character becomes its code point in binary, zero-padded to a multiple
    of 8 bits.
    """
    if is_binary(text):
        return text
    parts = []
    for char in text:
        bits = format(ord(char), "b")
        width = -(-len(bits) // BYTE_WIDTH) * BYTE_WIDTH
        parts.append(bits.zfill(width))
    return "".join(parts)


def decode_binary(bits: str, original: str) -> str:
    """Reverse encode_text for 8-bit characters.

    `original` decides whether `bits` was produced from binary input (and
    is returned unchanged) or from text.
    """
    if is_binary(original):
        return bits
    chunks = [bits[i : i + BYTE_WIDTH] for i in range(0, len(bits), BYTE_WIDTH)]
    return "".join(chr(int(chunk, 2)) for chunk in chunks if chunk)
