"""
Block integrity checks for binary sequences.

A sequence is split into 8-symbol blocks; it is structurally valid when
every block is full except possibly the last one. The CRC-32 is the
standard IEEE polynomial over the ASCII text of the clean sequence.
"""

from __future__ import annotations

import zlib

from bitprofile.models.metrics_models import BlockIntegrity

BLOCK_SIZE = 8


def simple_checksum(clean: str) -> int:
    """Sum of the bits."""
    return clean.count("1")


def crc32(clean: str) -> int:
    return zlib.crc32(clean.encode("ascii")) & 0xFFFFFFFF


def validate_blocks(clean: str, block_size: int = BLOCK_SIZE) -> BlockIntegrity:
    blocks = [clean[i : i + block_size] for i in range(0, len(clean), block_size)]
    remainder = len(clean) % block_size
    errors = sum(
        1
        for index, block in enumerate(blocks)
        if len(block) != block_size
        and not (index == len(blocks) - 1 and len(block) == remainder)
    )
    return BlockIntegrity(
        valid=errors == 0,
        errors=errors,
        block_count=len(blocks),
        checksum=simple_checksum(clean),
        crc32=crc32(clean),
    )
