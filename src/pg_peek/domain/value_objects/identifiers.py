"""Core identifiers and type-safe primitives for page inspection.

These value objects keep raw on-disk integers apart from each other so that
a transaction id is never passed where a command id or a page offset is
expected.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar, NewType

from pg_peek.domain.value_objects.endianness import Endianness


# Type-safe identifiers using NewType for zero-cost runtime abstraction

LSN = NewType("LSN", int)
"""Write-ahead log position of the last change to a page (64 bits)."""

TransactionId = NewType("TransactionId", int)
"""32-bit transaction identifier (xmin, xmax, prune xid)."""

CommandId = NewType("CommandId", int)
"""32-bit command identifier within a transaction (shares storage with xvac)."""

LocationIndex = NewType("LocationIndex", int)
"""Byte offset inside a page (lower, upper, special)."""

BlockNumber = NewType("BlockNumber", int)
"""Block number of a page within a relation file."""

OffsetNumber = NewType("OffsetNumber", int)
"""1-based line pointer number inside a page, as stored in item pointers."""

# Special sentinel values
INVALID_TXN_ID = TransactionId(0)
INVALID_BLOCK_NUMBER = BlockNumber(0xFFFFFFFF)


@dataclass(frozen=True, slots=True)
class ItemPointer:
    """Physical location of a tuple version (the t_ctid field).

    Stored as two 16-bit halves of the block number followed by the
    offset number, 6 bytes in total.

    Attributes:
        block_hi: High 16 bits of the block number
        block_lo: Low 16 bits of the block number
        offset: Line pointer number inside the block
        raw: The undecoded 6 bytes
    """

    block_hi: int
    block_lo: int
    offset: OffsetNumber
    raw: bytes = field(default=b"", compare=False, repr=False)

    SIZE: ClassVar[int] = 6

    @property
    def block_number(self) -> BlockNumber:
        """Full 32-bit block number."""
        return BlockNumber((self.block_hi << 16) | self.block_lo)

    def __str__(self) -> str:
        return f"({self.block_number},{self.offset})"

    def to_bytes(self, endianness: Endianness) -> bytes:
        """Serialize to the 6-byte on-disk form."""
        return struct.pack(
            f"{endianness.prefix}HHH", self.block_hi, self.block_lo, self.offset
        )

    @classmethod
    def from_bytes(cls, data: bytes, endianness: Endianness) -> ItemPointer:
        """Deserialize from exactly 6 bytes.

        Raises:
            ValueError: If data is not exactly 6 bytes
        """
        if len(data) != cls.SIZE:
            raise ValueError(f"ItemPointer requires {cls.SIZE} bytes, got {len(data)}")

        block_hi, block_lo, offset = struct.unpack(f"{endianness.prefix}HHH", data)
        return cls(
            block_hi=block_hi,
            block_lo=block_lo,
            offset=OffsetNumber(offset),
            raw=bytes(data),
        )

    @classmethod
    def new(cls, block_number: int, offset: int) -> ItemPointer:
        """Build a pointer from a full block number and an offset number."""
        return cls(
            block_hi=(block_number >> 16) & 0xFFFF,
            block_lo=block_number & 0xFFFF,
            offset=OffsetNumber(offset),
        )
