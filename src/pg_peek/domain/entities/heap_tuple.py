"""Heap tuple header and decoded row.

Each NORMAL line pointer of a heap page addresses one tuple:

    [RowHeader (23 bytes)] [null bitmap] [oid] [padding] [payload]
                                                         ^ t_hoff

t_hoff, not the fixed header size, is where the payload starts; the bytes
in between hold the optional null bitmap, the legacy oid and alignment
padding.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from pg_peek.domain.value_objects import (
    NATTS_MASK,
    CommandId,
    Endianness,
    InfomaskFlags,
    ItemPointer,
    TransactionId,
    TupleStateFlags,
)

if TYPE_CHECKING:
    from pg_peek.domain.services.byte_cursor import ByteCursor


@dataclass(frozen=True)
class RowHeader:
    """23-byte tuple header (HeapTupleHeaderData).

    Terminology:
        - xmin: transaction that inserted this tuple version
        - xmax: transaction that deleted or locked it (0 if none)
        - cid: command id, or xvac for tuples moved by old-style VACUUM FULL
        - ctid: location of this tuple or of its newer version
        - infomask2: attribute count (low 11 bits) plus tuple state bits
        - infomask: null/varwidth layout bits plus visibility hints
        - hoff: offset from the tuple start to its payload
    """

    xmin: TransactionId
    xmax: TransactionId
    cid: CommandId
    ctid: ItemPointer
    infomask2: int
    infomask: InfomaskFlags
    hoff: int

    HEADER_SIZE: ClassVar[int] = 23
    HEADER_FORMAT: ClassVar[str] = "IIIHHHHHB"

    @property
    def natts(self) -> int:
        """Number of attributes stored in the tuple."""
        return self.infomask2 & NATTS_MASK

    @property
    def state_flags(self) -> TupleStateFlags:
        return TupleStateFlags.from_raw(self.infomask2)

    @property
    def xvac(self) -> TransactionId:
        """The cid slot read as a VACUUM FULL transaction id."""
        return TransactionId(self.cid)

    @property
    def has_nulls(self) -> bool:
        return bool(self.infomask & InfomaskFlags.HASNULL)

    @property
    def has_oid(self) -> bool:
        return bool(self.infomask & InfomaskFlags.HASOID_OLD)

    @property
    def is_hot_updated(self) -> bool:
        return bool(self.state_flags & TupleStateFlags.HOT_UPDATED)

    @property
    def is_heap_only(self) -> bool:
        return bool(self.state_flags & TupleStateFlags.ONLY_TUPLE)

    @property
    def null_bitmap_size(self) -> int:
        """Bytes needed for one null bit per attribute."""
        return (self.natts + 7) // 8

    def to_bytes(self, endianness: Endianness) -> bytes:
        """Serialize header to bytes."""
        return struct.pack(
            endianness.prefix + self.HEADER_FORMAT,
            self.xmin,
            self.xmax,
            self.cid,
            self.ctid.block_hi,
            self.ctid.block_lo,
            self.ctid.offset,
            self.infomask2,
            self.infomask,
            self.hoff,
        )

    @classmethod
    def decode(cls, cursor: ByteCursor) -> RowHeader:
        """Read a tuple header at the cursor position, advancing 23 bytes."""
        xmin = TransactionId(cursor.read_u32())
        xmax = TransactionId(cursor.read_u32())
        cid = CommandId(cursor.read_u32())
        ctid = ItemPointer.from_bytes(cursor.read_bytes(ItemPointer.SIZE), cursor.endianness)
        infomask2 = cursor.read_u16()
        infomask = InfomaskFlags(cursor.read_u16())
        hoff = cursor.read_u8()

        return cls(
            xmin=xmin,
            xmax=xmax,
            cid=cid,
            ctid=ctid,
            infomask2=infomask2,
            infomask=infomask,
            hoff=hoff,
        )


@dataclass(frozen=True)
class Row:
    """A decoded heap tuple.

    The payload is left as raw bytes; interpreting columns needs the
    relation's catalog entry, which the page decoder does not have.

    Attributes:
        slot: Directory index of the line pointer addressing this row
        header: The fixed tuple header
        null_bitmap: One bit per attribute when HASNULL is set, else None
        payload: Bytes from t_hoff to the end of the tuple
        oid: Legacy object id when HASOID_OLD is set, else None
    """

    slot: int
    header: RowHeader
    null_bitmap: bytes | None
    payload: bytes
    oid: int | None = None

    @property
    def natts(self) -> int:
        return self.header.natts

    @property
    def has_nulls(self) -> bool:
        return self.null_bitmap is not None

    def __len__(self) -> int:
        """Total tuple size including header, bitmap and padding."""
        return self.header.hoff + len(self.payload)

    def is_null(self, attnum: int) -> bool:
        """Check whether the 0-based attribute ``attnum`` is null.

        A set bit marks a null attribute. Rows without a bitmap, and
        attributes past the declared count, are reported as not null.
        """
        if attnum < 0:
            raise ValueError(f"attnum must be non-negative, got {attnum}")
        if self.null_bitmap is None or attnum >= self.natts:
            return False
        return bool(self.null_bitmap[attnum >> 3] & (1 << (attnum & 0x07)))

    def null_attributes(self) -> list[int]:
        """0-based numbers of all null attributes."""
        return [attnum for attnum in range(self.natts) if self.is_null(attnum)]
