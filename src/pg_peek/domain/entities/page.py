"""Page header, line pointer and decoded page structures.

Every relation block shares the same layout:

    ┌─────────────────────────────────────────────────────────────┐
    │ Page Header (24 bytes)                                       │
    │ ┌──────┬──────────┬───────┬───────┬───────┬─────────┬──────┐ │
    │ │ LSN  │ Checksum │ Flags │ Lower │ Upper │ Special │ Size │ │
    │ │ (8B) │   (2B)   │ (2B)  │ (2B)  │ (2B)  │  (2B)   │ +Ver │ │
    │ └──────┴──────────┴───────┴───────┴───────┴─────────┴──────┘ │
    │ Prune XID (4B)                                               │
    ├─────────────────────────────────────────────────────────────┤
    │ Line pointers (4 bytes each, grow towards higher offsets)    │
    ├──────────────────────── lower ──────────────────────────────┤
    │                    Free Space                                │
    ├──────────────────────── upper ──────────────────────────────┤
    │ Tuples (grow towards lower offsets)                          │
    ├─────────────────────── special ─────────────────────────────┤
    │ Special section (access-method specific, often empty)        │
    └─────────────────────────────────────────────────────────────┘

References:
    - PostgreSQL Documentation "Database Page Layout"
"""

from __future__ import annotations

import struct
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar, Iterator, Mapping

from pg_peek.domain.entities.heap_tuple import Row
from pg_peek.domain.entities.special import SpecialSection
from pg_peek.domain.value_objects import (
    LSN,
    BlockNumber,
    Endianness,
    LinePointerStatus,
    LocationIndex,
    PageFlags,
    TransactionId,
)

if TYPE_CHECKING:
    from pg_peek.domain.services.byte_cursor import ByteCursor


DEFAULT_PAGE_SIZE = 8192


@dataclass(frozen=True)
class PageHeader:
    """24-byte page header (PageHeaderData).

    lower, upper and special are byte offsets from the start of the page.
    A well-formed header satisfies
    ``HEADER_SIZE <= lower <= upper <= special <= page size``; the header
    itself does not check this, decode_page does.
    """

    lsn: LSN
    checksum: int
    flags: PageFlags
    lower: LocationIndex
    upper: LocationIndex
    special: LocationIndex
    pagesize_version: int
    prune_xid: TransactionId

    # lsn(8) + checksum(2) + flags(2) + lower(2) + upper(2) + special(2) + pagesize_version(2) + prune_xid(4) = 24
    HEADER_SIZE: ClassVar[int] = 24
    HEADER_FORMAT: ClassVar[str] = "QHHHHHHI"

    @property
    def page_size(self) -> int:
        """Page size recorded in the high byte of pd_pagesize_version."""
        return self.pagesize_version & 0xFF00

    @property
    def layout_version(self) -> int:
        """Page layout version from the low byte of pd_pagesize_version."""
        return self.pagesize_version & 0x00FF

    @property
    def line_pointer_count(self) -> int:
        """Number of line pointers implied by pd_lower."""
        return max(0, (self.lower - self.HEADER_SIZE) // LinePointer.SIZE)

    @property
    def free_space(self) -> int:
        """Bytes between the end of the line pointers and the first tuple."""
        return max(0, self.upper - self.lower)

    def has_special(self, page_size: int = DEFAULT_PAGE_SIZE) -> bool:
        """Whether pd_special leaves room for a special section."""
        return self.special < page_size

    def to_bytes(self, endianness: Endianness) -> bytes:
        """Serialize header to bytes."""
        return struct.pack(
            endianness.prefix + self.HEADER_FORMAT,
            self.lsn,
            self.checksum,
            self.flags,
            self.lower,
            self.upper,
            self.special,
            self.pagesize_version,
            self.prune_xid,
        )

    @classmethod
    def decode(cls, cursor: ByteCursor) -> PageHeader:
        """Read a header at the cursor position, advancing 24 bytes."""
        lsn = LSN(cursor.read_u64())
        checksum = cursor.read_u16()
        flags = PageFlags.from_raw(cursor.read_u16())
        lower = LocationIndex(cursor.read_u16())
        upper = LocationIndex(cursor.read_u16())
        special = LocationIndex(cursor.read_u16())
        pagesize_version = cursor.read_u16()
        prune_xid = TransactionId(cursor.read_u32())

        return cls(
            lsn=lsn,
            checksum=checksum,
            flags=flags,
            lower=lower,
            upper=upper,
            special=special,
            pagesize_version=pagesize_version,
            prune_xid=prune_xid,
        )


@dataclass(frozen=True)
class LinePointer:
    """A slot directory entry (ItemIdData).

    The 4 bytes form one 32-bit word:

        bits  0..14  lp_off    byte offset of the tuple
        bits 15..16  lp_flags  LinePointerStatus
        bits 17..31  lp_len    tuple length including its header

    lp_flags straddles the two 16-bit halves of the word, so the word must
    be read as a single integer before any masking.
    """

    index: int
    offset: int
    status: LinePointerStatus
    length: int

    SIZE: ClassVar[int] = 4
    OFFSET_MASK: ClassVar[int] = 0x7FFF
    STATUS_SHIFT: ClassVar[int] = 15
    STATUS_MASK: ClassVar[int] = 0x3
    LENGTH_SHIFT: ClassVar[int] = 17
    LENGTH_MASK: ClassVar[int] = 0x7FFF

    @property
    def is_normal(self) -> bool:
        return self.status is LinePointerStatus.NORMAL

    @property
    def redirect_target(self) -> int | None:
        """For a REDIRECT slot, the line pointer number it forwards to."""
        if self.status is LinePointerStatus.REDIRECT:
            return self.offset
        return None

    def to_word(self) -> int:
        """Pack the fields into the 32-bit on-disk word."""
        return (
            (self.offset & self.OFFSET_MASK)
            | ((self.status & self.STATUS_MASK) << self.STATUS_SHIFT)
            | ((self.length & self.LENGTH_MASK) << self.LENGTH_SHIFT)
        )

    def to_bytes(self, endianness: Endianness) -> bytes:
        """Serialize the line pointer word."""
        return struct.pack(f"{endianness.prefix}I", self.to_word())

    @classmethod
    def from_word(cls, word: int, index: int = 0) -> LinePointer:
        """Split a 32-bit word into offset, status and length."""
        return cls(
            index=index,
            offset=word & cls.OFFSET_MASK,
            status=LinePointerStatus((word >> cls.STATUS_SHIFT) & cls.STATUS_MASK),
            length=(word >> cls.LENGTH_SHIFT) & cls.LENGTH_MASK,
        )

    @classmethod
    def decode(cls, cursor: ByteCursor, index: int) -> LinePointer:
        """Read one line pointer at the cursor position."""
        return cls.from_word(cursor.read_u32(), index)


@dataclass(frozen=True)
class Page:
    """A fully decoded block.

    Pages are immutable once built and own everything they reference.
    ``rows`` maps the directory index of every NORMAL line pointer to its
    decoded row; other slots have no entry.

    Example:
        >>> page = decode_page(block, endianness=Endianness.LITTLE)
        >>> [lp.status.name for lp in page.line_pointers]
        ['NORMAL', 'DEAD']
        >>> page.row(0).payload
        b'...'
    """

    header: PageHeader
    line_pointers: tuple[LinePointer, ...]
    rows: Mapping[int, Row]
    special: SpecialSection
    block_number: BlockNumber = BlockNumber(0)
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if not isinstance(self.rows, MappingProxyType):
            object.__setattr__(self, "rows", MappingProxyType(dict(self.rows)))

    @property
    def free_space_range(self) -> tuple[int, int]:
        """Half-open byte range [lower, upper) of unused space."""
        return (self.header.lower, self.header.upper)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def row(self, slot: int) -> Row | None:
        """Get the row of a slot, or None if the slot holds no NORMAL tuple."""
        return self.rows.get(slot)

    def iter_rows(self) -> Iterator[tuple[int, Row]]:
        """Yield (slot, row) pairs in directory order."""
        for slot in sorted(self.rows):
            yield slot, self.rows[slot]

    def status_counts(self) -> dict[LinePointerStatus, int]:
        """Count line pointers per status."""
        counts = Counter(lp.status for lp in self.line_pointers)
        return {status: counts.get(status, 0) for status in LinePointerStatus}

    def __repr__(self) -> str:
        return (
            f"Page(block={self.block_number}, "
            f"line_pointers={len(self.line_pointers)}, "
            f"rows={len(self.rows)}, "
            f"free={self.header.free_space}, "
            f"special={self.special.size})"
        )
