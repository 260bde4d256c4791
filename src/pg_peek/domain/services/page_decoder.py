"""Decoding of a single page-sized block.

decode_page runs the per-block pipeline:

    1. Page header (24 bytes)
    2. Bounds check: 24 <= lower <= upper <= special <= page size
    3. Line pointer directory, (lower - 24) / 4 entries
    4. One Row per NORMAL line pointer, read at the pointer's offset
    5. Special section, opaque unless a SpecialDecoder is supplied

Blocks are decoded independently of each other, so callers may decode
blocks of one file concurrently as long as each call gets its own bytes.
"""

from __future__ import annotations

import structlog

from pg_peek.domain.entities import (
    LinePointer,
    Page,
    PageHeader,
    Row,
    RowHeader,
    SpecialDecoder,
    SpecialSection,
    decode_opaque_special,
)
from pg_peek.domain.errors import PageDecodeError, StructuralInvariantError
from pg_peek.domain.services.byte_cursor import ByteCursor
from pg_peek.domain.value_objects import BlockNumber, Endianness

logger = structlog.get_logger(__name__)

# Legacy oid column stored just before t_hoff
OID_SIZE = 4


def validate_header(header: PageHeader, page_size: int) -> None:
    """Check the ordering of the header's offsets against the block size.

    Raises:
        StructuralInvariantError: If 24 <= lower <= upper <= special <= page_size fails
    """
    if not (
        PageHeader.HEADER_SIZE
        <= header.lower
        <= header.upper
        <= header.special
        <= page_size
    ):
        raise StructuralInvariantError(
            f"header offsets out of order: expected {PageHeader.HEADER_SIZE} <= "
            f"lower ({header.lower}) <= upper ({header.upper}) <= "
            f"special ({header.special}) <= page size ({page_size})"
        )


def decode_line_pointers(cursor: ByteCursor, header: PageHeader) -> tuple[LinePointer, ...]:
    """Read the slot directory that follows the header.

    Args:
        cursor: Positioned right after the page header
        header: The page's decoded header; pd_lower gives the entry count

    Returns:
        Line pointers in directory order; the tuple index is the slot number
    """
    return tuple(
        LinePointer.decode(cursor, index) for index in range(header.line_pointer_count)
    )


def decode_row(cursor: ByteCursor, line_pointer: LinePointer) -> Row:
    """Decode the tuple a NORMAL line pointer points at.

    The tuple occupies ``line_pointer.length`` bytes starting at
    ``line_pointer.offset``; its payload is everything from t_hoff on.

    Args:
        cursor: Cursor over the whole block
        line_pointer: The slot addressing the tuple

    Raises:
        ShortReadError: If the tuple, or its fixed header, runs past the end
            of the block
        StructuralInvariantError: If t_hoff lies inside the fixed header or
            past the tuple end, or the null bitmap does not fit before t_hoff
    """
    # Bounded by the block rather than lp_len while the fixed header is read;
    # an lp_len below t_hoff fails the check that follows.
    row_cursor = cursor.sub_cursor(
        line_pointer.offset, max(line_pointer.length, RowHeader.HEADER_SIZE)
    )
    header = RowHeader.decode(row_cursor)
    slot = line_pointer.index

    if header.hoff < RowHeader.HEADER_SIZE:
        raise StructuralInvariantError(
            f"slot {slot}: t_hoff {header.hoff} is inside the "
            f"{RowHeader.HEADER_SIZE}-byte tuple header"
        )
    if header.hoff > line_pointer.length:
        raise StructuralInvariantError(
            f"slot {slot}: t_hoff {header.hoff} exceeds tuple length {line_pointer.length}"
        )

    gap = header.hoff - RowHeader.HEADER_SIZE
    oid_size = OID_SIZE if header.has_oid else 0

    null_bitmap = None
    if header.has_nulls:
        bitmap_size = header.null_bitmap_size
        if bitmap_size + oid_size > gap:
            raise StructuralInvariantError(
                f"slot {slot}: null bitmap for {header.natts} attributes needs "
                f"{bitmap_size} bytes, t_hoff leaves {gap - oid_size}"
            )
        null_bitmap = row_cursor.read_bytes(bitmap_size)
    elif oid_size > gap:
        raise StructuralInvariantError(
            f"slot {slot}: t_hoff {header.hoff} leaves no room for the oid column"
        )

    oid = None
    if header.has_oid:
        row_cursor.seek(header.hoff - OID_SIZE)
        oid = row_cursor.read_u32()

    # Skip alignment padding
    row_cursor.seek(header.hoff)
    payload = row_cursor.read_bytes(line_pointer.length - header.hoff)

    return Row(
        slot=slot,
        header=header,
        null_bitmap=null_bitmap,
        payload=payload,
        oid=oid,
    )


def decode_special(
    block: bytes,
    header: PageHeader,
    endianness: Endianness,
    special_decoder: SpecialDecoder | None = None,
) -> SpecialSection:
    """Extract the bytes from pd_special to the end of the block.

    The decoder is only called for a non-empty region.
    """
    data = bytes(block[header.special :])
    if not data or special_decoder is None:
        return decode_opaque_special(data, endianness)
    return special_decoder(data, endianness)


def decode_page(
    block: bytes,
    *,
    endianness: Endianness,
    block_number: int = 0,
    special_decoder: SpecialDecoder | None = None,
) -> Page:
    """Decode one full block into a Page.

    Args:
        block: Exactly one page of bytes; its length is the page size
        endianness: Byte order of every multi-byte field
        block_number: Position of the block in its file, for error reporting
        special_decoder: Optional decoder for the special section

    Returns:
        The decoded page

    Raises:
        ShortReadError: If a read runs past the end of the block
        StructuralInvariantError: If the header or a tuple is inconsistent
    """
    cursor = ByteCursor(block, endianness)

    try:
        header = PageHeader.decode(cursor)
        validate_header(header, len(block))
        line_pointers = decode_line_pointers(cursor, header)
        rows = {
            lp.index: decode_row(cursor, lp) for lp in line_pointers if lp.is_normal
        }
        special = decode_special(block, header, endianness, special_decoder)
    except PageDecodeError as e:
        if e.block_number is None:
            e.block_number = block_number
        raise

    logger.debug(
        "page_decoded",
        block=block_number,
        line_pointers=len(line_pointers),
        rows=len(rows),
        special_size=special.size,
    )

    return Page(
        header=header,
        line_pointers=line_pointers,
        rows=rows,
        special=special,
        block_number=BlockNumber(block_number),
        page_size=len(block),
    )
