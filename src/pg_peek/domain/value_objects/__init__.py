"""Value objects for the page inspector domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    Identifiers:
        - LSN, TransactionId, CommandId, LocationIndex: raw header integers
        - BlockNumber, OffsetNumber, ItemPointer: tuple addressing
        - INVALID_TXN_ID, INVALID_BLOCK_NUMBER: Sentinel values

    Byte order:
        - Endianness, system_endianness, resolve_endianness

    Flags:
        - PageFlags, LinePointerStatus, InfomaskFlags, TupleStateFlags,
          BTreePageFlags, NATTS_MASK
"""

from pg_peek.domain.value_objects.endianness import (
    Endianness,
    resolve_endianness,
    system_endianness,
)
from pg_peek.domain.value_objects.flags import (
    NATTS_MASK,
    BTreePageFlags,
    InfomaskFlags,
    LinePointerStatus,
    PageFlags,
    TupleStateFlags,
)
from pg_peek.domain.value_objects.identifiers import (
    INVALID_BLOCK_NUMBER,
    INVALID_TXN_ID,
    LSN,
    BlockNumber,
    CommandId,
    ItemPointer,
    LocationIndex,
    OffsetNumber,
    TransactionId,
)

__all__ = [
    # Identifiers
    "LSN",
    "TransactionId",
    "CommandId",
    "LocationIndex",
    "BlockNumber",
    "OffsetNumber",
    "ItemPointer",
    "INVALID_TXN_ID",
    "INVALID_BLOCK_NUMBER",
    # Byte order
    "Endianness",
    "system_endianness",
    "resolve_endianness",
    # Flags
    "PageFlags",
    "LinePointerStatus",
    "InfomaskFlags",
    "TupleStateFlags",
    "BTreePageFlags",
    "NATTS_MASK",
]
