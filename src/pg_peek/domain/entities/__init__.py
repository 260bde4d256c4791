"""Domain entities for the page inspector.

Exports:
    Page:
        - PageHeader: 24-byte page header
        - LinePointer: 4-byte slot directory entry
        - Page: Fully decoded block
        - DEFAULT_PAGE_SIZE: 8192

    Heap tuples:
        - RowHeader: 23-byte tuple header with visibility metadata
        - Row: Tuple header, null bitmap and raw payload

    Special sections:
        - SpecialSection, OpaqueSpecialSection, BTreeSpecialSection
        - SpecialDecoder: Pluggable decoder protocol
        - decode_opaque_special, decode_btree_special
"""

from pg_peek.domain.entities.heap_tuple import Row, RowHeader
from pg_peek.domain.entities.page import DEFAULT_PAGE_SIZE, LinePointer, Page, PageHeader
from pg_peek.domain.entities.special import (
    BTreeSpecialSection,
    OpaqueSpecialSection,
    SpecialDecoder,
    SpecialSection,
    decode_btree_special,
    decode_opaque_special,
)

__all__ = [
    # Page
    "PageHeader",
    "LinePointer",
    "Page",
    "DEFAULT_PAGE_SIZE",
    # Heap tuples
    "RowHeader",
    "Row",
    # Special sections
    "SpecialSection",
    "OpaqueSpecialSection",
    "BTreeSpecialSection",
    "SpecialDecoder",
    "decode_opaque_special",
    "decode_btree_special",
]
