"""Domain layer - page formats, decoders and their errors.

The most common entry points are re-exported here:

    >>> from pg_peek.domain import read_all_pages, decode_page, Endianness
"""

from pg_peek.domain.entities import (
    BTreeSpecialSection,
    LinePointer,
    Page,
    PageHeader,
    Row,
    RowHeader,
    SpecialSection,
    decode_btree_special,
)
from pg_peek.domain.errors import (
    BlockReadError,
    PageDecodeError,
    ShortReadError,
    StructuralInvariantError,
    TruncatedPageError,
)
from pg_peek.domain.services import PageStreamReader, decode_page, read_all_pages
from pg_peek.domain.value_objects import Endianness, LinePointerStatus

__all__ = [
    "Page",
    "PageHeader",
    "LinePointer",
    "Row",
    "RowHeader",
    "SpecialSection",
    "BTreeSpecialSection",
    "decode_btree_special",
    "PageDecodeError",
    "BlockReadError",
    "ShortReadError",
    "TruncatedPageError",
    "StructuralInvariantError",
    "PageStreamReader",
    "decode_page",
    "read_all_pages",
    "Endianness",
    "LinePointerStatus",
]
