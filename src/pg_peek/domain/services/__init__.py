"""Domain services - the page decoding pipeline.

Exports:
    - ByteCursor: Fixed-width integer reads under a given byte order
    - decode_page, decode_line_pointers, decode_row, decode_special,
      validate_header: Per-block decoding
    - PageStreamReader, ReaderState, read_all_pages: Block-by-block stream decoding
"""

from pg_peek.domain.services.byte_cursor import ByteCursor
from pg_peek.domain.services.page_decoder import (
    decode_line_pointers,
    decode_page,
    decode_row,
    decode_special,
    validate_header,
)
from pg_peek.domain.services.page_stream_reader import (
    PageStreamReader,
    ReaderState,
    read_all_pages,
)

__all__ = [
    "ByteCursor",
    "decode_page",
    "decode_line_pointers",
    "decode_row",
    "decode_special",
    "validate_header",
    "PageStreamReader",
    "ReaderState",
    "read_all_pages",
]
