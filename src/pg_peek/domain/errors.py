"""Errors raised while decoding pages.

All of them are fatal to the decode step that raised them; the stream
reader stops at the first one and attaches the pages it already decoded.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pg_peek.domain.entities.page import Page


class PageDecodeError(Exception):
    """Base class for page decoding failures.

    Attributes:
        block_number: Block being decoded when the error occurred, if known
        pages: Pages successfully decoded before the failure (stream reads)
    """

    kind = "decode"

    def __init__(self, message: str, *, block_number: int | None = None) -> None:
        super().__init__(message)
        self.block_number = block_number
        self.pages: list[Page] = []

    def __str__(self) -> str:
        message = super().__str__()
        if self.block_number is None:
            return message
        return f"block {self.block_number}: {message}"


class ShortReadError(PageDecodeError):
    """Fewer bytes remained than a fixed-width read required."""

    kind = "short_read"

    def __init__(
        self,
        offset: int,
        requested: int,
        available: int,
        *,
        block_number: int | None = None,
    ) -> None:
        super().__init__(
            f"short read at offset {offset}: needed {requested} bytes, {available} available",
            block_number=block_number,
        )
        self.offset = offset
        self.requested = requested
        self.available = available


class TruncatedPageError(PageDecodeError):
    """The input ended in the middle of a block."""

    kind = "truncated"

    def __init__(self, size: int, page_size: int, *, block_number: int | None = None) -> None:
        super().__init__(
            f"incomplete page: got {size} of {page_size} bytes",
            block_number=block_number,
        )
        self.size = size
        self.page_size = page_size


class StructuralInvariantError(PageDecodeError):
    """Header fields or row layout contradict each other."""

    kind = "structural"


class BlockReadError(PageDecodeError):
    """The underlying stream failed while a block was being read.

    The original OSError is chained as ``__cause__``.
    """

    kind = "io"
