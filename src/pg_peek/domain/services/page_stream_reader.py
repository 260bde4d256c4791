"""Sequential page extraction from a byte stream.

The reader is a two-state machine:

    READING --(full block)--> decode, stay READING
    READING --(0 bytes)-----> DONE
    READING --(short block or decode error)--> DONE, error raised

No state is carried from one page to the next.
"""

from __future__ import annotations

from enum import Enum
from typing import BinaryIO, Iterator

import structlog

from pg_peek.domain.entities import DEFAULT_PAGE_SIZE, Page, SpecialDecoder
from pg_peek.domain.errors import BlockReadError, PageDecodeError, TruncatedPageError
from pg_peek.domain.services.page_decoder import decode_page
from pg_peek.domain.value_objects import Endianness, resolve_endianness

logger = structlog.get_logger(__name__)


class ReaderState(Enum):
    """Lifecycle of a PageStreamReader."""

    READING = "reading"
    DONE = "done"


class PageStreamReader:
    """Reads and decodes consecutive fixed-size blocks.

    Iterating yields pages lazily. read_all() collects them and, on the
    first fatal error, raises it with ``error.pages`` holding the pages
    decoded before it.

    Thread Safety:
        This class is NOT thread-safe; it advances the underlying stream.

    Example:
        >>> with open("base/5/16384", "rb") as f:
        ...     pages = PageStreamReader(f).read_all()
        >>> len(pages[0].line_pointers)
        61
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        endianness: str | Endianness | None = None,
        special_decoder: SpecialDecoder | None = None,
    ) -> None:
        """Initialize the reader.

        Args:
            stream: Binary stream positioned at the first block
            page_size: Block size in bytes (default 8192)
            endianness: Byte order; None or "native" for the host's
            special_decoder: Optional decoder for special sections
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")

        self._stream = stream
        self._page_size = page_size
        self._endianness = resolve_endianness(endianness)
        self._special_decoder = special_decoder
        self._state = ReaderState.READING
        self._block_number = 0
        self._bytes_read = 0

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def endianness(self) -> Endianness:
        return self._endianness

    @property
    def block_number(self) -> int:
        """Number of the next block to be read."""
        return self._block_number

    @property
    def bytes_read(self) -> int:
        return self._bytes_read

    def read_block(self) -> bytes:
        """Read up to one page of bytes.

        Keeps reading until a full page is collected or the stream ends,
        so short reads from pipes or sockets do not split a block.

        Raises:
            BlockReadError: If the stream raises OSError
        """
        chunks: list[bytes] = []
        remaining = self._page_size

        while remaining:
            try:
                chunk = self._stream.read(remaining)
            except OSError as e:
                self._bytes_read += self._page_size - remaining
                raise BlockReadError(
                    f"read failed after {self._page_size - remaining} bytes: {e}",
                    block_number=self._block_number,
                ) from e
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)

        block = b"".join(chunks)
        self._bytes_read += len(block)
        return block

    def read_page(self) -> Page | None:
        """Decode the next block.

        Returns:
            The next page, or None once the stream is exhausted

        Raises:
            BlockReadError: If the stream fails
            TruncatedPageError: If the stream ends inside a block
            ShortReadError: If a read runs past the end of the block
            StructuralInvariantError: If the block is inconsistent
        """
        if self._state is ReaderState.DONE:
            return None

        try:
            block = self.read_block()
            if not block:
                self._state = ReaderState.DONE
                return None
            if len(block) < self._page_size:
                raise TruncatedPageError(
                    len(block), self._page_size, block_number=self._block_number
                )

            page = decode_page(
                block,
                endianness=self._endianness,
                block_number=self._block_number,
                special_decoder=self._special_decoder,
            )
        except Exception:
            self._state = ReaderState.DONE
            raise

        self._block_number += 1
        return page

    def __iter__(self) -> Iterator[Page]:
        while (page := self.read_page()) is not None:
            yield page

    def read_all(self) -> list[Page]:
        """Decode every remaining block.

        Raises:
            PageDecodeError: The first fatal error, with ``pages`` set to
                the pages decoded before it
        """
        pages: list[Page] = []
        try:
            for page in self:
                pages.append(page)
        except PageDecodeError as e:
            e.pages = pages
            logger.warning(
                "page_stream_failed",
                block=e.block_number,
                kind=e.kind,
                error=str(e),
                pages_decoded=len(pages),
            )
            raise

        logger.debug("page_stream_done", pages=len(pages), bytes_read=self._bytes_read)
        return pages


def read_all_pages(
    stream: BinaryIO,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    endianness: str | Endianness | None = None,
    special_decoder: SpecialDecoder | None = None,
) -> list[Page]:
    """Decode every block of ``stream``; see PageStreamReader.read_all."""
    reader = PageStreamReader(
        stream,
        page_size=page_size,
        endianness=endianness,
        special_decoder=special_decoder,
    )
    return reader.read_all()
