"""Page Inspector - entry point for decoding relation files.

This module provides the PageInspector class that ties the decoding
pipeline to configuration, structured logging, metrics and tracing.

Usage:
    from pg_peek.application import PageInspector

    inspector = PageInspector()
    pages = inspector.inspect_file("base/5/16384")
    page = inspector.inspect_block("base/5/16384", 3)
"""

from __future__ import annotations

import io
import time
from pathlib import Path
from typing import BinaryIO

from pg_peek.adapters.outbound.file_block_source import FileBlockSource
from pg_peek.domain.entities import Page, SpecialDecoder
from pg_peek.domain.errors import PageDecodeError
from pg_peek.domain.services import PageStreamReader, decode_page
from pg_peek.domain.value_objects import Endianness, LinePointerStatus, resolve_endianness
from pg_peek.infrastructure.config import Config, get_config
from pg_peek.infrastructure.logging import get_logger
from pg_peek.infrastructure.metrics import MetricsRegistry, get_metrics
from pg_peek.infrastructure.tracing import trace_span


class PageInspector:
    """Decodes whole relation files or single blocks.

    Features:
        - Whole-file decoding through PageStreamReader (fail-fast)
        - Single-block decoding through FileBlockSource, for callers that
          want to isolate damaged blocks
        - Metrics per decoded page and per fatal error

    Thread Safety:
        inspect_block() may be called from several threads; each call
        opens its own file handle.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        metrics: MetricsRegistry | None = None,
        special_decoder: SpecialDecoder | None = None,
    ) -> None:
        """Initialize the inspector.

        Args:
            config: Configuration; defaults to get_config().
            metrics: Metrics registry; defaults to the global one.
            special_decoder: Optional decoder for special sections.
        """
        self._config = config or get_config()
        self._metrics = metrics or get_metrics()
        self._special_decoder = special_decoder
        self._endianness = resolve_endianness(self._config.decoder.endianness)
        self._logger = get_logger(
            __name__, page_size=self.page_size, endianness=self._endianness
        )

    @property
    def page_size(self) -> int:
        return self._config.decoder.page_size

    @property
    def endianness(self) -> Endianness:
        return self._endianness

    def inspect_stream(self, stream: BinaryIO, *, source: str = "<stream>") -> list[Page]:
        """Decode every block of an open binary stream.

        Raises:
            PageDecodeError: The first fatal error, with ``pages`` holding
                the pages decoded before it.
        """
        reader = PageStreamReader(
            stream,
            page_size=self.page_size,
            endianness=self._endianness,
            special_decoder=self._special_decoder,
        )
        pages: list[Page] = []

        span_attributes = {
            "source": source,
            "page_size": self.page_size,
            "endianness": self._endianness,
        }
        with trace_span("pg_peek.inspect", span_attributes) as span:
            try:
                while True:
                    started = time.perf_counter()
                    page = reader.read_page()
                    if page is None:
                        break
                    self._metrics.page_decode_latency_seconds.observe(
                        time.perf_counter() - started
                    )
                    self._record_page(page)
                    pages.append(page)
            except PageDecodeError as e:
                e.pages = pages
                self._metrics.decode_errors_total.labels(kind=e.kind).inc()
                self._logger.error(
                    "inspect_failed",
                    source=source,
                    block=e.block_number,
                    kind=e.kind,
                    error=str(e),
                    pages_decoded=len(pages),
                )
                span.set_attribute("error.kind", e.kind)
                raise
            finally:
                self._metrics.bytes_read_total.inc(reader.bytes_read)

            span.set_attribute("pages", len(pages))

        self._logger.info("inspect_done", source=source, pages=len(pages))
        return pages

    def inspect_file(self, path: str | Path) -> list[Page]:
        """Decode every block of a relation file."""
        with open(path, "rb") as f:
            return self.inspect_stream(f, source=str(path))

    def inspect_bytes(self, data: bytes) -> list[Page]:
        """Decode every block of an in-memory image."""
        return self.inspect_stream(io.BytesIO(data), source="<bytes>")

    def inspect_block(self, path: str | Path, block_number: int) -> Page:
        """Decode a single block of a relation file.

        Raises:
            ValueError: If block_number is out of range.
            PageDecodeError: If the block cannot be decoded.
        """
        with FileBlockSource(path, page_size=self.page_size) as source:
            try:
                block = source.read_block(block_number)
                self._metrics.bytes_read_total.inc(len(block))
                started = time.perf_counter()
                page = decode_page(
                    block,
                    endianness=self._endianness,
                    block_number=block_number,
                    special_decoder=self._special_decoder,
                )
            except PageDecodeError as e:
                self._metrics.decode_errors_total.labels(kind=e.kind).inc()
                self._logger.error(
                    "inspect_block_failed",
                    source=str(path),
                    block=block_number,
                    kind=e.kind,
                    error=str(e),
                )
                raise

        self._metrics.page_decode_latency_seconds.observe(time.perf_counter() - started)
        self._record_page(page)
        return page

    def _record_page(self, page: Page) -> None:
        self._metrics.pages_decoded_total.inc()
        self._metrics.rows_decoded_total.inc(page.row_count)
        for status, count in page.status_counts().items():
            if count:
                self._metrics.line_pointers_total.labels(status=status.name.lower()).inc(count)

    def summarize(self, pages: list[Page]) -> dict[str, int]:
        """Aggregate counts over decoded pages."""
        summary = {
            "pages": len(pages),
            "rows": sum(page.row_count for page in pages),
            "free_bytes": sum(page.header.free_space for page in pages),
        }
        for status in LinePointerStatus:
            summary[f"line_pointers_{status.name.lower()}"] = sum(
                page.status_counts()[status] for page in pages
            )
        return summary
