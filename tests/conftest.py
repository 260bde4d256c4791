"""Pytest configuration and fixtures for pg_peek tests."""

from __future__ import annotations

import io
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from pg_peek.domain.entities import LinePointer, PageHeader, RowHeader
from pg_peek.domain.value_objects import (
    LSN,
    CommandId,
    Endianness,
    InfomaskFlags,
    ItemPointer,
    LinePointerStatus,
    LocationIndex,
    PageFlags,
    TransactionId,
)
from pg_peek.infrastructure.config import Config, DecoderConfig
from pg_peek.infrastructure.metrics import MetricsRegistry

MAXALIGN = 8


def maxalign(n: int) -> int:
    return (n + MAXALIGN - 1) & ~(MAXALIGN - 1)


def build_tuple(
    payload: bytes,
    *,
    endianness: Endianness = Endianness.LITTLE,
    natts: int = 1,
    null_bitmap: bytes | None = None,
    oid: int | None = None,
    hoff: int | None = None,
    xmin: int = 100,
    xmax: int = 0,
    cid: int = 0,
    ctid: ItemPointer | None = None,
    infomask: int = 0,
    state_bits: int = 0,
) -> bytes:
    """Lay out one heap tuple: header, bitmap, padding, oid, payload."""
    bitmap = null_bitmap or b""
    oid_size = 4 if oid is not None else 0
    if hoff is None:
        hoff = maxalign(RowHeader.HEADER_SIZE + len(bitmap) + oid_size)

    flags = InfomaskFlags(infomask)
    if null_bitmap is not None:
        flags |= InfomaskFlags.HASNULL
    if oid is not None:
        flags |= InfomaskFlags.HASOID_OLD

    header = RowHeader(
        xmin=TransactionId(xmin),
        xmax=TransactionId(xmax),
        cid=CommandId(cid),
        ctid=ctid or ItemPointer.new(0, 1),
        infomask2=natts | state_bits,
        infomask=flags,
        hoff=hoff,
    )

    prefix = bytearray(header.to_bytes(endianness) + bitmap)
    if len(prefix) < hoff:
        prefix.extend(b"\x00" * (hoff - len(prefix)))
    if oid is not None:
        prefix[hoff - 4 : hoff] = oid.to_bytes(4, endianness.value)
    return bytes(prefix) + payload


@dataclass
class _Slot:
    status: LinePointerStatus
    data: bytes | None = None
    offset: int = 0
    length: int = 0


class PageBuilder:
    """Assembles synthetic page images for decoder tests.

    Tuples are placed from the special section downwards, MAXALIGN'd,
    the way a heap page fills up.
    """

    def __init__(
        self,
        page_size: int = 8192,
        endianness: Endianness = Endianness.LITTLE,
        special: bytes = b"",
    ) -> None:
        self.page_size = page_size
        self.endianness = endianness
        self.special = special
        self.lsn = 0x0000000100000028
        self.checksum = 0
        self.flags = PageFlags(0)
        self.prune_xid = 0
        self._slots: list[_Slot] = []

    def add_tuple(self, payload: bytes, **tuple_fields) -> int:
        """Append a NORMAL line pointer and its tuple; returns the slot."""
        data = build_tuple(payload, endianness=self.endianness, **tuple_fields)
        self._slots.append(_Slot(LinePointerStatus.NORMAL, data=data))
        return len(self._slots) - 1

    def add_raw_tuple(self, data: bytes) -> int:
        """Append a NORMAL line pointer over arbitrary tuple bytes."""
        self._slots.append(_Slot(LinePointerStatus.NORMAL, data=data))
        return len(self._slots) - 1

    def add_line_pointer(
        self, status: LinePointerStatus, offset: int = 0, length: int = 0
    ) -> int:
        """Append a line pointer with no tuple written for it."""
        self._slots.append(_Slot(status, offset=offset, length=length))
        return len(self._slots) - 1

    def build(
        self,
        *,
        lower: int | None = None,
        upper: int | None = None,
        special: int | None = None,
    ) -> bytes:
        page = bytearray(self.page_size)
        special_offset = self.page_size - len(self.special)
        page[special_offset:] = self.special

        line_pointers = []
        free_end = special_offset
        for index, slot in enumerate(self._slots):
            if slot.data is not None:
                free_end = (free_end - len(slot.data)) & ~(MAXALIGN - 1)
                page[free_end : free_end + len(slot.data)] = slot.data
                lp = LinePointer(index, free_end, slot.status, len(slot.data))
            else:
                lp = LinePointer(index, slot.offset, slot.status, slot.length)
            line_pointers.append(lp)

        header = PageHeader(
            lsn=LSN(self.lsn),
            checksum=self.checksum,
            flags=self.flags,
            lower=LocationIndex(
                lower if lower is not None
                else PageHeader.HEADER_SIZE + LinePointer.SIZE * len(line_pointers)
            ),
            upper=LocationIndex(upper if upper is not None else free_end),
            special=LocationIndex(special if special is not None else special_offset),
            pagesize_version=(self.page_size & 0xFF00) | 4,
            prune_xid=TransactionId(self.prune_xid),
        )
        page[: PageHeader.HEADER_SIZE] = header.to_bytes(self.endianness)

        offset = PageHeader.HEADER_SIZE
        for lp in line_pointers:
            page[offset : offset + LinePointer.SIZE] = lp.to_bytes(self.endianness)
            offset += LinePointer.SIZE

        return bytes(page)


class FailingStream(io.RawIOBase):
    """Binary stream that serves ``data`` and then raises OSError."""

    def __init__(self, data: bytes) -> None:
        self._buffer = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        chunk = self._buffer.read(size)
        if not chunk:
            raise OSError("disk error")
        return chunk


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def page_builder() -> PageBuilder:
    """Little-endian 8 KB page builder."""
    return PageBuilder()


@pytest.fixture
def big_endian_page_builder() -> PageBuilder:
    """Big-endian 8 KB page builder."""
    return PageBuilder(endianness=Endianness.BIG)


@pytest.fixture
def page_builder_factory() -> type[PageBuilder]:
    """Builder class, for pages with a non-default size or byte order."""
    return PageBuilder


@pytest.fixture
def failing_stream() -> type[FailingStream]:
    """Stream class whose reads fail once its data is used up."""
    return FailingStream


@pytest.fixture
def make_tuple():
    """Expose the tuple layout helper to tests that need raw tuple bytes."""
    return build_tuple


@pytest.fixture
def test_config() -> Config:
    """Provide a little-endian configuration with the default page size."""
    return Config(decoder=DecoderConfig(page_size=8192, endianness="little"))


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
