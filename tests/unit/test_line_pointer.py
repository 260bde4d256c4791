"""Unit tests for LinePointer bit packing."""

from __future__ import annotations

import pytest

from pg_peek.domain.entities import LinePointer
from pg_peek.domain.services import ByteCursor
from pg_peek.domain.value_objects import Endianness, LinePointerStatus


class TestLinePointer:
    """Tests for the 32-bit line pointer word."""

    def test_size(self) -> None:
        """A line pointer is one 4-byte word."""
        assert LinePointer.SIZE == 4

    @pytest.mark.parametrize(
        ("word", "status"),
        [
            (0x00401F40, LinePointerStatus.UNUSED),
            (0x00409F40, LinePointerStatus.NORMAL),
            (0x00411F40, LinePointerStatus.REDIRECT),
            (0x00419F40, LinePointerStatus.DEAD),
        ],
    )
    def test_decode_each_status(self, word: int, status: LinePointerStatus) -> None:
        """offset=8000, length=32 with each of the four status codes."""
        lp = LinePointer.from_word(word)

        assert lp.offset == 8000
        assert lp.length == 32
        assert lp.status is status
        assert lp.to_word() == word

    def test_status_spanning_halves(self) -> None:
        """0x00010002 has the status high bit in the upper 16-bit half."""
        lp = LinePointer.from_word(0x00010002)

        assert lp.offset == 2
        assert lp.status is LinePointerStatus.REDIRECT
        assert lp.length == 0

    def test_decode_reads_single_word(self) -> None:
        """Decoding reads all 4 bytes as one integer in the page byte order."""
        for endianness in (Endianness.LITTLE, Endianness.BIG):
            data = (0x00419F40).to_bytes(4, endianness.value)
            cursor = ByteCursor(data, endianness)

            lp = LinePointer.decode(cursor, index=5)
            assert lp == LinePointer(5, 8000, LinePointerStatus.DEAD, 32)
            assert cursor.position == LinePointer.SIZE

    def test_full_width_fields(self) -> None:
        """Offset and length use all 15 of their bits."""
        normal = LinePointer(0, 0x7FFF, LinePointerStatus.NORMAL, 0x7FFF)
        dead = LinePointer(0, 0x7FFF, LinePointerStatus.DEAD, 0x7FFF)

        assert normal.to_word() == 0xFFFEFFFF
        assert dead.to_word() == 0xFFFFFFFF
        assert LinePointer.from_word(0xFFFEFFFF) == normal
        assert LinePointer.from_word(0xFFFFFFFF) == dead

    def test_serialization_roundtrip(self) -> None:
        """to_bytes output decodes back to the same pointer."""
        lp = LinePointer(3, 7904, LinePointerStatus.NORMAL, 61)

        data = lp.to_bytes(Endianness.LITTLE)
        assert len(data) == LinePointer.SIZE
        assert LinePointer.decode(ByteCursor(data, Endianness.LITTLE), 3) == lp

    def test_redirect_target(self) -> None:
        """REDIRECT pointers forward to the line pointer in their offset."""
        assert LinePointer(0, 4, LinePointerStatus.REDIRECT, 0).redirect_target == 4
        assert LinePointer(0, 4, LinePointerStatus.NORMAL, 40).redirect_target is None

    def test_is_normal(self) -> None:
        """Only NORMAL pointers address stored tuples."""
        assert LinePointer(0, 8000, LinePointerStatus.NORMAL, 32).is_normal
        assert not LinePointer(0, 0, LinePointerStatus.UNUSED, 0).is_normal
        assert not LinePointer(0, 8000, LinePointerStatus.DEAD, 32).is_normal
