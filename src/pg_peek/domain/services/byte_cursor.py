"""Fixed-width reads over an in-memory block.

ByteCursor is the only place that turns page bytes into integers; every
header, line pointer and tuple decoder goes through it so that byte order
and short-read handling live in one spot.
"""

from __future__ import annotations

import struct

from pg_peek.domain.errors import ShortReadError
from pg_peek.domain.value_objects import Endianness


class ByteCursor:
    """Forward-reading cursor over a bytes-like buffer.

    Positions are relative to the buffer; ``base_offset`` is added when
    reporting errors so that a sub-cursor over one tuple still reports
    offsets within the page.

    Example:
        >>> cursor = ByteCursor(b"\\x01\\x00\\x02\\x00", Endianness.LITTLE)
        >>> cursor.read_u16(), cursor.read_u16()
        (1, 2)
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        endianness: Endianness,
        *,
        base_offset: int = 0,
    ) -> None:
        self._data = memoryview(data)
        self._endianness = endianness
        self._base_offset = base_offset
        self._pos = 0
        self._u16 = struct.Struct(f"{endianness.prefix}H")
        self._u32 = struct.Struct(f"{endianness.prefix}I")
        self._u64 = struct.Struct(f"{endianness.prefix}Q")

    @property
    def endianness(self) -> Endianness:
        return self._endianness

    @property
    def position(self) -> int:
        """Current read position within this cursor's buffer."""
        return self._pos

    @property
    def remaining(self) -> int:
        """Bytes left before the end of the buffer."""
        return len(self._data) - self._pos

    def __len__(self) -> int:
        return len(self._data)

    def _take(self, size: int) -> memoryview:
        if size < 0:
            raise ValueError(f"Read size must be non-negative, got {size}")
        if size > self.remaining:
            raise ShortReadError(self._base_offset + self._pos, size, self.remaining)
        chunk = self._data[self._pos : self._pos + size]
        self._pos += size
        return chunk

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u16(self) -> int:
        return self._u16.unpack(self._take(2))[0]

    def read_u32(self) -> int:
        return self._u32.unpack(self._take(4))[0]

    def read_u64(self) -> int:
        return self._u64.unpack(self._take(8))[0]

    def read_bytes(self, size: int) -> bytes:
        """Read ``size`` raw bytes."""
        return bytes(self._take(size))

    def skip(self, size: int) -> None:
        """Advance past ``size`` bytes without decoding them."""
        self._take(size)

    def seek(self, position: int) -> None:
        """Move to an absolute position within this cursor's buffer."""
        if position < 0 or position > len(self._data):
            raise ValueError(f"Position {position} outside buffer of {len(self._data)} bytes")
        self._pos = position

    def sub_cursor(self, offset: int, length: int) -> ByteCursor:
        """Return a cursor limited to ``length`` bytes starting at ``offset``.

        Raises:
            ShortReadError: If the range runs past the end of the buffer
        """
        available = max(0, len(self._data) - offset)
        if offset < 0 or length > available:
            raise ShortReadError(self._base_offset + offset, length, available)
        return ByteCursor(
            self._data[offset : offset + length],
            self._endianness,
            base_offset=self._base_offset + offset,
        )
