"""Special section: the trailing, access-method specific part of a page.

Heap pages usually have none. Index pages keep their own bookkeeping
there, in a layout only the owning access method knows. The page decoder
keeps the bytes opaque unless the caller hands it a SpecialDecoder.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar, Protocol

from pg_peek.domain.errors import StructuralInvariantError
from pg_peek.domain.value_objects import BlockNumber, BTreePageFlags, Endianness


@dataclass(frozen=True)
class SpecialSection:
    """Raw bytes from pd_special to the end of the page."""

    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_empty(self) -> bool:
        return not self.data


@dataclass(frozen=True)
class OpaqueSpecialSection(SpecialSection):
    """Special section kept as uninterpreted bytes."""


@dataclass(frozen=True)
class BTreeSpecialSection(SpecialSection):
    """B-tree page opaque data (BTPageOpaqueData).

    Layout (16 bytes):
        - btpo_prev: left sibling block, 0 if leftmost
        - btpo_next: right sibling block, 0 if rightmost
        - btpo_level: tree level, 0 for leaves
        - btpo_cycleid: vacuum cycle id of the last split
        - btpo_flags: BTreePageFlags
    """

    prev_block: BlockNumber | None
    next_block: BlockNumber | None
    level: int
    cycle_id: int
    flags: BTreePageFlags

    SIZE: ClassVar[int] = 16
    FORMAT: ClassVar[str] = "IIIHH"

    @property
    def is_leaf(self) -> bool:
        return bool(self.flags & BTreePageFlags.LEAF)

    @property
    def is_root(self) -> bool:
        return bool(self.flags & BTreePageFlags.ROOT)


class SpecialDecoder(Protocol):
    """Turns the special-section bytes of one page into a SpecialSection."""

    def __call__(self, data: bytes, endianness: Endianness) -> SpecialSection:
        ...


def decode_opaque_special(data: bytes, endianness: Endianness) -> SpecialSection:
    """Default decoder: keep the bytes as they are."""
    return OpaqueSpecialSection(data=bytes(data))


def decode_btree_special(data: bytes, endianness: Endianness) -> BTreeSpecialSection:
    """Decode a B-tree index page's special section.

    Raises:
        StructuralInvariantError: If the region is not exactly 16 bytes
    """
    if len(data) != BTreeSpecialSection.SIZE:
        raise StructuralInvariantError(
            f"B-tree special section must be {BTreeSpecialSection.SIZE} bytes, got {len(data)}"
        )

    prev_block, next_block, level, cycle_id, flags = struct.unpack(
        endianness.prefix + BTreeSpecialSection.FORMAT, data
    )

    return BTreeSpecialSection(
        data=bytes(data),
        prev_block=BlockNumber(prev_block) if prev_block else None,
        next_block=BlockNumber(next_block) if next_block else None,
        level=level,
        cycle_id=cycle_id,
        flags=BTreePageFlags.from_raw(flags),
    )
