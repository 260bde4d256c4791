"""Bit-flag sets stored in page, line pointer and tuple headers.

Every decoder masks raw words down to the bits named here. Bits a newer
on-disk format may add are dropped, never rejected.
"""

from __future__ import annotations

from enum import IntEnum, IntFlag


class PageFlags(IntFlag):
    """pd_flags bits of the page header."""

    HAS_FREE_LINES = 0x0001
    PAGE_FULL = 0x0002
    ALL_VISIBLE = 0x0004

    @classmethod
    def from_raw(cls, raw: int) -> PageFlags:
        """Keep only the known bits of a raw flag word."""
        return cls(raw & PAGE_FLAGS_MASK)


PAGE_FLAGS_MASK = 0x0007


class LinePointerStatus(IntEnum):
    """2-bit line pointer state (lp_flags)."""

    UNUSED = 0
    NORMAL = 1
    REDIRECT = 2
    DEAD = 3


class InfomaskFlags(IntFlag):
    """t_infomask: null/varwidth layout bits plus visibility and lock hints."""

    HASNULL = 0x0001
    HASVARWIDTH = 0x0002
    HASEXTERNAL = 0x0004
    HASOID_OLD = 0x0008
    XMAX_KEYSHR_LOCK = 0x0010
    COMBOCID = 0x0020
    XMAX_EXCL_LOCK = 0x0040
    XMAX_LOCK_ONLY = 0x0080
    XMAX_SHR_LOCK = 0x0050
    LOCK_MASK = 0x0050
    XMIN_COMMITTED = 0x0100
    XMIN_INVALID = 0x0200
    XMIN_FROZEN = 0x0300
    XMAX_COMMITTED = 0x0400
    XMAX_INVALID = 0x0800
    XMAX_IS_MULTI = 0x1000
    UPDATED = 0x2000
    MOVED_OFF = 0x4000
    MOVED_IN = 0x8000
    MOVED = 0xC000
    XACT_MASK = 0xFFF0


class TupleStateFlags(IntFlag):
    """High bits of t_infomask2; the low 11 bits hold the attribute count."""

    KEYS_UPDATED = 0x2000
    HOT_UPDATED = 0x4000
    ONLY_TUPLE = 0x8000
    XACT_MASK = 0xE000

    @classmethod
    def from_raw(cls, raw: int) -> TupleStateFlags:
        """Keep only the tuple-state bits of a raw t_infomask2 word."""
        return cls(raw & cls.XACT_MASK)


NATTS_MASK = 0x07FF


class BTreePageFlags(IntFlag):
    """btpo_flags of a B-tree page's special section."""

    LEAF = 0x0001
    ROOT = 0x0002
    DELETED = 0x0004
    META = 0x0008
    HALF_DEAD = 0x0010
    SPLIT_END = 0x0020
    HAS_GARBAGE = 0x0040
    INCOMPLETE_SPLIT = 0x0080
    HAS_FULLXID = 0x0100

    @classmethod
    def from_raw(cls, raw: int) -> BTreePageFlags:
        """Keep only the known bits of a raw btpo_flags word."""
        return cls(raw & 0x01FF)
