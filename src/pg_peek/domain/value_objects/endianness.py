"""Byte order used for every multi-byte field of a page."""

from __future__ import annotations

import sys
from enum import Enum


class Endianness(Enum):
    """Byte order of the inspected files."""

    LITTLE = "little"
    BIG = "big"

    @property
    def prefix(self) -> str:
        """The matching ``struct`` format prefix."""
        return "<" if self is Endianness.LITTLE else ">"


def system_endianness() -> Endianness:
    """Return the host's native byte order."""
    return Endianness.LITTLE if sys.byteorder == "little" else Endianness.BIG


def resolve_endianness(setting: str | Endianness | None = None) -> Endianness:
    """Resolve a configured byte order.

    Args:
        setting: ``"native"`` (or None) for the host byte order, ``"little"``,
            ``"big"``, or an Endianness which is returned unchanged.

    Raises:
        ValueError: For any other string
    """
    if isinstance(setting, Endianness):
        return setting
    if setting is None or setting == "native":
        return system_endianness()
    try:
        return Endianness(setting)
    except ValueError:
        raise ValueError(
            f"Unknown endianness {setting!r} (expected 'native', 'little' or 'big')"
        ) from None
