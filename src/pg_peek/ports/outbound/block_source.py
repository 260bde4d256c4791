"""Block Source port for random-access block reads.

This outbound port defines the contract for fetching single fixed-size
blocks of a relation file. Sequential whole-file decoding goes through
PageStreamReader instead; a BlockSource is what a caller uses to decode
one block at a time, for instance to keep going past a damaged block.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class BlockSource(Protocol):
    """Protocol for read-only block access.

    A block source knows nothing about page contents; it only hands out
    raw bytes.
    """

    @property
    @abstractmethod
    def page_size(self) -> int:
        """Return the fixed block size in bytes (typically 8192)."""
        ...

    @abstractmethod
    def read_block(self, block_number: int) -> bytes:
        """Read one block.

        Args:
            block_number: 0-based block number.

        Returns:
            Raw block data (exactly page_size bytes).

        Raises:
            ValueError: If block_number is out of range.
            TruncatedPageError: If the block is cut short by end of file.
            IOError: If the read fails.
        """
        ...

    @abstractmethod
    def get_num_blocks(self) -> int:
        """Return the number of blocks, counting a partial trailing block."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the underlying resource.

        After calling close(), the block source should not be used.
        """
        ...
