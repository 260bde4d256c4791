"""File-based Block Source implementation.

This adapter implements the BlockSource protocol over a relation file
opened read-only. Block N lives at byte offset N * page_size.

Thread Safety:
    Reads are serialized with a lock, so one instance may be shared by
    threads that each decode the blocks they fetch.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import BinaryIO

from pg_peek.domain.entities import DEFAULT_PAGE_SIZE
from pg_peek.domain.errors import TruncatedPageError


class FileBlockSource:
    """File-based implementation of the BlockSource protocol.

    Attributes:
        file_path: Path to the relation file.
        page_size: Size of each block in bytes.
    """

    def __init__(
        self,
        file_path: str | Path,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Open the file.

        Args:
            file_path: Path to the relation file.
            page_size: Size of each block (default 8192).

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        self._lock = threading.Lock()
        self._closed = False
        self._file: BinaryIO | None = None

        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")

        self._file_path = Path(file_path)
        self._page_size = page_size
        self._file = open(self._file_path, "rb")
        self._file_size = os.fstat(self._file.fileno()).st_size

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def page_size(self) -> int:
        """Return the fixed block size in bytes."""
        return self._page_size

    def read_block(self, block_number: int) -> bytes:
        """Read one block.

        Args:
            block_number: 0-based block number.

        Returns:
            Raw block data (exactly page_size bytes).

        Raises:
            ValueError: If block_number is invalid.
            TruncatedPageError: If the file ends inside the block.
            IOError: If the source is closed.
        """
        if self._closed or self._file is None:
            raise IOError("Block source is closed")

        num_blocks = self.get_num_blocks()
        if block_number < 0 or block_number >= num_blocks:
            raise ValueError(f"Invalid block_number: {block_number} (max: {num_blocks - 1})")

        offset = block_number * self._page_size

        with self._lock:
            self._file.seek(offset)
            data = self._file.read(self._page_size)

        if len(data) != self._page_size:
            raise TruncatedPageError(len(data), self._page_size, block_number=block_number)

        return data

    def get_num_blocks(self) -> int:
        """Return the number of blocks, counting a partial trailing block."""
        return -(-self._file_size // self._page_size)

    def close(self) -> None:
        """Close the file."""
        if self._closed:
            return

        with self._lock:
            self._closed = True
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self) -> FileBlockSource:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def __del__(self) -> None:
        """Destructor - ensure file is closed."""
        self.close()
