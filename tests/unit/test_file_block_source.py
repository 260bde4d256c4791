"""Unit tests for FileBlockSource."""

from __future__ import annotations

from pathlib import Path

import pytest

from pg_peek.adapters.outbound import FileBlockSource
from pg_peek.domain.errors import TruncatedPageError
from pg_peek.ports.outbound import BlockSource


class TestFileBlockSource:
    """Tests for FileBlockSource."""

    @pytest.fixture
    def relation_file(self, temp_dir: Path) -> Path:
        """Create a three-block relation file with distinct contents."""
        path = temp_dir / "16384"
        path.write_bytes(b"".join(bytes([n]) * 4096 for n in range(3)))
        return path

    @pytest.fixture
    def block_source(self, relation_file: Path) -> FileBlockSource:
        """Create a block source for testing."""
        source = FileBlockSource(relation_file, page_size=4096)
        yield source
        source.close()

    def test_satisfies_protocol(self, block_source: FileBlockSource) -> None:
        """FileBlockSource implements the BlockSource port."""
        source: BlockSource = block_source
        assert source.page_size == 4096

    def test_num_blocks(self, block_source: FileBlockSource) -> None:
        """Block count is file size / page size."""
        assert block_source.get_num_blocks() == 3

    def test_read_block(self, block_source: FileBlockSource) -> None:
        """Blocks are read at block_number * page_size."""
        for n in (2, 0, 1):
            assert block_source.read_block(n) == bytes([n]) * 4096

    def test_invalid_block_number(self, block_source: FileBlockSource) -> None:
        """Reading outside the file raises ValueError."""
        with pytest.raises(ValueError, match="Invalid block_number"):
            block_source.read_block(3)
        with pytest.raises(ValueError, match="Invalid block_number"):
            block_source.read_block(-1)

    def test_partial_trailing_block(self, temp_dir: Path) -> None:
        """A partial last block is counted but cannot be read."""
        path = temp_dir / "partial"
        path.write_bytes(bytes(4096 + 100))

        with FileBlockSource(path, page_size=4096) as source:
            assert source.get_num_blocks() == 2
            assert len(source.read_block(0)) == 4096

            with pytest.raises(TruncatedPageError) as exc_info:
                source.read_block(1)

        assert exc_info.value.size == 100
        assert exc_info.value.block_number == 1

    def test_empty_file(self, temp_dir: Path) -> None:
        """An empty file has no blocks."""
        path = temp_dir / "empty"
        path.write_bytes(b"")

        with FileBlockSource(path) as source:
            assert source.page_size == 8192
            assert source.get_num_blocks() == 0

    def test_missing_file(self, temp_dir: Path) -> None:
        """Opening a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            FileBlockSource(temp_dir / "missing")

    def test_invalid_page_size(self, relation_file: Path) -> None:
        """page_size must be positive."""
        with pytest.raises(ValueError, match="page_size must be positive"):
            FileBlockSource(relation_file, page_size=0)

    def test_read_after_close(self, relation_file: Path) -> None:
        """Reading from a closed source raises IOError."""
        source = FileBlockSource(relation_file, page_size=4096)
        source.close()
        source.close()

        with pytest.raises(IOError, match="closed"):
            source.read_block(0)
