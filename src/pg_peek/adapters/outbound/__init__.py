"""Outbound adapters - implementations of outbound ports."""

from pg_peek.adapters.outbound.file_block_source import FileBlockSource

__all__ = [
    "FileBlockSource",
]
