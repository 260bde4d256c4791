"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the systems the inspector reads
from, such as relation files on disk.
"""

from pg_peek.ports.outbound.block_source import BlockSource

__all__ = [
    "BlockSource",
]
