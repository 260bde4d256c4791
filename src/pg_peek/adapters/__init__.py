"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Outbound adapters: Implement external dependencies (relation files)
"""

from pg_peek.adapters.outbound import FileBlockSource

__all__ = [
    # Outbound adapters
    "FileBlockSource",
]
