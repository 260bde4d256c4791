"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Outbound ports: Dependencies on external systems (e.g., BlockSource)

Adapters implement these ports with concrete functionality.
"""

from pg_peek.ports.outbound import BlockSource

__all__ = [
    # Outbound ports
    "BlockSource",
]
