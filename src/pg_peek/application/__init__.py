"""Application layer for the page inspector.

Exports:
    - PageInspector: Decodes relation files with config, metrics and tracing
"""

from pg_peek.application.page_inspector import PageInspector

__all__ = [
    "PageInspector",
]
