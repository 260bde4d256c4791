"""
pg-peek - PostgreSQL page inspector

A read-only decoder for fixed-size relation pages: page headers, line
pointers, heap tuple headers, null bitmaps and special sections.
"""

__version__ = "0.1.0"
