"""
Value objects package for domain layer.
"""

from .entry_id import EntryId

__all__ = [
    "EntryId",
]
