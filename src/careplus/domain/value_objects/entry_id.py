"""
Queue entry ID value object for type-safe entry identification.
Format: 32 lowercase hex characters
"""

import re
import uuid
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EntryId:
    """Immutable queue entry identifier value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate entry ID format."""
        if not self.value:
            raise ValueError("Entry ID cannot be empty")

        if not isinstance(self.value, str):
            raise ValueError("Entry ID must be a string")

        if not re.match(r"^[0-9a-f]{32}$", self.value):
            raise ValueError("Entry ID must be 32 lowercase hex characters")

    def __str__(self) -> str:
        """String representation."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if not isinstance(other, EntryId):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        """Hash for use in sets and dictionaries."""
        return hash(self.value)

    @classmethod
    def generate(cls) -> "EntryId":
        """Generate a new entry ID."""
        return cls(uuid.uuid4().hex)
