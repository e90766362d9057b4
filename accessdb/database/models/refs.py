"""
Entry References
----------------

Polymorphic pointer to one entry in any of the five entry tables.

An EntryRef pairs the category with the id of a row in that category's
table. Association, comment and review rows store it as two columns
(entry_type, entry_id), so every lookup is a plain equality match on an
indexed pair.

Usage:
    ref = EntryRef.of("game", game.id)
    ref = EntryRef.for_entry(game)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import Any, Union

# --- Local imports ---
from accessdb.core.exceptions import ValidationError
from accessdb.core.validators import DataValidator
from .enums import EntryType


@dataclass(frozen=True)
class EntryRef:
    """
    Reference to one entry of a specific category.

    Attributes:
        entry_type: Category of the entry
        entry_id: Primary key of the entry within its category table
    """

    entry_type: EntryType
    entry_id: str

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "entry_type", DataValidator.validate_choice(self.entry_type, EntryType)
        )
        entry_id = DataValidator.normalize_string(self.entry_id)
        if not entry_id:
            raise ValidationError("Entry id cannot be empty")
        object.__setattr__(self, "entry_id", entry_id)

    @classmethod
    def of(cls, entry_type: Union[EntryType, str], entry_id: str) -> "EntryRef":
        """Build a reference from a category literal and an id."""
        return cls(entry_type, entry_id)  # type: ignore[arg-type]

    @classmethod
    def for_entry(cls, entry: Any) -> "EntryRef":
        """Build a reference from a persisted entry model instance."""
        return cls(entry.category, entry.id)

    @classmethod
    def coerce(cls, value: Union["EntryRef", tuple]) -> "EntryRef":
        """Accept an EntryRef or an (entry_type, entry_id) tuple."""
        if isinstance(value, cls):
            return value
        if isinstance(value, tuple) and len(value) == 2:
            return cls(*value)
        raise ValidationError(f"Expected EntryRef or (entry_type, entry_id), got {value!r}")

    def __str__(self) -> str:
        return f"{self.entry_type.value}:{self.entry_id}"
