"""
Enumeration Types
------------------

Enum classes for the accessdb models.

Enums:
    - EntryType: The five entry categories (game, hardware, place, software, service)
    - AccessibilityType: Accessibility dimension of a tag, feature or review

These enums provide type safety and consistent categorization across the database.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import List


class EntryType(str, Enum):
    """
    Enumeration of entry categories.

    Each member names one physical entry table.
    """

    GAME = "game"
    HARDWARE = "hardware"
    PLACE = "place"
    SOFTWARE = "software"
    SERVICE = "service"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available entry type choices."""
        return [entry_type.value for entry_type in cls]

    @property
    def table_name(self) -> str:
        """Name of the table holding entries of this type."""
        table_map = {
            "game": "games",
            "hardware": "hardware",
            "place": "places",
            "software": "software",
            "service": "services",
        }
        return table_map[self.value]

    @property
    def display_name(self) -> str:
        """Get human-readable display name."""
        return self.value.title()


class AccessibilityType(str, Enum):
    """
    Enumeration of accessibility dimensions.
    - VISUAL: Blindness, low vision, colour perception
    - AUDITORY: Deafness, hard of hearing
    - MOTOR: Mobility, dexterity
    - COGNITIVE: Learning, memory, attention
    - GENERAL: Not specific to one dimension
    """

    VISUAL = "visual"
    AUDITORY = "auditory"
    MOTOR = "motor"
    COGNITIVE = "cognitive"
    GENERAL = "general"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available accessibility type choices."""
        return [access_type.value for access_type in cls]

    @property
    def display_name(self) -> str:
        """Get human-readable display name."""
        return self.value.title()
