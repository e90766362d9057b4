#!/usr/bin/env python3
"""
completeness.py
--------------------
Decides whether an entry has enough information to be marked complete.

An entry is complete when every common field is filled in, it has at
least one photo, and the fields its category requires are filled in:

    common      name, description, overall rating, visual / auditory /
                motor / cognitive ratings, website
    game        platforms
    software    platforms
    hardware    manufacturer, model, product type
    place       location address, location city, place type
    service     service type, provider

"Filled in" means: lists are non-empty, numbers are not None (0 counts),
strings are non-empty after trimming.

Tags and accessibility features live in their own association tables and
are not part of this check.

The EntryManager persists the result as `complete` on every create and
update. Readers must treat the stored value as canonical.

Usage:
    from accessdb.database.completeness import is_entry_complete

    is_entry_complete(game, "game")
    is_entry_complete({"name": "Celeste", ...}, EntryType.GAME)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Mapping, Sequence, Union

# --- Local imports ---
from .models.enums import EntryType

COMMON_REQUIRED_FIELDS: List[str] = [
    "name",
    "description",
    "overall_rating",
    "visual_accessibility",
    "auditory_accessibility",
    "motor_accessibility",
    "cognitive_accessibility",
    "website",
]

CATEGORY_REQUIRED_FIELDS: Dict[EntryType, List[str]] = {
    EntryType.GAME: ["platforms"],
    EntryType.SOFTWARE: ["platforms"],
    EntryType.HARDWARE: ["manufacturer", "model", "product_type"],
    EntryType.PLACE: ["location.address", "location.city", "place_type"],
    EntryType.SERVICE: ["service_type", "provider"],
}

# Client payloads use camelCase keys
_CAMEL_ALIASES: Dict[str, str] = {
    "overall_rating": "overallRating",
    "visual_accessibility": "visualAccessibility",
    "auditory_accessibility": "auditoryAccessibility",
    "motor_accessibility": "motorAccessibility",
    "cognitive_accessibility": "cognitiveAccessibility",
    "product_type": "productType",
    "place_type": "placeType",
    "service_type": "serviceType",
}

_MISSING = object()


def _lookup(source: Any, key: str) -> Any:
    """Read one key from a mapping or attribute from an object."""
    if source is None:
        return None
    if isinstance(source, Mapping):
        value = source.get(key, _MISSING)
        if value is _MISSING and key in _CAMEL_ALIASES:
            value = source.get(_CAMEL_ALIASES[key], _MISSING)
        return None if value is _MISSING else value
    return getattr(source, key, None)


def get_field(entry: Any, path: str) -> Any:
    """
    Resolve a dotted field path on an entry.

    Args:
        entry: Mapping or model instance
        path: Field name, optionally dotted ("location.city")

    Returns:
        Field value, or None if any step is missing
    """
    value = entry
    for key in path.split("."):
        value = _lookup(value, key)
        if value is None:
            return None
    return value


def is_filled(value: Any) -> bool:
    """
    Check whether a single field value counts as present.

    Examples:
        >>> is_filled([])
        False
        >>> is_filled(0)
        True
        >>> is_filled("   ")
        False
    """
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set)):
        return len(value) > 0
    return True


def missing_fields(
    entry: Union[Mapping[str, Any], Any], category: Union[EntryType, str]
) -> List[str]:
    """
    List the required fields an entry lacks.

    Args:
        entry: Mapping or model instance
        category: Entry category

    Returns:
        Names of the missing fields ("photos" included when no photo is set)
    """
    entry_type = EntryType(category)
    required: Sequence[str] = COMMON_REQUIRED_FIELDS + CATEGORY_REQUIRED_FIELDS.get(
        entry_type, []
    )

    missing = [path for path in required if not is_filled(get_field(entry, path))]
    if not is_filled(get_field(entry, "photos")):
        missing.append("photos")
    return missing


def is_entry_complete(
    entry: Union[Mapping[str, Any], Any], category: Union[EntryType, str]
) -> bool:
    """
    Decide whether an entry is complete.

    Args:
        entry: Mapping (snake_case or camelCase keys) or model instance
        category: Entry category

    Returns:
        True if every required field and at least one photo are present
    """
    return not missing_fields(entry, category)
