"""
Database Models Package
------------------------

SQLAlchemy ORM models for the accessdb database.

This package provides a modular organization of database models:
- base: Base class and timestamp mixin
- enums: EntryType and AccessibilityType
- refs: EntryRef, the polymorphic entry pointer
- entries: Game, Hardware, Place, Software, Service
- labels: Tag, AccessibilityFeature
- associations: EntryTag, EntryFeature
- community: Comment, Review

Usage:
    from accessdb.database.models import Game, Tag, EntryRef
"""
# Base classes
from .base import Base, TimestampMixin

# Enumerations
from .enums import AccessibilityType, EntryType

# Entry pointer
from .refs import EntryRef

# Entries
from .entries import (
    ENTRY_MODELS,
    EntryMixin,
    Game,
    Hardware,
    Place,
    Service,
    Software,
    model_for,
)

# Labels
from .labels import AccessibilityFeature, LabelMixin, Tag

# Associations
from .associations import EntryFeature, EntryRefMixin, EntryTag

# Community
from .community import Comment, Review

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Enums
    "AccessibilityType",
    "EntryType",
    # Refs
    "EntryRef",
    # Entries
    "ENTRY_MODELS",
    "EntryMixin",
    "Game",
    "Hardware",
    "Place",
    "Service",
    "Software",
    "model_for",
    # Labels
    "AccessibilityFeature",
    "LabelMixin",
    "Tag",
    # Associations
    "EntryFeature",
    "EntryRefMixin",
    "EntryTag",
    # Community
    "Comment",
    "Review",
]
