"""
Label Models
-------------

Reusable, globally shared labels attached to entries.

Models:
    - Tag: Free keyword label (e.g. "one-handed", "subtitles")
    - AccessibilityFeature: Concrete accessibility capability that entries
      rate individually (e.g. "screen-reader-support")

Both carry a slug derived from the name (unique, the deduplication key),
an accessibility dimension and a usage_count that mirrors the number of
live association rows pointing at the label.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import Any, Dict, Optional

# --- Third party imports ---
from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .base import Base, utc_now
from .enums import AccessibilityType


class LabelMixin:
    """
    Columns shared by tags and features.

    Attributes:
        id: Primary key
        name: Display name (trimmed)
        slug: slugify(name), unique
        description: Optional explanation
        accessibility_type: Accessibility dimension
        usage_count: Number of live association rows referencing this label
        created_at: Creation timestamp
    """

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    accessibility_type: Mapped[AccessibilityType] = mapped_column(
        SQLEnum(AccessibilityType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    usage_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "accessibility_type": self.accessibility_type.value,
            "usage_count": self.usage_count,
        }

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__}(id={self.id}, slug={self.slug!r}, "
            f"usage_count={self.usage_count})>"
        )


class Tag(Base, LabelMixin):
    """Keyword label linked to entries through EntryTag."""

    __tablename__ = "tags"
    __table_args__ = (
        CheckConstraint("usage_count >= 0", name="ck_tag_usage_count_non_negative"),
        CheckConstraint("slug != ''", name="ck_tag_non_empty_slug"),
    )


class AccessibilityFeature(Base, LabelMixin):
    """Accessibility capability linked to entries through EntryFeature."""

    __tablename__ = "accessibility_features"
    __table_args__ = (
        CheckConstraint("usage_count >= 0", name="ck_feature_usage_count_non_negative"),
        CheckConstraint("slug != ''", name="ck_feature_non_empty_slug"),
    )
