"""
Association Models
-------------------

Links between entries and labels.

Models:
    - EntryTag: One entry linked to one Tag
    - EntryFeature: One entry linked to one AccessibilityFeature, with the
      entry-specific rating (1-5) and optional notes

An entry is referenced by the (entry_type, entry_id) pair of an EntryRef.
The pair plus the label id is unique, so an entry is linked to a label at
most once. The pair is indexed for "labels of this entry" lookups and the
label id for "entries with this label" lookups.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import Optional

# --- Third party imports ---
from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .base import Base, utc_now
from .enums import EntryType
from .labels import AccessibilityFeature, Tag
from .refs import EntryRef


class EntryRefMixin:
    """Polymorphic entry pointer stored as (entry_type, entry_id)."""

    entry_type: Mapped[EntryType] = mapped_column(
        SQLEnum(EntryType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    entry_id: Mapped[str] = mapped_column(String(32), nullable=False)

    @property
    def entry_ref(self) -> EntryRef:
        return EntryRef(self.entry_type, self.entry_id)


class EntryTag(Base, EntryRefMixin):
    """
    Link between one entry and one tag.

    Attributes:
        id: Primary key
        entry_type: Category of the linked entry
        entry_id: Id of the linked entry in its category table
        tag_id: Linked tag
        created_at: When the link was made
    """

    __tablename__ = "entry_tags"
    __table_args__ = (
        UniqueConstraint("entry_type", "entry_id", "tag_id", name="uq_entry_tag"),
        Index("ix_entry_tags_entry", "entry_type", "entry_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tag_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    tag: Mapped[Optional[Tag]] = relationship("Tag")

    @property
    def label_id(self) -> int:
        return self.tag_id

    def __repr__(self) -> str:
        return f"<EntryTag({self.entry_ref} -> tag {self.tag_id})>"


class EntryFeature(Base, EntryRefMixin):
    """
    Link between one entry and one accessibility feature.

    Attributes:
        id: Primary key
        entry_type: Category of the linked entry
        entry_id: Id of the linked entry in its category table
        feature_id: Linked feature
        rating: How well the entry provides this feature (1-5)
        notes: Optional free-text remarks
        created_at: When the link was made
    """

    __tablename__ = "entry_features"
    __table_args__ = (
        UniqueConstraint(
            "entry_type", "entry_id", "feature_id", name="uq_entry_feature"
        ),
        Index("ix_entry_features_entry", "entry_type", "entry_id"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_entry_feature_rating"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    feature_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accessibility_features.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    feature: Mapped[Optional[AccessibilityFeature]] = relationship("AccessibilityFeature")

    @property
    def label_id(self) -> int:
        return self.feature_id

    def __repr__(self) -> str:
        return (
            f"<EntryFeature({self.entry_ref} -> feature {self.feature_id}, "
            f"rating={self.rating})>"
        )
