"""
Community Models
-----------------

User contributions attached to entries.

Models:
    - Comment: Free-form discussion on an entry, optionally with a photo
    - Review: A user's own 1-5 rating of an entry with a short text

Both point at their entry through an EntryRef (entry_type, entry_id) and
are owned by the user who wrote them.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import Optional

# --- Third party imports ---
from sqlalchemy import CheckConstraint, DateTime, Index, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .associations import EntryRefMixin
from .base import Base, utc_now
from .enums import AccessibilityType


class Comment(Base, EntryRefMixin):
    """
    A comment on an entry.

    Attributes:
        id: Primary key
        user_id: Author
        user_name: Author display name at the time of writing
        user_image: Author avatar URL at the time of writing
        content: Comment text (non-empty)
        photo: Optional storage handle of an attached photo
        created_at: When the comment was posted
        updated_at: When the comment was last edited (None if never)
    """

    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_entry", "entry_type", "entry_id"),
        CheckConstraint("content != ''", name="ck_comment_non_empty_content"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    user_name: Mapped[Optional[str]] = mapped_column(String(255))
    user_image: Mapped[Optional[str]] = mapped_column(String(2048))
    content: Mapped[str] = mapped_column(Text, nullable=False)
    photo: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, entry={self.entry_ref}, user={self.user_id})>"


class Review(Base, EntryRefMixin):
    """
    A user review of an entry.

    Attributes:
        id: Primary key
        user_id: Author
        rating: Reviewer's 1-5 rating
        comment: Review text
        accessibility_type: Optional dimension the review focuses on
        created_at: When the review was posted
    """

    __tablename__ = "reviews"
    __table_args__ = (
        Index("ix_reviews_entry", "entry_type", "entry_id"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    accessibility_type: Mapped[Optional[AccessibilityType]] = mapped_column(
        SQLEnum(AccessibilityType, values_callable=lambda x: [e.value for e in x]),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, entry={self.entry_ref}, rating={self.rating})>"
