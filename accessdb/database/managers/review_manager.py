#!/usr/bin/env python3
"""
review_manager.py
--------------------
Manages user reviews of entries: a personal 1-5 rating, a short text and
optionally the accessibility dimension the review is about.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import List, Optional, Union

# --- Third party imports ---
from sqlalchemy import select

# --- Local imports ---
from accessdb.core.exceptions import NotFoundError
from accessdb.core.validators import DataValidator
from accessdb.database.decorators import DatabaseOperation, handle_db_errors
from accessdb.database.models import AccessibilityType, EntryRef, Review, model_for
from .association_manager import RefLike
from .base_manager import BaseManager


class ReviewManager(BaseManager):
    """Add, delete and list reviews."""

    def add(
        self,
        ref: RefLike,
        user_id: Optional[str],
        rating: int,
        comment: str = "",
        accessibility_type: Optional[Union[AccessibilityType, str]] = None,
    ) -> Review:
        """
        Post a review of an entry.

        Raises:
            NotAuthenticatedError: If user_id is missing
            ValidationError: If rating or accessibility_type is invalid
            NotFoundError: If the entry does not exist
        """
        user_id = self._require_user(user_id, "add a review")
        rating = DataValidator.validate_rating(rating)
        access_type = (
            DataValidator.validate_choice(accessibility_type, AccessibilityType)
            if accessibility_type is not None
            else None
        )
        entry_ref = EntryRef.coerce(ref)

        with DatabaseOperation(
            self.logger, "add_review", context={"entry": str(entry_ref)}
        ):
            if self.session.get(model_for(entry_ref.entry_type), entry_ref.entry_id) is None:
                raise NotFoundError(f"{entry_ref.entry_type.display_name} not found")

            review = Review(
                entry_type=entry_ref.entry_type,
                entry_id=entry_ref.entry_id,
                user_id=user_id,
                rating=rating,
                comment=DataValidator.normalize_string(comment) or "",
                accessibility_type=access_type,
            )
            self.session.add(review)
            self.session.flush()
            return review

    def delete(self, review_id: int, user_id: Optional[str]) -> None:
        """
        Delete a review.

        Raises:
            NotAuthenticatedError: If user_id is missing
            NotFoundError: If the review does not exist
            AuthorizationError: If user_id is not the author
        """
        user_id = self._require_user(user_id, "delete a review")

        with DatabaseOperation(
            self.logger, "delete_review", context={"review_id": review_id}
        ):
            review = self.session.get(Review, review_id)
            if review is None:
                raise NotFoundError("Review not found")
            self._require_owner(
                review.user_id, user_id, "You can only delete your own reviews"
            )
            self.session.delete(review)
            self.session.flush()

    @handle_db_errors
    def get_for_entry(self, ref: RefLike) -> List[Review]:
        """Reviews of an entry, newest first."""
        entry_ref = EntryRef.coerce(ref)
        return list(
            self.session.scalars(
                select(Review)
                .where(
                    Review.entry_type == entry_ref.entry_type,
                    Review.entry_id == entry_ref.entry_id,
                )
                .order_by(Review.created_at.desc(), Review.id.desc())
            )
        )
