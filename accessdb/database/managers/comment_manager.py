#!/usr/bin/env python3
"""
comment_manager.py
--------------------
Manages comments attached to entries.

Content is trimmed and must not be empty. Only the author of a comment
may edit or delete it.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import List, Optional

# --- Third party imports ---
from sqlalchemy import func, select

# --- Local imports ---
from accessdb.core.exceptions import NotFoundError, ValidationError
from accessdb.core.validators import DataValidator
from accessdb.database.decorators import DatabaseOperation, handle_db_errors
from accessdb.database.models import Comment, EntryRef, model_for
from accessdb.database.models.base import utc_now
from .association_manager import RefLike
from .base_manager import BaseManager


def _clean_content(content: Optional[str]) -> str:
    text = DataValidator.normalize_string(content)
    if not text:
        raise ValidationError("Comment cannot be empty")
    return text


class CommentManager(BaseManager):
    """Add, edit, delete and list comments on entries."""

    def _require_comment(self, comment_id: int) -> Comment:
        comment = self.session.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    def add(
        self,
        ref: RefLike,
        user_id: Optional[str],
        content: str,
        user_name: Optional[str] = None,
        user_image: Optional[str] = None,
        photo: Optional[str] = None,
    ) -> Comment:
        """
        Post a comment on an entry.

        Args:
            ref: EntryRef or (entry_type, entry_id)
            user_id: Signed-in author
            content: Comment text
            user_name: Author display name to show with the comment
            user_image: Author avatar URL
            photo: Storage handle of an attached photo

        Raises:
            NotAuthenticatedError: If user_id is missing
            ValidationError: If content is blank
            NotFoundError: If the entry does not exist
        """
        user_id = self._require_user(user_id, "add a comment")
        text = _clean_content(content)
        entry_ref = EntryRef.coerce(ref)

        with DatabaseOperation(
            self.logger, "add_comment", context={"entry": str(entry_ref)}
        ):
            if self.session.get(model_for(entry_ref.entry_type), entry_ref.entry_id) is None:
                raise NotFoundError(f"{entry_ref.entry_type.display_name} not found")

            comment = Comment(
                entry_type=entry_ref.entry_type,
                entry_id=entry_ref.entry_id,
                user_id=user_id,
                user_name=DataValidator.normalize_string(user_name),
                user_image=DataValidator.normalize_string(user_image),
                content=text,
                photo=DataValidator.normalize_string(photo),
            )
            self.session.add(comment)
            self.session.flush()
            return comment

    def update(self, comment_id: int, user_id: Optional[str], content: str) -> Comment:
        """
        Replace the text of a comment.

        Raises:
            NotAuthenticatedError: If user_id is missing
            NotFoundError: If the comment does not exist
            AuthorizationError: If user_id is not the author
            ValidationError: If content is blank
        """
        user_id = self._require_user(user_id, "update a comment")

        with DatabaseOperation(
            self.logger, "update_comment", context={"comment_id": comment_id}
        ):
            comment = self._require_comment(comment_id)
            self._require_owner(
                comment.user_id, user_id, "You can only edit your own comments"
            )
            comment.content = _clean_content(content)
            comment.updated_at = utc_now()
            self.session.flush()
            return comment

    def delete(self, comment_id: int, user_id: Optional[str]) -> None:
        """
        Delete a comment.

        Raises:
            NotAuthenticatedError: If user_id is missing
            NotFoundError: If the comment does not exist
            AuthorizationError: If user_id is not the author
        """
        user_id = self._require_user(user_id, "delete a comment")

        with DatabaseOperation(
            self.logger, "delete_comment", context={"comment_id": comment_id}
        ):
            comment = self._require_comment(comment_id)
            self._require_owner(
                comment.user_id, user_id, "You can only delete your own comments"
            )
            self.session.delete(comment)
            self.session.flush()

    @handle_db_errors
    def get_for_entry(self, ref: RefLike) -> List[Comment]:
        """Comments on an entry, newest first."""
        entry_ref = EntryRef.coerce(ref)
        return list(
            self.session.scalars(
                select(Comment)
                .where(
                    Comment.entry_type == entry_ref.entry_type,
                    Comment.entry_id == entry_ref.entry_id,
                )
                .order_by(Comment.created_at.desc(), Comment.id.desc())
            )
        )

    @handle_db_errors
    def count_for_entry(self, ref: RefLike) -> int:
        """Number of comments on an entry."""
        entry_ref = EntryRef.coerce(ref)
        return self.session.scalar(
            select(func.count(Comment.id)).where(
                Comment.entry_type == entry_ref.entry_type,
                Comment.entry_id == entry_ref.entry_id,
            )
        ) or 0
