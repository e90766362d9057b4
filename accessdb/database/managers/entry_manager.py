#!/usr/bin/env python3
"""
entry_manager.py
--------------------
Manages entries of the five categories (game, hardware, place, software,
service).

Every write requires a signed-in user, validates the incoming metadata in
full before touching the row, and stores the completeness flag computed
from the merged record. Only the creator may edit or delete an entry;
entries with no recorded creator may be edited by any signed-in user.

Deleting an entry unlinks its tags and features (so their usage counts
drop) and removes its comments and reviews.

Usage:
    entries = EntryManager(session, logger)

    game = entries.create("game", user_id, {
        "name": "Celeste",
        "overall_rating": 5,
        "platforms": ["PC"],
        "photos": ["storage-id"],
    })
    entries.update("game", game.id, user_id, {"platforms": []})
    entries.delete("game", game.id, user_id)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Callable, Dict, List, Optional, Union

# --- Third party imports ---
from sqlalchemy import Boolean, Integer, delete, select
from sqlalchemy.orm import Session

# --- Local imports ---
from accessdb.core.exceptions import NotFoundError, ValidationError
from accessdb.core.logging_manager import AccessLogger, safe_logger
from accessdb.core.validators import DataValidator
from accessdb.database.completeness import is_entry_complete
from accessdb.database.decorators import DatabaseOperation, handle_db_errors
from accessdb.database.models import (
    Comment,
    EntryMixin,
    EntryRef,
    EntryType,
    Place,
    Review,
    model_for,
)
from accessdb.database.models.base import utc_now
from .base_manager import BaseManager
from .feature_manager import FeatureManager
from .tag_manager import TagManager

DIMENSION_RATINGS = (
    "visual_accessibility",
    "auditory_accessibility",
    "motor_accessibility",
    "cognitive_accessibility",
)


def _column_normalizer(model: type, field_name: str) -> Callable[[Any], Any]:
    """Pick the DataValidator normalizer matching a column's type."""
    column_type = model.__table__.c[field_name].type
    if isinstance(column_type, Boolean):
        return DataValidator.normalize_bool
    if isinstance(column_type, Integer):
        return DataValidator.normalize_int
    return DataValidator.normalize_string


def _normalize_location(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"location must be a mapping, got {type(value).__name__}")
    return {
        "address": DataValidator.normalize_string(value.get("address")),
        "city": DataValidator.normalize_string(value.get("city")),
        "country": DataValidator.normalize_string(value.get("country")),
        "latitude": DataValidator.normalize_float(value.get("latitude")),
        "longitude": DataValidator.normalize_float(value.get("longitude")),
    }


class EntryManager(BaseManager):
    """
    Create, update, delete and read entries of any category.
    """

    def __init__(self, session: Session, logger: Optional[AccessLogger] = None):
        super().__init__(session, logger)
        self._tags = TagManager(session, logger)
        self._features = FeatureManager(session, logger)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _prepare_values(
        self, model: type, metadata: Dict[str, Any], creating: bool
    ) -> Dict[str, Any]:
        """
        Validate and normalize metadata into column values.

        Only keys present in metadata are returned, so an update leaves
        every other field as it was.

        Raises:
            ValidationError: If a required field is missing or a rating is invalid
        """
        if creating:
            DataValidator.validate_required_fields(metadata, ["name", "overall_rating"])

        values: Dict[str, Any] = {}

        if "name" in metadata:
            name = DataValidator.normalize_string(metadata["name"])
            if not name:
                raise ValidationError("Required field 'name' missing or empty")
            values["name"] = name

        if "description" in metadata:
            values["description"] = (
                DataValidator.normalize_string(metadata["description"]) or ""
            )

        if "photos" in metadata:
            values["photos"] = DataValidator.normalize_string_list(metadata["photos"])

        if "overall_rating" in metadata:
            values["overall_rating"] = DataValidator.validate_rating(
                metadata["overall_rating"], "overall_rating"
            )

        for field_name in DIMENSION_RATINGS:
            if field_name in metadata:
                values[field_name] = DataValidator.validate_optional_rating(
                    metadata[field_name], field_name
                )

        if "website" in metadata:
            values["website"] = DataValidator.normalize_string(metadata["website"])

        for field_name in model.list_fields:
            if field_name in metadata:
                values[field_name] = DataValidator.normalize_string_list(
                    metadata[field_name]
                )

        for field_name in model.specific_fields:
            if field_name in metadata:
                normalizer = _column_normalizer(model, field_name)
                values[field_name] = normalizer(metadata[field_name])

        if model is Place and "location" in metadata:
            values["location"] = _normalize_location(metadata["location"])

        return values

    def _require_entry(self, entry_type: EntryType, entry_id: str) -> EntryMixin:
        entry = self.session.get(model_for(entry_type), entry_id)
        if entry is None:
            raise NotFoundError(f"{entry_type.display_name} not found")
        return entry

    def _store(self, entry: EntryMixin, values: Dict[str, Any]) -> None:
        """Apply values and refresh the completeness flag."""
        for key, value in values.items():
            setattr(entry, key, value)
        entry.complete = is_entry_complete(entry, entry.category)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(
        self,
        category: Union[EntryType, str],
        user_id: Optional[str],
        metadata: Dict[str, Any],
    ) -> EntryMixin:
        """
        Create an entry owned by user_id.

        Args:
            category: Entry category
            user_id: Signed-in user
            metadata: Field values (name and overall_rating required)

        Returns:
            The new entry, with `complete` computed

        Raises:
            NotAuthenticatedError: If user_id is missing
            ValidationError: If metadata is invalid
        """
        user_id = self._require_user(user_id, "create an entry")
        entry_type = DataValidator.validate_choice(category, EntryType)
        model = model_for(entry_type)
        values = self._prepare_values(model, metadata, creating=True)

        with DatabaseOperation(
            self.logger, f"create_{entry_type.value}", context={"user_id": user_id}
        ):
            entry = model(created_by=user_id)
            self._store(entry, values)
            self.session.add(entry)
            self.session.flush()

            safe_logger(self.logger).log_debug(
                f"Created {entry_type.value} {entry.name!r}",
                {"entry_id": entry.id, "complete": entry.complete},
            )
            return entry

    def update(
        self,
        category: Union[EntryType, str],
        entry_id: str,
        user_id: Optional[str],
        metadata: Dict[str, Any],
    ) -> EntryMixin:
        """
        Merge metadata into an existing entry.

        Raises:
            NotAuthenticatedError: If user_id is missing
            NotFoundError: If the entry does not exist
            AuthorizationError: If the entry belongs to another user
            ValidationError: If metadata is invalid
        """
        user_id = self._require_user(user_id, "update an entry")
        entry_type = DataValidator.validate_choice(category, EntryType)

        with DatabaseOperation(
            self.logger,
            f"update_{entry_type.value}",
            context={"entry_id": entry_id, "user_id": user_id},
        ):
            entry = self._require_entry(entry_type, entry_id)
            self._require_owner(
                entry.created_by, user_id, "You can only edit entries you created"
            )
            values = self._prepare_values(type(entry), metadata, creating=False)

            self._store(entry, values)
            entry.updated_at = utc_now()
            self.session.flush()
            return entry

    def delete(
        self,
        category: Union[EntryType, str],
        entry_id: str,
        user_id: Optional[str],
    ) -> None:
        """
        Delete an entry and everything attached to it.

        Raises:
            NotAuthenticatedError: If user_id is missing
            NotFoundError: If the entry does not exist
            AuthorizationError: If the entry belongs to another user
        """
        user_id = self._require_user(user_id, "delete an entry")
        entry_type = DataValidator.validate_choice(category, EntryType)

        with DatabaseOperation(
            self.logger,
            f"delete_{entry_type.value}",
            context={"entry_id": entry_id, "user_id": user_id},
        ):
            entry = self._require_entry(entry_type, entry_id)
            self._require_owner(
                entry.created_by, user_id, "You can only delete entries you created"
            )

            ref = EntryRef.for_entry(entry)
            self._tags.unlink_entry(ref)
            self._features.unlink_entry(ref)
            for model in (Comment, Review):
                self.session.execute(
                    delete(model).where(
                        model.entry_type == ref.entry_type,
                        model.entry_id == ref.entry_id,
                    )
                )

            self.session.delete(entry)
            self.session.flush()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @handle_db_errors
    def get(
        self, category: Union[EntryType, str], entry_id: str
    ) -> Optional[EntryMixin]:
        """Retrieve one entry of a known category."""
        entry_type = DataValidator.validate_choice(category, EntryType)
        return self.session.get(model_for(entry_type), entry_id)

    @handle_db_errors
    def get_all(
        self,
        category: Union[EntryType, str],
        limit: int = 50,
        complete_only: bool = False,
    ) -> List[EntryMixin]:
        """
        Newest entries of one category.

        Args:
            category: Entry category
            limit: Maximum number of entries
            complete_only: Only return entries stored as complete
        """
        model = model_for(DataValidator.validate_choice(category, EntryType))
        statement = (
            select(model)
            .order_by(model.created_at.desc())
            .limit(DataValidator.validate_limit(limit))
        )
        if complete_only:
            statement = statement.where(model.complete.is_(True))
        return list(self.session.scalars(statement))
