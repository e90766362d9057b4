#!/usr/bin/env python3
"""
association_manager.py
----------------------
Config-driven manager for reusable labels (tags and accessibility features)
and their links to entries.

A label is shared by every entry linked to it. Each label keeps a
usage_count equal to the number of live link rows pointing at it. The
counter is only ever changed by _link() and _unlink(), which write the
link row and adjust the counter together.

Each label type is described by a LabelManagerConfig:
- The label model and its link model
- The link column holding the label id
- A display name for logs and error messages

Usage:
    tags = TagManager(session, logger)

    tag_id = tags.create({"name": "One-handed", "accessibility_type": "motor"})
    tags.add_to_entry(EntryRef.of("game", game.id), tag_id)
    tags.set_for_entry(("game", game.id), [tag_id, other_id])
    tags.get_popular(limit=10)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type, Union

# --- Third party imports ---
from sqlalchemy import case, delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

# --- Local imports ---
from accessdb.core.exceptions import NotFoundError, ValidationError
from accessdb.core.logging_manager import AccessLogger, safe_logger
from accessdb.core.validators import DataValidator
from accessdb.database.decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from accessdb.database.models import (
    ENTRY_MODELS,
    AccessibilityType,
    EntryMixin,
    EntryRef,
    EntryType,
    model_for,
)
from accessdb.utils.slugify import slugify
from .base_manager import BaseManager

RefLike = Union[EntryRef, Tuple[Any, str]]


@dataclass
class LabelManagerConfig:
    """
    Configuration for a label manager.

    Attributes:
        label_model: Label model class (Tag, AccessibilityFeature)
        link_model: Link model class (EntryTag, EntryFeature)
        label_key: Column on the link model holding the label id
        display_name: Lowercase name used in logs and messages
    """

    label_model: Type
    link_model: Type
    label_key: str
    display_name: str

    @property
    def title(self) -> str:
        return self.display_name.capitalize()


class LabelManager(BaseManager):
    """
    Shared label CRUD and entry-link bookkeeping.

    Subclasses supply a config and may add link fields (the feature
    rating) through the keyword arguments of _link().
    """

    config: LabelManagerConfig

    def __init__(
        self,
        session: Session,
        logger: Optional[AccessLogger],
        config: LabelManagerConfig,
    ):
        super().__init__(session, logger)
        self.config = config

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    @property
    def _label_model(self) -> Type:
        return self.config.label_model

    @property
    def _link_model(self) -> Type:
        return self.config.link_model

    @property
    def _label_column(self):
        return getattr(self.config.link_model, self.config.label_key)

    def _op(self, action: str) -> str:
        """Operation name for logging, e.g. 'add_tag_to_entry'."""
        return action.format(label=self.config.display_name)

    def _require_label(self, label_id: int) -> Any:
        """Load a label or raise NotFoundError."""
        label = self.session.get(self._label_model, label_id)
        if label is None:
            raise NotFoundError(f"{self.config.title} not found with id: {label_id}")
        return label

    def _require_entry(self, ref: EntryRef) -> EntryMixin:
        """Load the entry a reference points at or raise NotFoundError."""
        entry = self.session.get(model_for(ref.entry_type), ref.entry_id)
        if entry is None:
            raise NotFoundError(
                f"{ref.entry_type.display_name} not found with id: {ref.entry_id}"
            )
        return entry

    def _entry_filter(self, ref: EntryRef) -> tuple:
        link = self._link_model
        return (link.entry_type == ref.entry_type, link.entry_id == ref.entry_id)

    def _find_link(self, ref: EntryRef, label_id: int) -> Optional[Any]:
        """Return the link between an entry and a label, if any."""
        return self.session.scalars(
            select(self._link_model).where(
                *self._entry_filter(ref), self._label_column == label_id
            )
        ).first()

    def _links_for(self, ref: EntryRef) -> List[Any]:
        return list(
            self.session.scalars(
                select(self._link_model)
                .where(*self._entry_filter(ref))
                .order_by(self._link_model.id)
            )
        )

    def _adjust_usage(self, label_id: int, delta: int) -> None:
        """
        Shift a label's usage_count by delta, never below zero.

        Runs as a single UPDATE so concurrent writers do not lose counts.
        """
        label = self._label_model
        if delta >= 0:
            new_value = label.usage_count + delta
        else:
            new_value = case(
                (label.usage_count + delta > 0, label.usage_count + delta),
                else_=0,
            )

        self._execute_with_retry(
            lambda: self.session.execute(
                update(label)
                .where(label.id == label_id)
                .values(usage_count=new_value)
                .execution_options(synchronize_session="fetch")
            )
        )

    def _link(self, ref: EntryRef, label_id: int, **fields: Any) -> Any:
        """
        Insert a link row and increment the label's usage_count.

        If another writer inserted the same link first, the existing row
        is returned and the counter is left alone.
        """
        try:
            with self.session.begin_nested():
                link = self._link_model(
                    entry_type=ref.entry_type,
                    entry_id=ref.entry_id,
                    **{self.config.label_key: label_id},
                    **fields,
                )
                self.session.add(link)
        except IntegrityError:
            existing = self._find_link(ref, label_id)
            if existing is None:
                raise
            return existing

        self._adjust_usage(label_id, +1)
        return link

    def _unlink(self, link: Any) -> None:
        """Delete a link row and decrement its label's usage_count."""
        label_id = getattr(link, self.config.label_key)
        self.session.delete(link)
        self.session.flush()
        self._adjust_usage(label_id, -1)

    # -------------------------------------------------------------------------
    # Label CRUD
    # -------------------------------------------------------------------------

    def _normalize_name(self, value: Any) -> Tuple[str, str]:
        """Return (name, slug) or raise ValidationError."""
        name = DataValidator.normalize_string(value)
        slug = slugify(name)
        if not name or not slug:
            raise ValidationError(
                f"{self.config.title} name must contain at least one letter or digit"
            )
        return name, slug

    @validate_metadata(["name", "accessibility_type"])
    def get_or_create(self, metadata: Dict[str, Any]) -> Any:
        """
        Return the label whose slug matches metadata["name"], creating it if needed.

        Args:
            metadata: Dictionary with keys:
                - name: Display name (required)
                - accessibility_type: AccessibilityType or its value (required)
                - description: Optional explanation

        Returns:
            Existing or newly created label

        Raises:
            ValidationError: If name or accessibility_type is invalid
        """
        name, slug = self._normalize_name(metadata["name"])
        access_type = DataValidator.validate_choice(
            metadata["accessibility_type"], AccessibilityType
        )

        with DatabaseOperation(
            self.logger, self._op("get_or_create_{label}"), context={"slug": slug}
        ):
            return self._get_or_create(
                self._label_model,
                {"slug": slug},
                {
                    "name": name,
                    "description": DataValidator.normalize_string(
                        metadata.get("description")
                    ),
                    "accessibility_type": access_type,
                    "usage_count": 0,
                },
            )

    def create(self, metadata: Dict[str, Any]) -> int:
        """
        Create a label and return its id.

        A label whose name normalizes to an existing slug is not
        duplicated; the existing label's id is returned instead.
        """
        return self.get_or_create(metadata).id

    def update(self, label_id: int, metadata: Dict[str, Any]) -> int:
        """
        Patch a label's name, description or accessibility type.

        Renaming recomputes the slug.

        Args:
            label_id: Label to update
            metadata: Any of name, description, accessibility_type

        Returns:
            The label id

        Raises:
            NotFoundError: If the label does not exist
            ValidationError: If the new name collides with another label
        """
        with DatabaseOperation(
            self.logger, self._op("update_{label}"), context={"label_id": label_id}
        ):
            label = self._require_label(label_id)

            if metadata.get("name") is not None:
                name, slug = self._normalize_name(metadata["name"])
                clash = self.session.scalars(
                    select(self._label_model).where(
                        self._label_model.slug == slug,
                        self._label_model.id != label.id,
                    )
                ).first()
                if clash is not None:
                    raise ValidationError(
                        f"A {self.config.display_name} with slug '{slug}' already exists"
                    )
                label.name = name
                label.slug = slug

            if "description" in metadata:
                label.description = DataValidator.normalize_string(
                    metadata["description"]
                )

            if metadata.get("accessibility_type") is not None:
                label.accessibility_type = DataValidator.validate_choice(
                    metadata["accessibility_type"], AccessibilityType
                )

            self.session.flush()
            return label.id

    def delete(self, label_id: int) -> int:
        """
        Delete a label together with every link pointing at it.

        Other labels' counters are untouched.

        Returns:
            Number of links removed

        Raises:
            NotFoundError: If the label does not exist
        """
        with DatabaseOperation(
            self.logger, self._op("delete_{label}"), context={"label_id": label_id}
        ):
            label = self._require_label(label_id)
            result = self.session.execute(
                delete(self._link_model).where(self._label_column == label_id)
            )
            self.session.delete(label)
            self.session.flush()

            safe_logger(self.logger).log_debug(
                f"Deleted {self.config.display_name} {label.slug}",
                {"links_removed": result.rowcount},
            )
            return result.rowcount

    @handle_db_errors
    def get(self, label_id: int) -> Optional[Any]:
        """Retrieve a label by id."""
        return self.session.get(self._label_model, label_id)

    @handle_db_errors
    def get_by_slug(self, slug: str) -> Optional[Any]:
        """Retrieve a label by slug (the input is normalized first)."""
        normalized = slugify(slug)
        if not normalized:
            return None
        return self.session.scalars(
            select(self._label_model).where(self._label_model.slug == normalized)
        ).first()

    @handle_db_errors
    def get_all(
        self,
        accessibility_type: Optional[Union[AccessibilityType, str]] = None,
        limit: int = 100,
    ) -> List[Any]:
        """
        List labels ordered by name.

        Args:
            accessibility_type: Optional dimension filter
            limit: Maximum number of labels returned
        """
        label = self._label_model
        query = (
            select(label)
            .order_by(label.name, label.id)
            .limit(DataValidator.validate_limit(limit))
        )
        if accessibility_type is not None:
            query = query.where(
                label.accessibility_type
                == DataValidator.validate_choice(accessibility_type, AccessibilityType)
            )
        return list(self.session.scalars(query))

    @handle_db_errors
    def search(
        self,
        query: Optional[str],
        accessibility_type: Optional[Union[AccessibilityType, str]] = None,
        limit: int = 20,
    ) -> List[Any]:
        """
        Case-insensitive name search.

        A blank query returns no results.
        """
        text = DataValidator.normalize_string(query)
        if not text:
            return []

        label = self._label_model
        statement = (
            select(label)
            .where(func.lower(label.name).contains(text.lower(), autoescape=True))
            .order_by(label.usage_count.desc(), label.name)
            .limit(DataValidator.validate_limit(limit))
        )
        if accessibility_type is not None:
            statement = statement.where(
                label.accessibility_type
                == DataValidator.validate_choice(accessibility_type, AccessibilityType)
            )
        return list(self.session.scalars(statement))

    @handle_db_errors
    @log_database_operation("get_popular_labels")
    def get_popular(
        self,
        accessibility_type: Optional[Union[AccessibilityType, str]] = None,
        limit: int = 20,
    ) -> List[Any]:
        """
        Most used labels, ordered by usage_count descending.

        Ties are broken by name.
        """
        label = self._label_model
        statement = (
            select(label)
            .order_by(label.usage_count.desc(), label.name)
            .limit(DataValidator.validate_limit(limit))
        )
        if accessibility_type is not None:
            statement = statement.where(
                label.accessibility_type
                == DataValidator.validate_choice(accessibility_type, AccessibilityType)
            )
        return list(self.session.scalars(statement))

    # -------------------------------------------------------------------------
    # Entry links
    # -------------------------------------------------------------------------

    def _add(self, ref: RefLike, label_id: int, **fields: Any) -> Tuple[Any, bool]:
        """
        Link a label to an entry unless already linked.

        Returns:
            (link, created) tuple
        """
        entry_ref = EntryRef.coerce(ref)
        self._require_entry(entry_ref)
        self._require_label(label_id)

        existing = self._find_link(entry_ref, label_id)
        if existing is not None:
            return existing, False
        return self._link(entry_ref, label_id, **fields), True

    def remove_from_entry(self, ref: RefLike, label_id: int) -> bool:
        """
        Unlink a label from an entry.

        Unlinking a label that is not linked is a no-op.

        Returns:
            True if a link was removed
        """
        entry_ref = EntryRef.coerce(ref)
        with DatabaseOperation(
            self.logger,
            self._op("remove_{label}_from_entry"),
            context={"entry": str(entry_ref), "label_id": label_id},
        ):
            link = self._find_link(entry_ref, label_id)
            if link is None:
                return False
            self._unlink(link)
            return True

    def unlink_entry(self, ref: RefLike) -> int:
        """
        Remove every link of one entry, decrementing each label once.

        Returns:
            Number of links removed
        """
        entry_ref = EntryRef.coerce(ref)
        with DatabaseOperation(
            self.logger,
            self._op("unlink_entry_{label}s"),
            context={"entry": str(entry_ref)},
        ):
            links = self._links_for(entry_ref)
            for link in links:
                self._unlink(link)
            return len(links)

    @handle_db_errors
    def get_entries_with(
        self,
        label_id: int,
        entry_type: Optional[Union[EntryType, str]] = None,
    ) -> List[Any]:
        """
        Link rows pointing at a label.

        Callers resolve link.entry_ref to the entry itself when needed.
        """
        statement = (
            select(self._link_model)
            .where(self._label_column == label_id)
            .order_by(self._link_model.id)
        )
        if entry_type is not None:
            statement = statement.where(
                self._link_model.entry_type
                == DataValidator.validate_choice(entry_type, EntryType)
            )
        return list(self.session.scalars(statement))

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def recount_usage(self) -> List[Any]:
        """
        Recompute every usage_count from the live link rows.

        Returns:
            Labels whose stored count had drifted (now corrected)
        """
        with DatabaseOperation(self.logger, self._op("recount_{label}_usage")):
            counts = dict(
                self.session.execute(
                    select(self._label_column, func.count())
                    .group_by(self._label_column)
                ).all()
            )

            drifted = []
            for label in self.session.scalars(select(self._label_model)):
                actual = counts.get(label.id, 0)
                if label.usage_count != actual:
                    safe_logger(self.logger).log_warning(
                        f"{self.config.title} usage_count drifted",
                        {"slug": label.slug, "stored": label.usage_count, "actual": actual},
                    )
                    label.usage_count = actual
                    drifted.append(label)

            self.session.flush()
            return drifted

    def prune_dangling(self) -> int:
        """
        Remove link rows whose label or entry no longer exists.

        Links to a missing entry go through _unlink() so the label's
        counter follows.

        Returns:
            Number of links removed
        """
        link = self._link_model
        label = self._label_model

        with DatabaseOperation(self.logger, self._op("prune_dangling_{label}_links")):
            orphaned_label = self.session.execute(
                delete(link).where(
                    ~self._label_column.in_(select(label.id))
                )
            ).rowcount

            orphaned_entry = 0
            for entry_type, model in ENTRY_MODELS.items():
                stale = self.session.scalars(
                    select(link).where(
                        link.entry_type == entry_type,
                        ~link.entry_id.in_(select(model.id)),
                    )
                ).all()
                for row in stale:
                    self._unlink(row)
                orphaned_entry += len(stale)

            return orphaned_label + orphaned_entry
