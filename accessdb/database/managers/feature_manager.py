#!/usr/bin/env python3
"""
feature_manager.py
--------------------
Manages AccessibilityFeature entities and their rated links to entries.

A feature is a concrete accessibility capability ("screen-reader-support").
Each link to an entry carries how well that entry provides the feature
(rating 1-5) and optional notes. Ratings are validated before anything
is written.

Usage:
    features = FeatureManager(session, logger)

    feature_id = features.create(
        {"name": "Screen Reader Support", "accessibility_type": "visual"}
    )
    features.add_to_entry(("software", app.id), feature_id, rating=4)
    features.update_entry_rating(("software", app.id), feature_id, 5, "NVDA tested")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

# --- Third party imports ---
from sqlalchemy import select
from sqlalchemy.orm import Session

# --- Local imports ---
from accessdb.core.exceptions import NotFoundError, ValidationError
from accessdb.core.logging_manager import AccessLogger
from accessdb.core.validators import DataValidator
from accessdb.database.decorators import DatabaseOperation, handle_db_errors
from accessdb.database.models import (
    AccessibilityFeature,
    EntryFeature,
    EntryRef,
    EntryType,
)
from .association_manager import LabelManager, LabelManagerConfig, RefLike

FEATURE_CONFIG = LabelManagerConfig(
    label_model=AccessibilityFeature,
    link_model=EntryFeature,
    label_key="feature_id",
    display_name="feature",
)

FeatureSpec = Union[Mapping[str, Any], Tuple[Any, ...]]


@dataclass
class RatedFeature:
    """A feature as linked to one entry, with the entry-specific rating."""

    feature: AccessibilityFeature
    rating: int
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.feature.to_dict()
        data["rating"] = self.rating
        data["notes"] = self.notes
        return data


def _parse_feature_spec(spec: FeatureSpec) -> Tuple[int, int, Optional[str]]:
    """Turn a mapping or tuple into a validated (feature_id, rating, notes)."""
    if isinstance(spec, Mapping):
        feature_id = spec.get("feature_id")
        rating = spec.get("rating")
        notes = spec.get("notes")
    elif isinstance(spec, tuple) and len(spec) in (2, 3):
        feature_id, rating = spec[0], spec[1]
        notes = spec[2] if len(spec) == 3 else None
    else:
        raise ValidationError(
            f"Expected (feature_id, rating[, notes]) or a mapping, got {spec!r}"
        )

    if feature_id is None:
        raise ValidationError("Required field 'feature_id' missing or empty")

    return (
        feature_id,
        DataValidator.validate_rating(rating),
        DataValidator.normalize_string(notes),
    )


class FeatureManager(LabelManager):
    """Feature CRUD plus rated entry linking with usage counting."""

    def __init__(self, session: Session, logger: Optional[AccessLogger] = None):
        super().__init__(session, logger, FEATURE_CONFIG)

    def add_to_entry(
        self,
        ref: RefLike,
        feature_id: int,
        rating: int,
        notes: Optional[str] = None,
    ) -> EntryFeature:
        """
        Link a feature to an entry with a rating.

        Linking an already linked feature updates its rating and notes in
        place; usage_count only grows on the first link.

        Args:
            ref: EntryRef or (entry_type, entry_id)
            feature_id: Feature to link
            rating: 1-5
            notes: Optional remarks

        Returns:
            The link row

        Raises:
            ValidationError: If rating is outside 1-5 (nothing is written)
            NotFoundError: If the entry or the feature does not exist
        """
        rating = DataValidator.validate_rating(rating)
        notes = DataValidator.normalize_string(notes)
        entry_ref = EntryRef.coerce(ref)

        with DatabaseOperation(
            self.logger,
            "add_feature_to_entry",
            context={"entry": str(entry_ref), "feature_id": feature_id},
        ):
            link, created = self._add(entry_ref, feature_id, rating=rating, notes=notes)
            if not created:
                link.rating = rating
                link.notes = notes
                self.session.flush()
            return link

    def set_for_entry(self, ref: RefLike, features: Iterable[FeatureSpec]) -> None:
        """
        Replace the full set of features linked to an entry.

        Every rating is validated before any write. Kept features get their
        rating and notes updated; dropped ones are unlinked and new ones
        linked.

        Args:
            ref: EntryRef or (entry_type, entry_id)
            features: (feature_id, rating[, notes]) tuples or mappings with
                feature_id, rating and notes keys. A repeated feature id
                keeps its last rating.

        Raises:
            ValidationError: If any rating is outside 1-5
            NotFoundError: If the entry or any feature does not exist
        """
        entry_ref = EntryRef.coerce(ref)
        desired: Dict[int, Tuple[int, Optional[str]]] = {}
        for spec in features:
            feature_id, rating, notes = _parse_feature_spec(spec)
            desired[feature_id] = (rating, notes)

        with DatabaseOperation(
            self.logger,
            "set_features_for_entry",
            context={"entry": str(entry_ref), "feature_ids": list(desired)},
        ):
            self._require_entry(entry_ref)
            for feature_id in desired:
                self._require_label(feature_id)

            current = {link.feature_id: link for link in self._links_for(entry_ref)}

            for feature_id, link in current.items():
                if feature_id not in desired:
                    self._unlink(link)
                else:
                    link.rating, link.notes = desired[feature_id]

            for feature_id, (rating, notes) in desired.items():
                if feature_id not in current:
                    self._link(entry_ref, feature_id, rating=rating, notes=notes)

            self.session.flush()

    def update_entry_rating(
        self,
        ref: RefLike,
        feature_id: int,
        rating: int,
        notes: Optional[str] = None,
    ) -> EntryFeature:
        """
        Change the rating and notes of an existing link.

        Raises:
            ValidationError: If rating is outside 1-5
            NotFoundError: If the feature is not linked to the entry
        """
        rating = DataValidator.validate_rating(rating)
        entry_ref = EntryRef.coerce(ref)

        with DatabaseOperation(
            self.logger,
            "update_entry_feature_rating",
            context={"entry": str(entry_ref), "feature_id": feature_id},
        ):
            link = self._find_link(entry_ref, feature_id)
            if link is None:
                raise NotFoundError("Feature not associated with this entry")

            link.rating = rating
            link.notes = DataValidator.normalize_string(notes)
            self.session.flush()
            return link

    @handle_db_errors
    def get_for_entry(self, ref: RefLike) -> List[RatedFeature]:
        """
        Features linked to an entry with their entry-specific ratings.

        Links whose feature no longer exists are skipped.
        """
        entry_ref = EntryRef.coerce(ref)
        rows = self.session.execute(
            select(AccessibilityFeature, EntryFeature.rating, EntryFeature.notes)
            .join(EntryFeature, EntryFeature.feature_id == AccessibilityFeature.id)
            .where(*self._entry_filter(entry_ref))
            .order_by(EntryFeature.id)
        ).all()
        return [RatedFeature(feature, rating, notes) for feature, rating, notes in rows]

    @handle_db_errors
    def get_entries_with(
        self,
        label_id: int,
        entry_type: Optional[Union[EntryType, str]] = None,
        min_rating: Optional[int] = None,
    ) -> List[EntryFeature]:
        """
        Link rows pointing at a feature, optionally with a minimum rating.
        """
        links = super().get_entries_with(label_id, entry_type)
        if min_rating is None:
            return links
        return [link for link in links if link.rating >= min_rating]
