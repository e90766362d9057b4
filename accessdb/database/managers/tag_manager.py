#!/usr/bin/env python3
"""
tag_manager.py
--------------------
Manages Tag entities and their links to entries.

Tags are free keyword labels shared by all entries. A tag is identified
by its slug, so creating "One Handed" after "one-handed" returns the
existing tag.

Usage:
    tags = TagManager(session, logger)

    tag_id = tags.create({"name": "Subtitles", "accessibility_type": "auditory"})
    tags.add_to_entry(("game", game.id), tag_id)
    tags.get_for_entry(("game", game.id))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Iterable, List, Optional

# --- Third party imports ---
from sqlalchemy import select
from sqlalchemy.orm import Session

# --- Local imports ---
from accessdb.core.logging_manager import AccessLogger
from accessdb.database.decorators import DatabaseOperation, handle_db_errors
from accessdb.database.models import EntryRef, EntryTag, Tag
from .association_manager import LabelManager, LabelManagerConfig, RefLike

TAG_CONFIG = LabelManagerConfig(
    label_model=Tag,
    link_model=EntryTag,
    label_key="tag_id",
    display_name="tag",
)


class TagManager(LabelManager):
    """Tag CRUD plus entry linking with usage counting."""

    def __init__(self, session: Session, logger: Optional[AccessLogger] = None):
        super().__init__(session, logger, TAG_CONFIG)

    def add_to_entry(self, ref: RefLike, tag_id: int) -> EntryTag:
        """
        Link a tag to an entry.

        Idempotent: linking an already linked tag returns the existing
        link and leaves usage_count unchanged.

        Args:
            ref: EntryRef or (entry_type, entry_id)
            tag_id: Tag to link

        Returns:
            The link row

        Raises:
            NotFoundError: If the entry or the tag does not exist
        """
        entry_ref = EntryRef.coerce(ref)
        with DatabaseOperation(
            self.logger,
            "add_tag_to_entry",
            context={"entry": str(entry_ref), "tag_id": tag_id},
        ):
            link, _ = self._add(entry_ref, tag_id)
            return link

    def set_for_entry(self, ref: RefLike, tag_ids: Iterable[int]) -> None:
        """
        Replace the full set of tags linked to an entry.

        Tags kept from the current set are not written at all; dropped
        tags are unlinked and new ones linked.

        Args:
            ref: EntryRef or (entry_type, entry_id)
            tag_ids: Desired tag ids (duplicates ignored)

        Raises:
            NotFoundError: If the entry or any tag does not exist
        """
        entry_ref = EntryRef.coerce(ref)
        desired = list(dict.fromkeys(tag_ids))

        with DatabaseOperation(
            self.logger,
            "set_tags_for_entry",
            context={"entry": str(entry_ref), "tag_ids": desired},
        ):
            self._require_entry(entry_ref)
            for tag_id in desired:
                self._require_label(tag_id)

            current = {link.tag_id: link for link in self._links_for(entry_ref)}

            for tag_id, link in current.items():
                if tag_id not in desired:
                    self._unlink(link)

            for tag_id in desired:
                if tag_id not in current:
                    self._link(entry_ref, tag_id)

    @handle_db_errors
    def get_for_entry(self, ref: RefLike) -> List[Tag]:
        """
        Tags linked to an entry, in link order.

        Links whose tag no longer exists are skipped.
        """
        entry_ref = EntryRef.coerce(ref)
        return list(
            self.session.scalars(
                select(Tag)
                .join(EntryTag, EntryTag.tag_id == Tag.id)
                .where(*self._entry_filter(entry_ref))
                .order_by(EntryTag.id)
            )
        )
