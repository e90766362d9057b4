"""
test_tag_manager.py
-------------------
Unit tests for TagManager.

Covers tag CRUD, slug deduplication, entry linking and the usage_count
bookkeeping that goes with it.
"""
import threading

import pytest
from sqlalchemy import delete, select

from accessdb.core.exceptions import NotFoundError, ValidationError
from accessdb.database.managers.tag_manager import TagManager
from accessdb.database.models import EntryRef, EntryTag, Game, Tag


class TestTagCreate:
    """Test TagManager.create() and get_or_create()."""

    def test_create_returns_id(self, tag_manager):
        tag_id = tag_manager.create({"name": "Subtitles", "accessibility_type": "auditory"})
        tag = tag_manager.get(tag_id)

        assert tag.name == "Subtitles"
        assert tag.slug == "subtitles"
        assert tag.usage_count == 0

    def test_create_trims_name(self, tag_manager):
        tag_id = tag_manager.create({"name": "  One Handed  ", "accessibility_type": "motor"})
        assert tag_manager.get(tag_id).name == "One Handed"

    def test_same_slug_returns_existing(self, tag_manager):
        first = tag_manager.create({"name": "One Handed", "accessibility_type": "motor"})
        second = tag_manager.create({"name": "one-handed", "accessibility_type": "general"})

        assert first == second
        assert len(tag_manager.get_all()) == 1
        assert tag_manager.get(first).name == "One Handed"

    def test_missing_type_raises(self, tag_manager):
        with pytest.raises(ValidationError, match="accessibility_type"):
            tag_manager.create({"name": "Subtitles"})

    def test_invalid_type_raises(self, tag_manager):
        with pytest.raises(ValidationError, match="AccessibilityType"):
            tag_manager.create({"name": "Subtitles", "accessibility_type": "smell"})

    def test_name_without_slug_raises(self, tag_manager):
        with pytest.raises(ValidationError, match="letter or digit"):
            tag_manager.create({"name": "!!!", "accessibility_type": "general"})


class TestTagUpdate:
    """Test TagManager.update()."""

    def test_rename_recomputes_slug(self, tag_manager, make_tag):
        tag_id = make_tag("Subtitles")
        tag_manager.update(tag_id, {"name": "Closed Captions"})

        tag = tag_manager.get(tag_id)
        assert tag.name == "Closed Captions"
        assert tag.slug == "closed-captions"
        assert tag_manager.get_by_slug("subtitles") is None

    def test_rename_to_existing_slug_raises(self, tag_manager, make_tag):
        make_tag("Braille")
        tag_id = make_tag("Subtitles")

        with pytest.raises(ValidationError, match="already exists"):
            tag_manager.update(tag_id, {"name": "braille"})

    def test_update_description_and_type(self, tag_manager, make_tag):
        tag_id = make_tag("Subtitles")
        tag_manager.update(
            tag_id, {"description": "Text for speech", "accessibility_type": "auditory"}
        )

        tag = tag_manager.get(tag_id)
        assert tag.description == "Text for speech"
        assert tag.accessibility_type.value == "auditory"

    def test_update_missing_raises(self, tag_manager):
        with pytest.raises(NotFoundError, match="Tag not found with id: 999"):
            tag_manager.update(999, {"name": "x"})


class TestTagQueries:
    """Test get_by_slug(), get_all(), search() and get_popular()."""

    def test_get_by_slug_normalizes(self, tag_manager, make_tag):
        tag_id = make_tag("High Contrast")
        assert tag_manager.get_by_slug("High Contrast").id == tag_id
        assert tag_manager.get_by_slug("!!!") is None

    def test_get_all_ordered_by_name(self, tag_manager, make_tag):
        make_tag("Zoom")
        make_tag("Audio Description")
        make_tag("Magnifier", "visual")

        assert [t.name for t in tag_manager.get_all()] == [
            "Audio Description",
            "Magnifier",
            "Zoom",
        ]
        assert [t.name for t in tag_manager.get_all("visual")] == ["Magnifier"]

    def test_search(self, tag_manager, make_tag):
        make_tag("Screen Reader")
        make_tag("Screen Magnifier")
        make_tag("Subtitles")

        names = {t.name for t in tag_manager.search("screen")}
        assert names == {"Screen Reader", "Screen Magnifier"}

    def test_blank_search_returns_nothing(self, tag_manager, make_tag):
        make_tag("Subtitles")
        assert tag_manager.search("   ") == []
        assert tag_manager.search(None) == []

    def test_listings_reject_negative_limit(self, tag_manager, make_tag):
        make_tag("Subtitles")
        for listing in (tag_manager.get_all, tag_manager.get_popular):
            with pytest.raises(ValidationError, match="limit"):
                listing(limit=-1)
        with pytest.raises(ValidationError, match="limit"):
            tag_manager.search("sub", limit=0)

    def test_get_popular(self, tag_manager, make_tag, make_entry):
        popular = make_tag("Popular", "motor")
        rare = make_tag("Rare", "motor")
        visual = make_tag("Visual", "visual")

        for index in range(3):
            ref = EntryRef.for_entry(make_entry(name=f"Game {index}"))
            tag_manager.add_to_entry(ref, popular)
            if index == 0:
                tag_manager.add_to_entry(ref, rare)
                tag_manager.add_to_entry(ref, visual)

        assert [t.id for t in tag_manager.get_popular(limit=2)] == [popular, rare]
        assert [t.id for t in tag_manager.get_popular("visual")] == [visual]


class TestTagLinks:
    """Test linking tags to entries and the usage counter."""

    def test_add_increments_usage(self, tag_manager, make_tag, make_entry):
        tag_id = make_tag("Subtitles")
        ref = EntryRef.for_entry(make_entry())

        link = tag_manager.add_to_entry(ref, tag_id)

        assert link.entry_ref == ref
        assert tag_manager.get(tag_id).usage_count == 1

    def test_add_is_idempotent(self, tag_manager, make_tag, make_entry, db_session):
        tag_id = make_tag("Subtitles")
        game = make_entry()

        first = tag_manager.add_to_entry(("game", game.id), tag_id)
        second = tag_manager.add_to_entry(("game", game.id), tag_id)

        assert first.id == second.id
        assert tag_manager.get(tag_id).usage_count == 1
        assert len(db_session.scalars(select(EntryTag)).all()) == 1

    def test_add_to_missing_entry_raises(self, tag_manager, make_tag):
        tag_id = make_tag("Subtitles")
        with pytest.raises(NotFoundError, match="Game not found"):
            tag_manager.add_to_entry(("game", "missing"), tag_id)
        assert tag_manager.get(tag_id).usage_count == 0

    def test_add_missing_tag_raises(self, tag_manager, make_entry):
        game = make_entry()
        with pytest.raises(NotFoundError, match="Tag not found"):
            tag_manager.add_to_entry(("game", game.id), 999)

    def test_remove_decrements_usage(self, tag_manager, make_tag, make_entry):
        tag_id = make_tag("Subtitles")
        ref = EntryRef.for_entry(make_entry())
        tag_manager.add_to_entry(ref, tag_id)

        assert tag_manager.remove_from_entry(ref, tag_id) is True
        assert tag_manager.get(tag_id).usage_count == 0
        assert tag_manager.get_for_entry(ref) == []

    def test_remove_unlinked_is_no_op(self, tag_manager, make_tag, make_entry):
        tag_id = make_tag("Subtitles")
        ref = EntryRef.for_entry(make_entry())

        assert tag_manager.remove_from_entry(ref, tag_id) is False
        assert tag_manager.get(tag_id).usage_count == 0

    def test_counter_never_below_zero(self, tag_manager, make_tag, db_session):
        tag_id = make_tag("Subtitles")
        tag_manager._adjust_usage(tag_id, -1)
        db_session.expire_all()
        assert tag_manager.get(tag_id).usage_count == 0

    def test_same_tag_on_many_entries(self, tag_manager, make_tag, make_entry):
        tag_id = make_tag("Subtitles")
        game = make_entry("game")
        app = make_entry("software")

        tag_manager.add_to_entry(("game", game.id), tag_id)
        tag_manager.add_to_entry(("software", app.id), tag_id)

        assert tag_manager.get(tag_id).usage_count == 2
        entry_types = [link.entry_type.value for link in tag_manager.get_entries_with(tag_id)]
        assert entry_types == ["game", "software"]
        assert len(tag_manager.get_entries_with(tag_id, "software")) == 1

    def test_unlink_entry_leaves_other_entries(self, tag_manager, make_tag, make_entry):
        subtitles = make_tag("Subtitles")
        braille = make_tag("Braille")
        game = make_entry("game")
        app = make_entry("software")
        tag_manager.set_for_entry(("game", game.id), [subtitles, braille])
        tag_manager.add_to_entry(("software", app.id), subtitles)

        assert tag_manager.unlink_entry(("game", game.id)) == 2

        assert tag_manager.get_for_entry(("game", game.id)) == []
        assert tag_manager.get(subtitles).usage_count == 1
        assert tag_manager.get(braille).usage_count == 0
        assert [t.name for t in tag_manager.get_for_entry(("software", app.id))] == ["Subtitles"]


class TestSetTags:
    """Test TagManager.set_for_entry()."""

    def test_replaces_the_set(self, tag_manager, make_tag, make_entry):
        a, b, c = make_tag("A"), make_tag("B"), make_tag("C")
        ref = EntryRef.for_entry(make_entry())

        tag_manager.set_for_entry(ref, [a, b])
        tag_manager.set_for_entry(ref, [b, c])

        assert [t.id for t in tag_manager.get_for_entry(ref)] == [b, c]
        assert tag_manager.get(a).usage_count == 0
        assert tag_manager.get(b).usage_count == 1
        assert tag_manager.get(c).usage_count == 1

    def test_kept_links_are_untouched(self, tag_manager, make_tag, make_entry):
        a = make_tag("A")
        ref = EntryRef.for_entry(make_entry())

        first = tag_manager.add_to_entry(ref, a)
        tag_manager.set_for_entry(ref, [a, a])

        assert tag_manager.get_entries_with(a)[0].id == first.id
        assert tag_manager.get(a).usage_count == 1

    def test_empty_set_clears(self, tag_manager, make_tag, make_entry):
        a = make_tag("A")
        ref = EntryRef.for_entry(make_entry())
        tag_manager.set_for_entry(ref, [a])
        tag_manager.set_for_entry(ref, [])

        assert tag_manager.get_for_entry(ref) == []
        assert tag_manager.get(a).usage_count == 0

    def test_unknown_tag_writes_nothing(self, tag_manager, make_tag, make_entry):
        a = make_tag("A")
        ref = EntryRef.for_entry(make_entry())

        with pytest.raises(NotFoundError):
            tag_manager.set_for_entry(ref, [a, 999])

        assert tag_manager.get_for_entry(ref) == []
        assert tag_manager.get(a).usage_count == 0


class TestTagDelete:
    """Test TagManager.delete()."""

    def test_delete_removes_all_links(self, tag_manager, make_tag, make_entry, db_session):
        doomed = make_tag("Doomed")
        kept = make_tag("Kept")
        refs = [EntryRef.for_entry(make_entry(name=f"Game {i}")) for i in range(3)]
        for ref in refs:
            tag_manager.add_to_entry(ref, doomed)
            tag_manager.add_to_entry(ref, kept)

        assert tag_manager.delete(doomed) == 3

        assert tag_manager.get(doomed) is None
        assert db_session.scalars(
            select(EntryTag).where(EntryTag.tag_id == doomed)
        ).all() == []
        assert tag_manager.get(kept).usage_count == 3
        for ref in refs:
            assert [t.id for t in tag_manager.get_for_entry(ref)] == [kept]

    def test_delete_missing_raises(self, tag_manager):
        with pytest.raises(NotFoundError):
            tag_manager.delete(12345)


class TestTagMaintenance:
    """Test dangling links, recount_usage() and prune_dangling()."""

    def test_dangling_link_is_skipped(self, tag_manager, make_tag, make_entry, db_session):
        gone = make_tag("Gone")
        kept = make_tag("Kept")
        ref = EntryRef.for_entry(make_entry())
        tag_manager.set_for_entry(ref, [gone, kept])

        db_session.execute(delete(Tag).where(Tag.id == gone))

        assert [t.id for t in tag_manager.get_for_entry(ref)] == [kept]

    def test_recount_fixes_drift(self, tag_manager, make_tag, make_entry, db_session):
        tag_id = make_tag("Subtitles")
        ref = EntryRef.for_entry(make_entry())
        tag_manager.add_to_entry(ref, tag_id)

        tag = tag_manager.get(tag_id)
        tag.usage_count = 7
        db_session.flush()

        drifted = tag_manager.recount_usage()

        assert [t.id for t in drifted] == [tag_id]
        assert tag_manager.get(tag_id).usage_count == 1
        assert tag_manager.recount_usage() == []

    def test_prune_removes_label_orphans(self, tag_manager, make_tag, make_entry, db_session):
        gone = make_tag("Gone")
        ref = EntryRef.for_entry(make_entry())
        tag_manager.add_to_entry(ref, gone)
        db_session.execute(delete(Tag).where(Tag.id == gone))

        assert tag_manager.prune_dangling() == 1
        assert db_session.scalars(select(EntryTag)).all() == []

    def test_prune_removes_entry_orphans(self, tag_manager, make_tag, make_entry, db_session):
        tag_id = make_tag("Subtitles")
        game = make_entry()
        other = make_entry(name="Other")
        tag_manager.add_to_entry(("game", game.id), tag_id)
        tag_manager.add_to_entry(("game", other.id), tag_id)

        db_session.execute(delete(Game).where(Game.id == game.id))

        assert tag_manager.prune_dangling() == 1
        db_session.expire_all()
        assert tag_manager.get(tag_id).usage_count == 1
        assert tag_manager.prune_dangling() == 0


class TestConcurrentLinks:
    """Two sessions linking the same tag to the same entry at once."""

    def test_racing_adds_create_one_link(self, test_db):
        with test_db.session_scope():
            game = test_db.entries.create("game", "user-1", {"name": "Hades", "overall_rating": 4})
            tag_id = test_db.tags.create({"name": "Subtitles", "accessibility_type": "auditory"})

        barrier = threading.Barrier(2)
        errors = []

        def link():
            session = test_db.SessionLocal()
            try:
                barrier.wait()
                TagManager(session).add_to_entry(("game", game.id), tag_id)
                session.commit()
            except Exception as e:
                session.rollback()
                errors.append(e)
            finally:
                session.close()

        threads = [threading.Thread(target=link) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        with test_db.session_scope() as session:
            assert len(session.scalars(select(EntryTag)).all()) == 1
            assert test_db.tags.get(tag_id).usage_count == 1

    def test_only_write_sessions_begin_immediate(self, test_db):
        write_session = test_db.SessionLocal()
        read_session = test_db.ReadSessionLocal()
        try:
            write_options = write_session.connection().get_execution_options()
            read_options = read_session.connection().get_execution_options()
        finally:
            write_session.close()
            read_session.close()

        assert write_options["sqlite_begin"] == "IMMEDIATE"
        assert "sqlite_begin" not in read_options
