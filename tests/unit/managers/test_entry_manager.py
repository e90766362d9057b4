"""
test_entry_manager.py
---------------------
Unit tests for EntryManager.

Covers creation and validation for every category, the stored
completeness flag, ownership rules and cascading deletes.
"""
import pytest
from sqlalchemy import select

from accessdb.core.exceptions import (
    AuthorizationError,
    NotAuthenticatedError,
    NotFoundError,
    ValidationError,
)
from accessdb.database.models import (
    Comment,
    EntryRef,
    EntryTag,
    Game,
    Hardware,
    Place,
    Review,
)


class TestCreateEntry:
    """Test EntryManager.create()."""

    def test_create_minimal_game(self, entry_manager):
        game = entry_manager.create("game", "user-1", {"name": "Hades", "overall_rating": 4})

        assert isinstance(game, Game)
        assert game.id
        assert game.created_by == "user-1"
        assert game.complete is False
        assert game.platforms == []
        assert game.photos == []

    def test_complete_game_is_flagged(self, entry_manager, complete_game_metadata):
        game = entry_manager.create("game", "user-1", complete_game_metadata)
        assert game.complete is True

    def test_complete_place(self, entry_manager, complete_place_metadata):
        place = entry_manager.create("place", "user-1", complete_place_metadata)

        assert isinstance(place, Place)
        assert place.complete is True
        assert place.location_city == "Montreal"
        assert place.wheelchair_accessible is True

    def test_hardware_fields(self, entry_manager):
        pad = entry_manager.create(
            "hardware",
            "user-1",
            {
                "name": "Adaptive Controller",
                "overall_rating": 5,
                "manufacturer": " Microsoft ",
                "model": "1L4",
                "product_type": "controller",
                "compatibility": ["Xbox", "", "PC"],
            },
        )
        assert isinstance(pad, Hardware)
        assert pad.manufacturer == "Microsoft"
        assert pad.compatibility == ["Xbox", "PC"]

    def test_integer_field_is_parsed(self, entry_manager):
        game = entry_manager.create(
            "game", "user-1", {"name": "Hades", "overall_rating": 4, "release_year": "2020"}
        )
        assert game.release_year == 2020

    def test_requires_user(self, entry_manager):
        with pytest.raises(NotAuthenticatedError, match="logged in to create an entry"):
            entry_manager.create("game", None, {"name": "Hades", "overall_rating": 4})

    @pytest.mark.parametrize(
        "metadata",
        [
            {"overall_rating": 4},
            {"name": "  ", "overall_rating": 4},
            {"name": "Hades"},
            {"name": "Hades", "overall_rating": 0},
            {"name": "Hades", "overall_rating": 4, "motor_accessibility": 6},
        ],
    )
    def test_invalid_metadata_writes_nothing(self, entry_manager, db_session, metadata):
        with pytest.raises(ValidationError):
            entry_manager.create("game", "user-1", metadata)
        assert db_session.scalars(select(Game)).all() == []

    def test_unknown_category(self, entry_manager):
        with pytest.raises(ValidationError):
            entry_manager.create("boardgame", "user-1", {"name": "Chess", "overall_rating": 3})

    def test_location_must_be_mapping(self, entry_manager):
        with pytest.raises(ValidationError, match="location"):
            entry_manager.create(
                "place", "user-1", {"name": "Hall", "overall_rating": 3, "location": "here"}
            )


class TestUpdateEntry:
    """Test EntryManager.update()."""

    def test_celeste_loses_completeness(
        self, entry_manager, tag_manager, complete_game_metadata
    ):
        """A complete game with no tags becomes incomplete when platforms are emptied."""
        celeste = entry_manager.create("game", "user-1", complete_game_metadata)
        assert tag_manager.get_for_entry(EntryRef.for_entry(celeste)) == []
        assert celeste.complete is True

        updated = entry_manager.update("game", celeste.id, "user-1", {"platforms": []})

        assert updated.complete is False
        assert updated.updated_at is not None
        assert updated.name == "Celeste"

    def test_update_can_complete_entry(self, entry_manager, complete_game_metadata):
        partial = dict(complete_game_metadata)
        partial.pop("website")
        game = entry_manager.create("game", "user-1", partial)
        assert game.complete is False

        game = entry_manager.update("game", game.id, "user-1", {"website": "https://x.org"})
        assert game.complete is True

    def test_unknown_keys_are_ignored(self, entry_manager, make_entry):
        game = make_entry()
        entry_manager.update("game", game.id, "user-1", {"complete": True, "id": "x"})
        assert game.complete is False
        assert game.id != "x"

    def test_only_owner_may_edit(self, entry_manager, make_entry):
        game = make_entry(user_id="owner")
        with pytest.raises(AuthorizationError, match="only edit entries you created"):
            entry_manager.update("game", game.id, "intruder", {"name": "Mine"})
        assert game.name == "Test game"

    def test_ownerless_entry_is_editable(self, entry_manager, make_entry, db_session):
        game = make_entry()
        game.created_by = None
        db_session.flush()

        entry_manager.update("game", game.id, "anyone", {"name": "Community Edit"})
        assert game.name == "Community Edit"

    def test_missing_entry(self, entry_manager):
        with pytest.raises(NotFoundError, match="Game not found"):
            entry_manager.update("game", "missing", "user-1", {"name": "x"})

    def test_requires_user(self, entry_manager, make_entry):
        game = make_entry()
        with pytest.raises(NotAuthenticatedError):
            entry_manager.update("game", game.id, "  ", {"name": "x"})

    def test_invalid_rating_leaves_entry_unchanged(self, entry_manager, make_entry):
        game = make_entry(overall_rating=3)
        with pytest.raises(ValidationError):
            entry_manager.update("game", game.id, "user-1", {"name": "New", "overall_rating": 7})
        assert game.name == "Test game"
        assert game.overall_rating == 3


class TestDeleteEntry:
    """Test EntryManager.delete()."""

    def test_delete_cascades(
        self,
        entry_manager,
        tag_manager,
        feature_manager,
        comment_manager,
        review_manager,
        make_entry,
        make_tag,
        make_feature,
        db_session,
    ):
        game = make_entry()
        other = make_entry(name="Other")
        ref = EntryRef.for_entry(game)
        tag_id = make_tag("Subtitles")
        feature_id = make_feature("Remappable Controls", "motor")

        tag_manager.add_to_entry(ref, tag_id)
        tag_manager.add_to_entry(EntryRef.for_entry(other), tag_id)
        feature_manager.add_to_entry(ref, feature_id, 4)
        comment_manager.add(ref, "user-2", "Great options menu")
        review_manager.add(ref, "user-2", 5, "Loved it")

        entry_manager.delete("game", game.id, "user-1")

        assert entry_manager.get("game", game.id) is None
        assert tag_manager.get(tag_id).usage_count == 1
        assert feature_manager.get(feature_id).usage_count == 0
        assert db_session.scalars(
            select(EntryTag).where(EntryTag.entry_id == game.id)
        ).all() == []
        assert db_session.scalars(select(Comment)).all() == []
        assert db_session.scalars(select(Review)).all() == []

    def test_only_owner_may_delete(self, entry_manager, make_entry):
        game = make_entry(user_id="owner")
        with pytest.raises(AuthorizationError, match="only delete entries you created"):
            entry_manager.delete("game", game.id, "intruder")
        assert entry_manager.get("game", game.id) is not None

    def test_delete_missing(self, entry_manager):
        with pytest.raises(NotFoundError):
            entry_manager.delete("service", "missing", "user-1")


class TestReadEntries:
    """Test EntryManager.get() and get_all()."""

    def test_get_wrong_category_is_none(self, entry_manager, make_entry):
        game = make_entry()
        assert entry_manager.get("game", game.id) is game
        assert entry_manager.get("software", game.id) is None

    def test_get_all_complete_only(self, entry_manager, make_entry, complete_game_metadata):
        make_entry(name="Partial")
        complete = entry_manager.create("game", "user-1", complete_game_metadata)

        assert len(entry_manager.get_all("game")) == 2
        assert entry_manager.get_all("game", complete_only=True) == [complete]

    def test_get_all_rejects_negative_limit(self, entry_manager, make_entry):
        make_entry()
        with pytest.raises(ValidationError, match="limit"):
            entry_manager.get_all("game", limit=-1)

    def test_to_dict_has_category(self, make_entry):
        data = make_entry("service", name="Relay").to_dict()
        assert data["category"] == "service"
        assert data["name"] == "Relay"
