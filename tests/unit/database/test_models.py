"""
Tests for model helpers: EntryRef, enums, model lookup and the Place
location property.
"""
import pytest

from accessdb.core.exceptions import ValidationError
from accessdb.database.models import (
    ENTRY_MODELS,
    AccessibilityType,
    EntryRef,
    EntryType,
    Game,
    Place,
    Service,
    model_for,
)


class TestEntryRef:
    """Tests for EntryRef."""

    def test_of_coerces_category(self):
        ref = EntryRef.of("game", "abc")
        assert ref.entry_type is EntryType.GAME
        assert ref.entry_id == "abc"

    def test_trims_entry_id(self):
        assert EntryRef.of("place", "  abc  ").entry_id == "abc"

    def test_rejects_unknown_category(self):
        with pytest.raises(ValidationError):
            EntryRef.of("boardgame", "abc")

    def test_rejects_empty_id(self):
        with pytest.raises(ValidationError, match="Entry id cannot be empty"):
            EntryRef.of("game", "  ")

    def test_coerce_tuple(self):
        assert EntryRef.coerce(("service", "x1")) == EntryRef.of("service", "x1")

    def test_coerce_passthrough(self):
        ref = EntryRef.of("game", "x1")
        assert EntryRef.coerce(ref) is ref

    def test_coerce_rejects_other_shapes(self):
        with pytest.raises(ValidationError):
            EntryRef.coerce(("game",))

    def test_equal_refs_hash_equal(self):
        assert len({EntryRef.of("game", "a"), EntryRef.of(EntryType.GAME, "a")}) == 1

    def test_str(self):
        assert str(EntryRef.of("hardware", "h1")) == "hardware:h1"

    def test_for_entry(self):
        game = Game(id="g1", name="Hades", overall_rating=4)
        assert EntryRef.for_entry(game) == EntryRef.of("game", "g1")


class TestEnums:
    """Tests for EntryType and AccessibilityType."""

    def test_entry_type_choices(self):
        assert EntryType.choices() == ["game", "hardware", "place", "software", "service"]

    def test_table_names(self):
        assert EntryType.GAME.table_name == "games"
        assert EntryType.PLACE.table_name == "places"
        assert EntryType.SERVICE.table_name == "services"

    def test_accessibility_type_choices(self):
        assert AccessibilityType.choices() == [
            "visual",
            "auditory",
            "motor",
            "cognitive",
            "general",
        ]

    def test_display_name(self):
        assert EntryType.SOFTWARE.display_name == "Software"


class TestModelLookup:
    """Tests for ENTRY_MODELS and model_for()."""

    def test_every_category_has_a_model(self):
        assert set(ENTRY_MODELS) == set(EntryType)

    def test_model_for_accepts_values(self):
        assert model_for("service") is Service
        assert model_for(EntryType.GAME) is Game

    def test_table_names_match(self):
        for entry_type, model in ENTRY_MODELS.items():
            assert model.__tablename__ == entry_type.table_name
            assert model.category is entry_type


class TestPlaceLocation:
    """Tests for the Place.location property."""

    def test_round_trip(self):
        place = Place(name="Museum", overall_rating=4)
        place.location = {"address": "1 Quai", "city": "Lyon", "latitude": 45.76}

        assert place.location_city == "Lyon"
        assert place.location == {
            "address": "1 Quai",
            "city": "Lyon",
            "country": None,
            "latitude": 45.76,
            "longitude": None,
        }

    def test_none_clears(self):
        place = Place(name="Museum", overall_rating=4)
        place.location = {"city": "Lyon"}
        place.location = None
        assert place.location_city is None
