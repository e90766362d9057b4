"""
Tests for DataValidator.

Covers rating validation, enum coercion and the normalizers used by the
managers before writing.
"""
import pytest

from accessdb.core.exceptions import ValidationError
from accessdb.core.validators import DataValidator
from accessdb.database.models import AccessibilityType, EntryType


class TestValidateRating:
    """Tests for DataValidator.validate_rating()."""

    @pytest.mark.parametrize("value", [1, 3, 5, "4"])
    def test_accepts_valid_ratings(self, value):
        """Integers 1-5 (and their string forms) are accepted."""
        assert DataValidator.validate_rating(value) == int(value)

    @pytest.mark.parametrize("value", [0, 6, -1, 10])
    def test_rejects_out_of_range(self, value):
        """Ratings outside 1-5 raise ValidationError."""
        with pytest.raises(ValidationError, match="between 1 and 5"):
            DataValidator.validate_rating(value)

    @pytest.mark.parametrize("value", [None, True, 2.5, "good"])
    def test_rejects_non_integers(self, value):
        """None, booleans, fractions and words are not ratings."""
        with pytest.raises(ValidationError):
            DataValidator.validate_rating(value)

    def test_error_names_the_field(self):
        """The field name appears in the error message."""
        with pytest.raises(ValidationError, match="overall_rating"):
            DataValidator.validate_rating(9, "overall_rating")

    def test_optional_rating_allows_none(self):
        """An optional rating may be None."""
        assert DataValidator.validate_optional_rating(None, "motor_accessibility") is None
        assert DataValidator.validate_optional_rating(2, "motor_accessibility") == 2


class TestValidateChoice:
    """Tests for DataValidator.validate_choice()."""

    def test_accepts_member_and_value(self):
        """Both enum members and their values are accepted."""
        assert DataValidator.validate_choice("game", EntryType) is EntryType.GAME
        assert (
            DataValidator.validate_choice(AccessibilityType.MOTOR, AccessibilityType)
            is AccessibilityType.MOTOR
        )

    def test_rejects_unknown_value(self):
        """Unknown values list the valid choices."""
        with pytest.raises(ValidationError, match="Expected one of"):
            DataValidator.validate_choice("boardgame", EntryType)


class TestValidateLimit:
    """Tests for DataValidator.validate_limit()."""

    def test_accepts_positive(self):
        assert DataValidator.validate_limit(1) == 1
        assert DataValidator.validate_limit(50) == 50

    @pytest.mark.parametrize("value", [0, -1, True, 2.5, "10", None])
    def test_rejects_non_positive_or_non_int(self, value):
        with pytest.raises(ValidationError, match="limit must be a positive integer"):
            DataValidator.validate_limit(value)


class TestRequiredFields:
    """Tests for DataValidator.validate_required_fields()."""

    def test_passes_when_present(self):
        DataValidator.validate_required_fields({"name": "x", "rating": 0}, ["name", "rating"])

    @pytest.mark.parametrize("data", [{}, {"name": None}, {"name": "   "}])
    def test_missing_or_blank(self, data):
        """Missing, None and whitespace-only values fail."""
        with pytest.raises(ValidationError, match="'name'"):
            DataValidator.validate_required_fields(data, ["name"])


class TestNormalizers:
    """Tests for the normalize_* helpers."""

    def test_normalize_string(self):
        assert DataValidator.normalize_string("  text  ") == "text"
        assert DataValidator.normalize_string("   ") is None
        assert DataValidator.normalize_string(None) is None

    def test_normalize_string_list(self):
        """Blank items are dropped and a bare string becomes a list."""
        assert DataValidator.normalize_string_list([" PC ", "", None, "Switch"]) == [
            "PC",
            "Switch",
        ]
        assert DataValidator.normalize_string_list("PC") == ["PC"]
        assert DataValidator.normalize_string_list(None) == []

    @pytest.mark.parametrize(
        "value, expected",
        [(True, True), ("yes", True), ("off", False), (0, False), (None, None)],
    )
    def test_normalize_bool(self, value, expected):
        assert DataValidator.normalize_bool(value) is expected

    def test_normalize_bool_rejects_garbage(self):
        with pytest.raises(ValidationError):
            DataValidator.normalize_bool("maybe")

    def test_normalize_numbers(self):
        assert DataValidator.normalize_int("2019") == 2019
        assert DataValidator.normalize_int("abc") is None
        assert DataValidator.normalize_float("45.5") == 45.5
        assert DataValidator.normalize_float(True) is None
