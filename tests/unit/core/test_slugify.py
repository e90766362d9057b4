"""
Tests for slug generation.

A slug is the deduplication key of tags and features, so these tests pin
down the normalization rules exactly.
"""
import pytest

from accessdb.utils.slugify import slugify


class TestSlugify:
    """Tests for slugify()."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Screen Reader Support!", "screen-reader-support"),
            ("  multiple   spaces--here  ", "multiple-spaces-here"),
            ("High_Contrast Mode", "high-contrast-mode"),
            ("One-Handed", "one-handed"),
            ("Closed Captions (CC)", "closed-captions-cc"),
            ("--leading and trailing--", "leading-and-trailing"),
            ("Dyslexia 2.0 font", "dyslexia-20-font"),
        ],
    )
    def test_examples(self, name, expected):
        """Known inputs map to their expected slugs."""
        assert slugify(name) == expected

    def test_punctuation_only_is_empty(self):
        """A name with no word characters produces an empty slug."""
        assert slugify("!!!") == ""

    def test_empty_and_none(self):
        """Empty input and None produce an empty slug."""
        assert slugify("") == ""
        assert slugify(None) == ""

    def test_non_ascii_letters_are_dropped(self):
        """Only ASCII word characters survive."""
        assert slugify("Café Menu") == "caf-menu"

    @pytest.mark.parametrize("space", [" ", " ", "　"])
    def test_unicode_whitespace_separates(self, space):
        assert slugify(f"Screen{space}Reader") == "screen-reader"

    @pytest.mark.parametrize(
        "name",
        ["Screen Reader Support!", "  a  b  ", "Already-a-slug", "___x___"],
    )
    def test_idempotent(self, name):
        """Applying slugify to its own output changes nothing."""
        once = slugify(name)
        assert slugify(once) == once

    def test_case_and_spacing_collide(self):
        """Names differing only in case and separators share a slug."""
        assert slugify("One Handed") == slugify("one-handed") == slugify("ONE_HANDED")
