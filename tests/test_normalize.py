"""Tests for text normalization."""

from lexitrainer.normalize import (
    collapse_whitespace,
    normalize,
    normalize_for_duplicate,
    strip_accents,
    strip_leading_article,
)


class TestNormalize:
    """Test answer normalization."""

    def test_lowercase_trim_and_collapse(self):
        """Case and whitespace differences disappear."""
        assert normalize("  Der   Hund ") == "der hund"

    def test_accents_kept_by_default(self):
        """Diacritics survive unless stripping is requested."""
        assert normalize("Café") == "café"

    def test_strip_diacritics(self):
        """Combining marks are removed on request."""
        assert normalize("Café", strip_diacritics=True) == "cafe"
        assert normalize("Mädchen", strip_diacritics=True) == "madchen"

    def test_decomposed_input_is_composed(self):
        """A decomposed é compares equal to the precomposed one."""
        assert normalize("café") == normalize("café")

    def test_empty_and_none(self):
        """Empty input yields empty output."""
        assert normalize("") == ""
        assert normalize(None) == ""

    def test_helpers(self):
        assert strip_accents("señor") == "senor"
        assert collapse_whitespace("a \t b\n c") == "a b c"


class TestDuplicateNormalization:
    """Test normalization of import fields."""

    def test_german_article_dropped(self):
        assert normalize_for_duplicate("Der Hund.", "german") == "hund"

    def test_elided_french_article(self):
        assert normalize_for_duplicate("l'eau", "french") == "eau"

    def test_unknown_language_uses_all_articles(self):
        """Without a language any German, French or Spanish article is dropped."""
        assert normalize_for_duplicate("La Maison!", None) == "maison"
        assert normalize_for_duplicate("das Haus", None) == "haus"

    def test_article_prefix_inside_word_kept(self):
        """"la" is only an article when a space follows it."""
        assert normalize_for_duplicate("Lapin", "french") == "lapin"

    def test_only_one_article_removed(self):
        assert strip_leading_article("die die", "de") == "die"

    def test_accents_kept(self):
        assert normalize_for_duplicate("le café", "fr") == "café"

    def test_empty(self):
        assert normalize_for_duplicate("", "de") == ""
