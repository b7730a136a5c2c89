"""Tests for Levenshtein distance and similarity."""

import itertools

import pytest

from lexitrainer.distance import levenshtein_distance, similarity

WORDS = ["", "a", "hund", "hand", "kitten", "sitting", "chien", "le chien", "café", "cafe"]


class TestLevenshteinDistance:
    """Test the edit distance primitive."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("kitten", "sitting", 3),
            ("", "abc", 3),
            ("abc", "", 3),
            ("hund", "hand", 1),
            ("café", "cafe", 1),
            ("flaw", "lawn", 2),
        ],
    )
    def test_known_distances(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_identity(self):
        for word in WORDS:
            assert levenshtein_distance(word, word) == 0

    def test_symmetry(self):
        for a, b in itertools.product(WORDS, repeat=2):
            assert levenshtein_distance(a, b) == levenshtein_distance(b, a)

    def test_triangle_inequality(self):
        for a, b, c in itertools.product(WORDS, repeat=3):
            assert levenshtein_distance(a, c) <= levenshtein_distance(a, b) + levenshtein_distance(b, c)


class TestSimilarity:
    """Test the similarity ratio."""

    def test_equal_strings(self):
        assert similarity("hund", "hund") == 1.0

    def test_both_empty(self):
        assert similarity("", "") == 1.0

    def test_one_empty(self):
        assert similarity("hund", "") == 0.0

    def test_ratio(self):
        assert similarity("café", "cafe") == pytest.approx(0.75)
