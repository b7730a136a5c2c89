"""Tests for typed-answer fuzzy matching."""

import logging

import pytest

from lexitrainer.fuzzy_match import (
    LENIENT,
    NORMAL,
    STRICT,
    DifferenceSegment,
    check_answer,
    has_accent_mismatch_only,
    highlight_differences,
    similarity_threshold,
)


class TestCheckAnswer:
    """Test check_answer across strictness levels."""

    def test_accents_strict(self):
        """Strict mode requires matching accents."""
        result = check_answer("café", "cafe", STRICT)
        assert result.is_correct is False
        assert result.distance == 1

    def test_accents_normal(self):
        """Normal mode ignores accents."""
        result = check_answer("café", "cafe", NORMAL)
        assert result.is_correct is True
        assert result.similarity == 1.0
        assert result.distance == 0
        assert result.normalized_expected == "cafe"

    def test_case_and_whitespace_ignored_in_strict(self):
        assert check_answer("Der Hund", "  der   hund ", STRICT).is_correct is True

    @pytest.mark.parametrize("word", ["hund", "la maison", "schmetterling", "año"])
    def test_identical_answer_correct(self, word):
        assert check_answer(word, word, NORMAL).is_correct is True

    def test_small_typo_accepted_in_normal(self):
        result = check_answer("schmetterling", "schmeterling", NORMAL)
        assert result.is_correct is True
        assert result.similarity == pytest.approx(12 / 13)

    def test_lenient_accepts_more(self):
        """0.75 similarity fails normal but passes lenient."""
        assert check_answer("haus", "maus", NORMAL).is_correct is False
        assert check_answer("haus", "maus", LENIENT).is_correct is True

    def test_empty_answer_not_correct(self):
        result = check_answer("hund", "", NORMAL)
        assert result.is_correct is False
        assert result.similarity == 0.0
        assert result.distance == 4

    def test_both_empty(self):
        """Two empty strings are identical."""
        result = check_answer("", "", NORMAL)
        assert result.similarity == 1.0

    def test_unknown_strictness_falls_back_to_normal(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert similarity_threshold("sloppy") == similarity_threshold(NORMAL)
        assert "sloppy" in caplog.text


class TestHighlightDifferences:
    """Test difference runs over the expected answer."""

    def test_substitution_highlighted(self):
        segments = highlight_differences("hund", "hand")
        assert segments == [
            DifferenceSegment("h", False),
            DifferenceSegment("u", True),
            DifferenceSegment("nd", False),
        ]

    def test_accent_slip_not_highlighted(self):
        assert highlight_differences("café", "cafe") == [DifferenceSegment("café", False)]

    def test_missing_answer_highlights_everything(self):
        assert highlight_differences("hund", "") == [DifferenceSegment("hund", True)]

    def test_empty_expected(self):
        assert highlight_differences("", "hund") == []

    def test_runs_rebuild_expected(self):
        segments = highlight_differences("der Schmetterling", "der Schmeterlink")
        assert "".join(s.text for s in segments) == "der Schmetterling"
        assert any(s.is_highlighted for s in segments)


class TestAccentMismatch:
    """Test the accent-only 'almost' signal."""

    def test_accent_only(self):
        assert has_accent_mismatch_only("café", "cafe") is True

    def test_identical(self):
        assert has_accent_mismatch_only("café", "café") is False

    def test_real_error(self):
        assert has_accent_mismatch_only("café", "cafa") is False
