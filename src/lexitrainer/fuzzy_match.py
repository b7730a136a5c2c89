"""Fuzzy answer checking for typed answers.

Strictness levels:
- strict: exact match after case/whitespace normalization; accents must match
- normal: accents ignored, similarity >= 0.85
- lenient: accents ignored, similarity >= 0.70
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import List

from .distance import levenshtein_distance
from .normalize import normalize, normalize_text_nfc, strip_accents

logger = logging.getLogger(__name__)

STRICT = "strict"
NORMAL = "normal"
LENIENT = "lenient"
STRICTNESS_LEVELS = (STRICT, NORMAL, LENIENT)

_THRESHOLDS = {
    STRICT: 1.0,
    NORMAL: 0.85,
    LENIENT: 0.70,
}


@dataclass(frozen=True)
class MatchResult:
    is_correct: bool
    similarity: float
    distance: int
    normalized_expected: str
    normalized_actual: str


@dataclass(frozen=True)
class DifferenceSegment:
    """A run of the expected answer, flagged when it differs from the given answer."""
    text: str
    is_highlighted: bool


def similarity_threshold(strictness: str) -> float:
    """Minimum similarity for a strictness level; unknown levels use "normal"."""
    if strictness not in _THRESHOLDS:
        logger.warning("Unknown strictness %r, falling back to %r", strictness, NORMAL)
        return _THRESHOLDS[NORMAL]
    return _THRESHOLDS[strictness]


def check_answer(expected: str, actual: str, strictness: str = NORMAL) -> MatchResult:
    """Decide whether a typed answer counts as correct."""
    threshold = similarity_threshold(strictness)
    strip_diacritics = strictness != STRICT

    norm_expected = normalize(expected, strip_diacritics=strip_diacritics)
    norm_actual = normalize(actual, strip_diacritics=strip_diacritics)

    if norm_expected == norm_actual:
        return MatchResult(True, 1.0, 0, norm_expected, norm_actual)

    dist = levenshtein_distance(norm_expected, norm_actual)
    max_len = max(len(norm_expected), len(norm_actual))
    sim = 1.0 - dist / max_len
    is_correct = bool(norm_expected and norm_actual) and sim >= threshold
    return MatchResult(is_correct, sim, dist, norm_expected, norm_actual)


def _compare_key(ch: str) -> str:
    return strip_accents(ch).lower()


def highlight_differences(expected: str, actual: str) -> List[DifferenceSegment]:
    """Split the expected answer into runs, highlighting what the answer got wrong.

    Accent-only slips are not highlighted: if the accent-stripped forms agree
    the whole expected string comes back as one plain run.
    """
    expected = normalize_text_nfc(expected)
    actual = normalize_text_nfc(actual)
    if not expected:
        return []
    if normalize(expected, strip_diacritics=True) == normalize(actual, strip_diacritics=True):
        return [DifferenceSegment(expected, False)]

    matched = [False] * len(expected)
    matcher = SequenceMatcher(
        None,
        [_compare_key(ch) for ch in expected],
        [_compare_key(ch) for ch in actual],
        autojunk=False,
    )
    for block in matcher.get_matching_blocks():
        for i in range(block.a, block.a + block.size):
            matched[i] = True

    segments: List[DifferenceSegment] = []
    run_start = 0
    for i in range(1, len(expected) + 1):
        if i == len(expected) or matched[i] != matched[run_start]:
            segments.append(DifferenceSegment(expected[run_start:i], not matched[run_start]))
            run_start = i
    return segments


def has_accent_mismatch_only(expected: str, actual: str) -> bool:
    """True when the answer is right except for accents."""
    return (
        normalize(expected, strip_diacritics=True) == normalize(actual, strip_diacritics=True)
        and normalize(expected) != normalize(actual)
    )
