"""Phonetic matching for spoken answers.

Speech recognition runs in the learner's native-language mode, so a spoken
foreign word often arrives spelled as a native-language approximation
("le shien" for "le chien"). This module rewrites such spellings toward the
canonical form and combines several scoring strategies into one verdict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from .distance import similarity
from .languages import MISHEARD_WORDS, PHONETIC_SUBSTITUTIONS, articles_for, resolve_language
from .normalize import normalize

EXACT = "exact"
FUZZY = "fuzzy"
PHONETIC = "phonetic"
PARTIAL = "partial"
NONE = "none"

FUZZY_THRESHOLD = 0.85
PHONETIC_THRESHOLD = 0.8
PARTIAL_MIN_RATIO = 0.5
CORE_WORD_THRESHOLD = 0.8
MISHEARD_CONFIDENCE = 0.9


@dataclass(frozen=True)
class CombinedMatch:
    is_match: bool
    confidence: float
    match_type: str
    normalized_expected: str = ""
    normalized_actual: str = ""


def phonetic_normalize(text: str, language: Optional[str]) -> str:
    """Lowercase and apply the language's recognizer substitutions in order."""
    normalized = normalize(text)
    code = resolve_language(language)
    for source, target in PHONETIC_SUBSTITUTIONS.get(code, ()):
        normalized = normalized.replace(source, target)
    return normalized


def phonetic_similarity(a: str, b: str) -> float:
    """Similarity of two phonetically normalized strings.

    Word breaks are unreliable in transcripts, so the space-free comparison
    is also tried and the better score wins.
    """
    if a == b:
        return 1.0
    a_joined = a.replace(" ", "")
    b_joined = b.replace(" ", "")
    if a_joined == b_joined:
        return 0.95
    return max(similarity(a, b), similarity(a_joined, b_joined))


def is_known_mishearing(actual: str, expected: str, language: Optional[str]) -> bool:
    """True if the transcript is a known recognizer variant of the expected answer."""
    code = resolve_language(language)
    variants = MISHEARD_WORDS.get(code, {}).get(normalize(expected), ())
    padded = f" {normalize(actual)} "
    return any(f" {variant} " in padded for variant in variants)


def phonetic_match(actual: str, expected: str, language: Optional[str]) -> Tuple[bool, float]:
    """Return (is_match, confidence) for a transcript against the expected answer."""
    actual_norm = phonetic_normalize(actual, language)
    expected_norm = phonetic_normalize(expected, language)
    if actual_norm == expected_norm:
        return True, 1.0
    if is_known_mishearing(actual, expected, language):
        return True, MISHEARD_CONFIDENCE
    score = phonetic_similarity(actual_norm, expected_norm)
    return score >= PHONETIC_THRESHOLD, score


@dataclass
class _Attempt:
    actual: str
    expected: str
    language: Optional[str]
    scores: Dict[str, float] = field(default_factory=dict)


Strategy = Callable[[_Attempt], Optional[Tuple[str, float]]]


def _exact(attempt: _Attempt) -> Optional[Tuple[str, float]]:
    if attempt.actual == attempt.expected:
        return EXACT, 1.0
    return None


def _misheard(attempt: _Attempt) -> Optional[Tuple[str, float]]:
    if is_known_mishearing(attempt.actual, attempt.expected, attempt.language):
        return PHONETIC, MISHEARD_CONFIDENCE
    return None


def _fuzzy(attempt: _Attempt) -> Optional[Tuple[str, float]]:
    score = similarity(attempt.actual, attempt.expected)
    attempt.scores[FUZZY] = score
    if score >= FUZZY_THRESHOLD:
        return FUZZY, score
    return None


def _phonetic(attempt: _Attempt) -> Optional[Tuple[str, float]]:
    is_match, score = phonetic_match(attempt.actual, attempt.expected, attempt.language)
    attempt.scores[PHONETIC] = score
    if is_match:
        return PHONETIC, score
    return None


def _partial(attempt: _Attempt) -> Optional[Tuple[str, float]]:
    a, b = attempt.actual, attempt.expected
    if not a or not b or (a not in b and b not in a):
        return None
    ratio = min(len(a), len(b)) / max(len(a), len(b))
    if ratio >= PARTIAL_MIN_RATIO:
        return PARTIAL, ratio * 0.9
    return None


def _core_words(text: str, language: Optional[str]) -> str:
    articles = articles_for(language)
    words = []
    for word in text.split():
        if word in articles:
            continue
        for article in articles:
            if article.endswith("'") and word.startswith(article) and len(word) > len(article):
                word = word[len(article):]
                break
        words.append(word)
    return " ".join(words)


def _core_word(attempt: _Attempt) -> Optional[Tuple[str, float]]:
    actual_core = _core_words(attempt.actual, attempt.language)
    expected_core = _core_words(attempt.expected, attempt.language)
    if not actual_core or not expected_core:
        return None
    score = similarity(actual_core, expected_core)
    if score >= CORE_WORD_THRESHOLD:
        return PARTIAL, score * 0.85
    return None


# Evaluated in order; the first strategy that accepts wins.
STRATEGIES: Tuple[Strategy, ...] = (_exact, _misheard, _fuzzy, _phonetic, _partial, _core_word)


def combined_match(actual: str, expected: str, language: Optional[str]) -> CombinedMatch:
    """Match a spoken answer against the expected answer.

    Unknown languages skip the substitution and misheard-word tables, which
    leaves the phonetic step equivalent to a plain fuzzy comparison.
    """
    attempt = _Attempt(normalize(actual), normalize(expected), resolve_language(language))
    for strategy in STRATEGIES:
        hit = strategy(attempt)
        if hit is not None:
            match_type, confidence = hit
            return CombinedMatch(True, confidence, match_type, attempt.expected, attempt.actual)
    return CombinedMatch(
        False,
        max(attempt.scores.values(), default=0.0),
        NONE,
        attempt.expected,
        attempt.actual,
    )
