"""Pull the learner's actual answer out of a voice transcript.

Handles voice commands ("nochmal", "skip"), "don't know" phrases and filler
words before the answer reaches the combined matcher.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

from .distance import similarity
from .languages import DONT_KNOW_PHRASES, FILLER_WORDS, VOICE_COMMANDS, resolve_language
from .normalize import collapse_whitespace, normalize

ANSWER = "answer"
COMMAND = "command"
DONT_KNOW = "dont_know"
UNCLEAR = "unclear"
EMPTY = "empty"

WINDOW_MIN_CONFIDENCE = 0.6
FALLBACK_CONFIDENCE = 0.5


@dataclass(frozen=True)
class ExtractionResult:
    type: str
    value: str
    confidence: float
    original_transcript: str
    command: Optional[str] = None


def _language_keys(language: Optional[str]) -> Tuple[str, ...]:
    # English phrases are always understood as well.
    code = resolve_language(language)
    if code is None or code == "en":
        return ("en",)
    return (code, "en")


@lru_cache(maxsize=512)
def _phrase_re(phrase: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)")


def _contains_phrase(text: str, phrases: Iterable[str]) -> bool:
    return any(_phrase_re(p).search(text) for p in phrases)


def detect_command(text: str, language: Optional[str]) -> Optional[str]:
    """Return the voice command named in the transcript, if any."""
    for key in _language_keys(language):
        for command, patterns in VOICE_COMMANDS.get(key, {}).items():
            if _contains_phrase(text, patterns):
                return command
    return None


def is_dont_know(text: str, language: Optional[str]) -> bool:
    return any(_contains_phrase(text, DONT_KNOW_PHRASES.get(key, ())) for key in _language_keys(language))


def remove_filler_words(text: str, language: Optional[str]) -> str:
    fillers: List[str] = []
    for key in _language_keys(language):
        fillers.extend(FILLER_WORDS.get(key, ()))
    cleaned = text
    for filler in sorted(set(fillers), key=len, reverse=True):
        cleaned = _phrase_re(filler).sub(" ", cleaned)
    return collapse_whitespace(cleaned)


def best_matching_window(transcript: str, expected: str) -> Tuple[str, float]:
    """Slide a window of the expected word count (and +/- 1) over the transcript."""
    words = transcript.split()
    if not words:
        return "", 0.0
    expected = normalize(expected)
    size = len(expected.split()) or 1
    if len(words) <= size:
        return transcript, 0.8

    best, best_score = "", 0.0
    for window in (size, size - 1, size + 1):
        if window <= 0 or window > len(words):
            continue
        for start in range(len(words) - window + 1):
            candidate = " ".join(words[start:start + window])
            score = similarity(candidate, expected)
            if score > best_score:
                best, best_score = candidate, score
    return best or transcript, best_score


def extract_answer(
    transcript: str,
    expected: str,
    target_language: Optional[str],
    source_language: Optional[str] = "german",
) -> ExtractionResult:
    """Classify a transcript and extract the answer portion.

    Commands and "don't know" phrases are recognized in both the question and
    the answer language.
    """
    original = transcript or ""
    text = normalize(original)
    if not text:
        return ExtractionResult(EMPTY, "", 0.0, original)

    command = detect_command(text, source_language) or detect_command(text, target_language)
    if command:
        return ExtractionResult(COMMAND, "", 1.0, original, command=command)

    if is_dont_know(text, source_language) or is_dont_know(text, target_language):
        return ExtractionResult(DONT_KNOW, "", 1.0, original)

    cleaned = remove_filler_words(text, target_language)
    if not cleaned:
        return ExtractionResult(UNCLEAR, "", 0.0, original)

    if len(cleaned.split()) <= 3:
        return ExtractionResult(ANSWER, cleaned, 0.9, original)

    match, confidence = best_matching_window(cleaned, expected)
    if confidence > WINDOW_MIN_CONFIDENCE:
        return ExtractionResult(ANSWER, match, confidence, original)
    # No window resembles the answer; hand over the whole utterance.
    return ExtractionResult(ANSWER, cleaned, FALLBACK_CONFIDENCE, original)
