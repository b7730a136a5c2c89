"""Grade answers and turn verdicts into SM-2 quality ratings.

Each ``grade_*`` function is pure: it takes the item, the answer and the
current progress (None for a first review) and returns the verdict together
with the replacement progress. ``record_review`` is the read-modify-write
against a store.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Optional, Union

from .answer_extractor import ANSWER, ExtractionResult, extract_answer
from .fuzzy_match import NORMAL, MatchResult, check_answer, has_accent_mismatch_only
from .phonetic import EXACT, NONE, CombinedMatch, combined_match
from .scheduler import LearningProgress, map_parent_rating, map_user_rating, schedule
from .vocabulary import VocabularyItem

logger = logging.getLogger(__name__)

SOURCE_TO_TARGET = "source_to_target"
TARGET_TO_SOURCE = "target_to_source"


@dataclass(frozen=True)
class ReviewOutcome:
    is_correct: bool
    quality: int
    progress: LearningProgress
    match: Optional[Union[MatchResult, CombinedMatch]] = None
    extraction: Optional[ExtractionResult] = None
    accent_mismatch_only: bool = False


def expected_answer(item: VocabularyItem, direction: str = SOURCE_TO_TARGET) -> str:
    if direction == TARGET_TO_SOURCE:
        return item.source_text
    return item.target_text


def quality_for_typed(match: MatchResult, accent_only: bool = False) -> int:
    if match.is_correct:
        return 5 if match.similarity >= 1.0 else 4
    if accent_only:
        return 3
    return 1


def quality_for_voice(match: CombinedMatch) -> int:
    if match.is_match:
        if match.confidence >= 0.95:
            return 5
        if match.confidence >= 0.8:
            return 4
        return 3
    return 2 if match.confidence >= 0.5 else 1


def grade_typed_answer(
    item: VocabularyItem,
    answer: str,
    progress: Optional[LearningProgress],
    strictness: str = NORMAL,
    direction: str = SOURCE_TO_TARGET,
    today: Optional[datetime.date] = None,
) -> ReviewOutcome:
    expected = expected_answer(item, direction)
    match = check_answer(expected, answer, strictness)
    accent_only = not match.is_correct and has_accent_mismatch_only(expected, answer)
    quality = quality_for_typed(match, accent_only)
    new_progress = schedule(progress, quality, today=today, vocabulary_id=item.id, correct=match.is_correct)
    return ReviewOutcome(match.is_correct, quality, new_progress, match=match, accent_mismatch_only=accent_only)


def grade_voice_answer(
    item: VocabularyItem,
    transcript: str,
    progress: Optional[LearningProgress],
    language: Optional[str],
    direction: str = SOURCE_TO_TARGET,
    source_language: Optional[str] = "german",
    today: Optional[datetime.date] = None,
) -> Optional[ReviewOutcome]:
    """Grade a spoken answer.

    Returns None for voice commands, which are not answers and leave the
    schedule untouched. Empty, unclear and "don't know" transcripts grade as
    a miss with quality 1.
    """
    expected = expected_answer(item, direction)
    answer_language = language if direction == SOURCE_TO_TARGET else source_language
    question_language = source_language if direction == SOURCE_TO_TARGET else language
    extraction = extract_answer(transcript, expected, answer_language, question_language)

    if extraction.command:
        logger.debug("Voice command %r for item %s", extraction.command, item.id)
        return None
    if extraction.type != ANSWER:
        new_progress = schedule(progress, 1, today=today, vocabulary_id=item.id, correct=False)
        return ReviewOutcome(False, 1, new_progress, extraction=extraction)

    match = combined_match(extraction.value, expected, answer_language)
    quality = quality_for_voice(match)
    new_progress = schedule(progress, quality, today=today, vocabulary_id=item.id, correct=match.is_match)
    return ReviewOutcome(match.is_match, quality, new_progress, match=match, extraction=extraction)


def grade_choice(
    item: VocabularyItem,
    selected: str,
    progress: Optional[LearningProgress],
    direction: str = SOURCE_TO_TARGET,
    today: Optional[datetime.date] = None,
) -> ReviewOutcome:
    """Grade a multiple-choice selection; options are exact strings."""
    expected = expected_answer(item, direction)
    is_correct = (selected or "").strip() == expected.strip()
    quality = 5 if is_correct else 1
    new_progress = schedule(progress, quality, today=today, vocabulary_id=item.id, correct=is_correct)
    match = CombinedMatch(is_correct, 1.0 if is_correct else 0.0, EXACT if is_correct else NONE, expected, selected or "")
    return ReviewOutcome(is_correct, quality, new_progress, match=match)


def grade_rating(
    item: VocabularyItem,
    rating: str,
    progress: Optional[LearningProgress],
    parent: bool = False,
    today: Optional[datetime.date] = None,
) -> ReviewOutcome:
    """Grade a flashcard self-rating, or a parent's rating when ``parent`` is set.

    Only the top rating ("knew_it" / "correct") counts as a correct review.
    """
    quality = map_parent_rating(rating) if parent else map_user_rating(rating)
    is_correct = quality == 5
    new_progress = schedule(progress, quality, today=today, vocabulary_id=item.id, correct=is_correct)
    return ReviewOutcome(is_correct, quality, new_progress)


def record_review(
    store,
    vocabulary_id: str,
    quality: int,
    correct: Optional[bool] = None,
    today: Optional[datetime.date] = None,
) -> LearningProgress:
    """Apply one grading to the stored progress, creating it on first review.

    Raises:
        KeyError: If the vocabulary item does not exist or is deleted
    """
    item = store.get_item(vocabulary_id)
    if item is None or item.is_deleted:
        raise KeyError(f"Unknown vocabulary item: {vocabulary_id}")
    current = store.get_progress(vocabulary_id)
    updated = schedule(current, quality, today=today, vocabulary_id=vocabulary_id, correct=correct)
    store.save_progress(updated)
    logger.info(
        "Reviewed %s with quality %d: next review %s (interval %d)",
        vocabulary_id, quality, updated.next_review_date, updated.interval,
    )
    return updated
