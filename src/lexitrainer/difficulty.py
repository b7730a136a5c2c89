"""Difficulty tiers for vocabulary the learner keeps getting wrong.

Tiers come from lifetime accuracy only; recent and old reviews weigh the same.
"""

from __future__ import annotations

from typing import Optional

from .scheduler import LearningProgress

STRUGGLING = "struggling"
VERY_HARD = "very_hard"
HARD = "hard"

MIN_REVIEWS = 2
MIN_REVIEWS_FOR_HARD = 3


def difficulty_level(progress: Optional[LearningProgress]) -> Optional[str]:
    if progress is None or progress.total_reviews < MIN_REVIEWS:
        return None
    accuracy = progress.correct_reviews / progress.total_reviews
    if accuracy < 0.3:
        return STRUGGLING
    if accuracy < 0.5:
        return VERY_HARD
    if accuracy < 0.7 and progress.total_reviews >= MIN_REVIEWS_FOR_HARD:
        return HARD
    return None


def is_difficult(progress: Optional[LearningProgress]) -> bool:
    return difficulty_level(progress) is not None
