import datetime
import logging
import math
from dataclasses import dataclass, replace
from typing import Optional

logger = logging.getLogger(__name__)

MIN_EASE_FACTOR = 1.3
DEFAULT_EASE_FACTOR = 2.5
PASS_THRESHOLD = 3
MASTERED_INTERVAL = 21

USER_RATINGS = {"didnt_know": 1, "almost": 3, "knew_it": 5}
PARENT_RATINGS = {"incorrect": 1, "almost": 3, "correct": 5}


@dataclass(frozen=True)
class LearningProgress:
    """Per-item SM-2 state plus review statistics.

    Treated as an immutable value: every grading returns a new instance.
    """
    vocabulary_id: Optional[str] = None
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0
    repetitions: int = 0
    total_reviews: int = 0
    correct_reviews: int = 0
    next_review_date: Optional[datetime.date] = None
    last_review_date: Optional[datetime.date] = None


def default_progress(vocabulary_id: Optional[str] = None) -> LearningProgress:
    return LearningProgress(vocabulary_id=vocabulary_id)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def next_ease_factor(ease_factor: float, quality: int) -> float:
    """EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3."""
    miss = 5 - quality
    return max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def schedule(
    progress: Optional[LearningProgress],
    quality: int,
    today: Optional[datetime.date] = None,
    vocabulary_id: Optional[str] = None,
    correct: Optional[bool] = None,
) -> LearningProgress:
    """
    SM-2 scheduling step.

    Quality grades (0-5):
      0 – complete blackout
      1 – wrong, correct answer remembered after seeing it
      2 – wrong, but the correct answer seemed easy
      3 – correct with serious difficulty
      4 – correct after some hesitation
      5 – perfect, instant recall

    Rules:
      q < 3  → repetitions 0, interval 1 day, ease factor unchanged.
      q >= 3 → repetitions + 1; interval 1 day on the first repetition,
               6 on the second, otherwise round(interval × ease factor)
               with the ease factor from before this review; the ease
               factor is then updated (floor 1.3, no ceiling).

    ``progress`` None means the item has never been reviewed. ``correct``
    defaults to q >= 3 and only feeds the review statistics.
    """
    if progress is None:
        progress = default_progress(vocabulary_id)
    quality = max(0, min(5, int(quality)))
    if correct is None:
        correct = quality >= PASS_THRESHOLD

    if quality < PASS_THRESHOLD:
        repetitions = 0
        interval = 1
        ease_factor = progress.ease_factor
    else:
        repetitions = progress.repetitions + 1
        if repetitions == 1:
            interval = 1
        elif repetitions == 2:
            interval = 6
        else:
            interval = max(1, _round_half_up(progress.interval * progress.ease_factor))
        ease_factor = next_ease_factor(progress.ease_factor, quality)

    review_date = today or datetime.date.today()
    if progress.last_review_date and review_date < progress.last_review_date:
        logger.debug(
            "Review date %s precedes last review %s; keeping the later date",
            review_date, progress.last_review_date,
        )
        review_date = progress.last_review_date

    return replace(
        progress,
        vocabulary_id=progress.vocabulary_id or vocabulary_id,
        ease_factor=ease_factor,
        interval=interval,
        repetitions=repetitions,
        total_reviews=progress.total_reviews + 1,
        correct_reviews=progress.correct_reviews + (1 if correct else 0),
        last_review_date=review_date,
        next_review_date=review_date + datetime.timedelta(days=interval),
    )


def map_user_rating(rating: str) -> int:
    """Map a learner's self-assessment ("didnt_know" / "almost" / "knew_it")."""
    if rating not in USER_RATINGS:
        raise ValueError(f"Unknown rating: {rating!r}")
    return USER_RATINGS[rating]


def map_parent_rating(rating: str) -> int:
    """Map a parent's verdict ("incorrect" / "almost" / "correct")."""
    if rating not in PARENT_RATINGS:
        raise ValueError(f"Unknown parent rating: {rating!r}")
    return PARENT_RATINGS[rating]


def mastery_level(interval: int) -> str:
    if interval == 0:
        return "new"
    if interval >= MASTERED_INTERVAL:
        return "mastered"
    return "learning"


def is_due(progress: Optional[LearningProgress], today: Optional[datetime.date] = None) -> bool:
    """New items (no progress or no date yet) are always due."""
    if progress is None or progress.next_review_date is None:
        return True
    return progress.next_review_date <= (today or datetime.date.today())
