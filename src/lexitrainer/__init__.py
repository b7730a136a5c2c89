"""lexitrainer: answer evaluation and review scheduling for vocabulary drills.

Matching (typed, spoken), import duplicate detection and SM-2 scheduling.
"""

__all__ = [
    "normalize",
    "distance",
    "languages",
    "fuzzy_match",
    "phonetic",
    "answer_extractor",
    "detect_duplicates",
    "scheduler",
    "difficulty",
    "review",
    "vocabulary",
    "store",
    "ingest",
    "report",
    "config",
]
