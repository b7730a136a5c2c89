"""Levenshtein edit distance and the similarity ratio built on it."""

from __future__ import annotations

from typing import List


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character inserts, deletes and substitutions."""
    a = a or ""
    b = b or ""
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Two-row DP over the shorter string.
    if len(a) < len(b):
        a, b = b, a
    previous: List[int] = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """1 - distance / longer length; two empty strings are identical (1.0)."""
    a = a or ""
    b = b or ""
    if a == b:
        return 1.0
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / max_len
