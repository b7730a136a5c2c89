"""Duplicate detection for import candidates against existing vocabulary.

Signals:
- similar-pair: averaged native/foreign similarity reaches the threshold
- exact-source-match: same native word, possibly re-translated

Detection is read-only; the caller decides whether to skip, merge or insert.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .distance import similarity
from .normalize import normalize_for_duplicate
from .vocabulary import VocabularyItem

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.9
SIMILAR_PAIR = "similar-pair"
EXACT_SOURCE_MATCH = "exact-source-match"


@dataclass
class DuplicateResult:
    is_duplicate: bool
    similarity: float
    duplicate_of: Optional[VocabularyItem] = None
    match_reason: str = ""


def _field(row: dict, name: str) -> str:
    return row.get(name) or ""


def check_duplicates(
    candidates: List[dict],
    scope_id: Optional[str],
    source,
    threshold: float = DEFAULT_THRESHOLD,
    source_language: Optional[str] = "german",
    target_language: Optional[str] = None,
) -> Dict[int, DuplicateResult]:
    """Flag import candidates that duplicate vocabulary already in a scope.

    Args:
        candidates: Candidate dictionaries with ``source_text`` and ``target_text``
        scope_id: Book id to check against (None for unsorted vocabulary)
        source: Anything with ``load_scope(scope_id)``; called once per batch
        threshold: Minimum averaged similarity for a similar-pair duplicate
        source_language: Language of the native field, for article stripping
        target_language: Language of the foreign field (None strips all known articles)

    Returns:
        Mapping of candidate index to the best DuplicateResult; candidates with
        no duplicate are absent
    """
    existing = [
        (
            item,
            normalize_for_duplicate(item.source_text, source_language),
            normalize_for_duplicate(item.target_text, target_language),
        )
        for item in source.load_scope(scope_id)
    ]

    results: Dict[int, DuplicateResult] = {}
    if not existing:
        logger.debug("Scope %r is empty; no duplicates possible", scope_id)
        return results

    for idx, row in enumerate(candidates):
        src = normalize_for_duplicate(_field(row, "source_text"), source_language)
        tgt = normalize_for_duplicate(_field(row, "target_text"), target_language)

        best: Optional[DuplicateResult] = None
        for item, item_src, item_tgt in existing:
            combined = (similarity(src, item_src) + similarity(tgt, item_tgt)) / 2
            if combined >= threshold:
                score, reason = combined, SIMILAR_PAIR
            elif src and src == item_src:
                score, reason = 1.0, EXACT_SOURCE_MATCH
            else:
                continue
            if best is None or score > best.similarity:
                best = DuplicateResult(True, score, item, reason)

        if best is not None:
            results[idx] = best

    logger.info(
        "Checked %d candidates against %d items in scope %r: %d flagged",
        len(candidates), len(existing), scope_id, len(results),
    )
    return results


def annotate_candidates(
    candidates: List[dict],
    scope_id: Optional[str],
    source,
    threshold: float = DEFAULT_THRESHOLD,
    source_language: Optional[str] = "german",
    target_language: Optional[str] = None,
) -> List[Tuple[dict, Optional[DuplicateResult]]]:
    """Pair every candidate with its DuplicateResult (or None)."""
    duplicates = check_duplicates(
        candidates, scope_id, source,
        threshold=threshold,
        source_language=source_language,
        target_language=target_language,
    )
    return [(row, duplicates.get(idx)) for idx, row in enumerate(candidates)]


def find_batch_duplicates(
    candidates: List[dict],
    source_language: Optional[str] = "german",
) -> Dict[int, List[int]]:
    """Find candidates repeating the native word of another candidate in the batch.

    Returns:
        Mapping of candidate index to the indices of the other candidates
        sharing its normalized native field
    """
    index: Dict[str, List[int]] = defaultdict(list)
    keys: List[str] = []
    for idx, row in enumerate(candidates):
        key = normalize_for_duplicate(_field(row, "source_text"), source_language)
        keys.append(key)
        if key:
            index[key].append(idx)

    batch_duplicates: Dict[int, List[int]] = {}
    for idx, key in enumerate(keys):
        others = [i for i in index.get(key, []) if i != idx] if key else []
        if others:
            batch_duplicates[idx] = others
    return batch_duplicates
