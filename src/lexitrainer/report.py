"""Reporting utilities for duplicate checks."""

from __future__ import annotations

from typing import Dict, List, Optional

from .detect_duplicates import EXACT_SOURCE_MATCH, SIMILAR_PAIR, DuplicateResult
from .ingest import write_csv


def results_to_rows(
    candidates: List[dict],
    duplicates: Dict[int, DuplicateResult],
    batch_duplicates: Optional[Dict[int, List[int]]] = None,
) -> List[dict]:
    """One report row per candidate; CSV row numbers are 1-based after the header."""
    batch_duplicates = batch_duplicates or {}
    rows: List[dict] = []
    for idx, row in enumerate(candidates):
        result = duplicates.get(idx)
        match = result.duplicate_of if result else None
        rows.append({
            "row": idx + 2,
            "source_text": row.get("source_text", ""),
            "target_text": row.get("target_text", ""),
            "is_duplicate": bool(result and result.is_duplicate),
            "similarity": round(result.similarity, 4) if result else 0.0,
            "match_reason": result.match_reason if result else "",
            "duplicate_of_id": match.id if match else "",
            "duplicate_of_source": match.source_text if match else "",
            "duplicate_of_target": match.target_text if match else "",
            "batch_duplicate_rows": ",".join(str(i + 2) for i in batch_duplicates.get(idx, [])),
        })
    return rows


def write_results_csv(
    path: str,
    candidates: List[dict],
    duplicates: Dict[int, DuplicateResult],
    batch_duplicates: Optional[Dict[int, List[int]]] = None,
) -> None:
    write_csv(path, results_to_rows(candidates, duplicates, batch_duplicates))


def print_summary(
    candidates: List[dict],
    duplicates: Dict[int, DuplicateResult],
    batch_duplicates: Optional[Dict[int, List[int]]] = None,
) -> None:
    """Print a summary of a duplicate check."""
    batch_duplicates = batch_duplicates or {}
    counts = {SIMILAR_PAIR: 0, EXACT_SOURCE_MATCH: 0}
    for result in duplicates.values():
        counts[result.match_reason] = counts.get(result.match_reason, 0) + 1

    print("Duplicate Detection Summary:")
    print(f"  similar pair       : {counts[SIMILAR_PAIR]}")
    print(f"  exact native match : {counts[EXACT_SOURCE_MATCH]}")
    print(f"  new                : {len(candidates) - len(duplicates)}")
    print(f"  total              : {len(candidates)}")
    if batch_duplicates:
        print(f"  repeated in batch  : {len(batch_duplicates)}")
