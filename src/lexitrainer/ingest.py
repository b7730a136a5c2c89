"""CSV ingest for vocabulary import candidates.

Schema: source_text, target_text, notes (UTF-8, quoted fields ok). Header
names are matched case-insensitively and may carry surrounding spaces; the
notes column is optional.
"""

from __future__ import annotations

import csv
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

REQUIRED_COLUMNS = ("source_text", "target_text")


@dataclass
class CandidateRow:
    source_text: str
    target_text: str
    notes: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def _header_key(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def read_candidates_csv(path: str | Path) -> List[CandidateRow]:
    """Read import candidates from a CSV file.

    Raises:
        ValueError: If ``source_text`` or ``target_text`` has no column
    """
    path = Path(path)
    rows: List[CandidateRow] = []
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        columns = {_header_key(h): h for h in reader.fieldnames or []}
        missing = [c for c in REQUIRED_COLUMNS if c not in columns]
        if missing:
            raise ValueError(f"Missing required columns in {path}: {missing}")

        def cell(record: dict, key: str) -> str:
            header = columns.get(key)
            return (record.get(header) or "").strip() if header is not None else ""

        for record in reader:
            rows.append(
                CandidateRow(
                    source_text=cell(record, "source_text"),
                    target_text=cell(record, "target_text"),
                    notes=cell(record, "notes"),
                )
            )
    return rows


def write_csv(path: str | Path, rows: Iterable[dict]) -> None:
    """Write dictionaries as CSV; the first row's keys become the header."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = list(rows)
    with path.open("w", encoding="utf-8", newline="") as f:
        if not rows:
            return
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)
