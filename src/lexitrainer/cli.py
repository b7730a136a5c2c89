"""CLI entrypoint for lexitrainer.

Usage:
  lexitrainer check-duplicates --input candidates.csv --scope BOOK --out out/duplicates.csv
  lexitrainer review --item-id ID --quality 4
"""

from __future__ import annotations

import argparse
import datetime
import logging
from typing import List

from .config import EngineConfig, load_config
from .detect_duplicates import check_duplicates, find_batch_duplicates
from .fuzzy_match import STRICTNESS_LEVELS, check_answer, has_accent_mismatch_only, highlight_differences
from .ingest import read_candidates_csv
from .phonetic import combined_match
from .report import print_summary, write_results_csv
from .review import record_review
from .scheduler import mastery_level
from .store import VocabularyStore


def _load(args: argparse.Namespace) -> EngineConfig:
    return load_config(args.config)


def _open_store(cfg: EngineConfig) -> VocabularyStore:
    store = VocabularyStore(cfg.database_path)
    store.init_db()
    return store


def _read_candidates(path: str) -> List[dict]:
    return [r.to_dict() for r in read_candidates_csv(path)]


def cmd_init_db(args: argparse.Namespace) -> int:
    cfg = _load(args)
    _open_store(cfg)
    print(f"Database initialized: {cfg.database_path}")
    return 0


def cmd_check_answer(args: argparse.Namespace) -> int:
    cfg = _load(args)
    strictness = args.strictness or cfg.strictness
    result = check_answer(args.expected, args.actual, strictness)
    print(f"correct={result.is_correct} similarity={result.similarity:.3f} distance={result.distance}")
    if not result.is_correct:
        if has_accent_mismatch_only(args.expected, args.actual):
            print("almost: only the accents differ")
        marked = "".join(
            f"[{seg.text}]" if seg.is_highlighted else seg.text
            for seg in highlight_differences(args.expected, args.actual)
        )
        print(f"expected: {marked}")
    return 0


def cmd_voice_match(args: argparse.Namespace) -> int:
    cfg = _load(args)
    language = args.language or cfg.target_language
    result = combined_match(args.transcript, args.expected, language)
    print(f"match={result.is_match} type={result.match_type} confidence={result.confidence:.3f}")
    return 0


def cmd_check_duplicates(args: argparse.Namespace) -> int:
    cfg = _load(args)
    candidates = _read_candidates(args.input)
    store = _open_store(cfg)
    threshold = args.threshold if args.threshold is not None else cfg.duplicate_threshold
    duplicates = check_duplicates(
        candidates,
        args.scope,
        store,
        threshold=threshold,
        source_language=cfg.source_language,
        target_language=cfg.target_language,
    )
    batch = find_batch_duplicates(candidates, source_language=cfg.source_language)
    write_results_csv(args.out, candidates, duplicates, batch)
    print_summary(candidates, duplicates, batch)
    print(f"Wrote report: {args.out}")
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    cfg = _load(args)
    candidates = _read_candidates(args.input)
    store = _open_store(cfg)
    if args.force:
        duplicates, batch = {}, {}
    else:
        duplicates = check_duplicates(
            candidates,
            args.scope,
            store,
            threshold=cfg.duplicate_threshold,
            source_language=cfg.source_language,
            target_language=cfg.target_language,
        )
        batch = find_batch_duplicates(candidates, source_language=cfg.source_language)
    added = 0
    for idx, row in enumerate(candidates):
        earlier = [i for i in batch.get(idx, []) if i < idx]
        if earlier:
            print(f"Skipped row {idx + 2}: '{row['source_text']}' repeats row {earlier[0] + 2}")
            continue
        if idx in duplicates:
            dup = duplicates[idx]
            print(
                f"Skipped row {idx + 2}: '{row['source_text']}' duplicates "
                f"'{dup.duplicate_of.source_text}' ({dup.match_reason}, {dup.similarity:.2f})"
            )
            continue
        store.add_item(row["source_text"], row["target_text"], book_id=args.scope, notes=row.get("notes", ""))
        added += 1
    print(f"Imported {added} of {len(candidates)} candidates into scope {args.scope!r}")
    return 0


def cmd_review(args: argparse.Namespace) -> int:
    cfg = _load(args)
    store = _open_store(cfg)
    if not 0 <= args.quality <= 5:
        print("Error: --quality must be between 0 and 5")
        return 1
    try:
        progress = record_review(store, args.item_id, args.quality)
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        return 1
    print(
        f"interval={progress.interval} repetitions={progress.repetitions} "
        f"ease={progress.ease_factor:.2f} next_review={progress.next_review_date.isoformat()} "
        f"mastery={mastery_level(progress.interval)}"
    )
    return 0


def cmd_due(args: argparse.Namespace) -> int:
    cfg = _load(args)
    store = _open_store(cfg)
    today = datetime.date.fromisoformat(args.date) if args.date else None
    due = store.due_items(args.scope, today=today)
    for item, progress in due:
        when = progress.next_review_date.isoformat() if progress else "new"
        print(f"{item.id}\t{item.source_text}\t{item.target_text}\t{when}")
    print(f"{len(due)} items due")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="lexitrainer", description="Vocabulary answer checking and review scheduling")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--config",
        default="resources/config.json",
        help="Path to config.json (optional; defaults will be used if missing)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    init = sub.add_parser("init-db", help="Create the vocabulary/progress database")
    init.set_defaults(func=cmd_init_db)

    answer = sub.add_parser("check-answer", help="Check a typed answer")
    answer.add_argument("--expected", required=True)
    answer.add_argument("--actual", required=True)
    answer.add_argument("--strictness", choices=STRICTNESS_LEVELS, help="Overrides the configured strictness")
    answer.set_defaults(func=cmd_check_answer)

    voice = sub.add_parser("voice-match", help="Match a speech transcript against the expected answer")
    voice.add_argument("--expected", required=True)
    voice.add_argument("--transcript", required=True)
    voice.add_argument("--language", help="Answer language (code or name, e.g. fr, spanish)")
    voice.set_defaults(func=cmd_voice_match)

    dups = sub.add_parser("check-duplicates", help="Report import candidates that already exist")
    dups.add_argument("--input", required=True, help="Path to candidate CSV (source_text,target_text,notes)")
    dups.add_argument("--scope", help="Book id to check against (omit for unsorted vocabulary)")
    dups.add_argument("--out", required=True, help="Path to output CSV report")
    dups.add_argument("--threshold", type=float, help="Overrides the configured duplicate threshold")
    dups.set_defaults(func=cmd_check_duplicates)

    imp = sub.add_parser("import", help="Import candidates, skipping duplicates")
    imp.add_argument("--input", required=True, help="Path to candidate CSV (source_text,target_text,notes)")
    imp.add_argument("--scope", help="Book id to import into (omit for unsorted vocabulary)")
    imp.add_argument("--force", action="store_true", help="Insert duplicates too")
    imp.set_defaults(func=cmd_import)

    review = sub.add_parser("review", help="Record a review with an SM-2 quality rating")
    review.add_argument("--item-id", required=True)
    review.add_argument("--quality", type=int, required=True, help="0-5")
    review.set_defaults(func=cmd_review)

    due = sub.add_parser("due", help="List items due for review")
    due.add_argument("--scope", help="Book id (omit for unsorted vocabulary)")
    due.add_argument("--date", help="ISO date to evaluate instead of today")
    due.set_defaults(func=cmd_due)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
