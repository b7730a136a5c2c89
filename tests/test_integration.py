"""Integration tests for the full lexitrainer pipeline."""

import csv
import datetime
from pathlib import Path

import pytest

from lexitrainer.cli import main
from lexitrainer.detect_duplicates import check_duplicates, find_batch_duplicates
from lexitrainer.ingest import read_candidates_csv
from lexitrainer.report import write_results_csv
from lexitrainer.store import VocabularyStore


def _write_candidates(path: Path, rows):
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["source_text", "target_text", "notes"])
        writer.writerows(rows)


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Temporary database via LEXITRAINER_DB and a config path that does not exist."""
    db_path = tmp_path / "cli.db"
    monkeypatch.setenv("LEXITRAINER_DB", str(db_path))
    return {"tmp": tmp_path, "db": str(db_path), "config": str(tmp_path / "no-config.json")}


class TestEndToEndPipeline:
    """Test CSV → duplicate check → report."""

    def test_full_pipeline_with_csv(self, tmp_path):
        store = VocabularyStore(str(tmp_path / "pipeline.db"))
        store.init_db()
        store.add_item("das Haus", "la maison", book_id="book-1")
        store.add_item("der Hund", "le chien", book_id="book-1")

        input_csv = tmp_path / "candidates.csv"
        _write_candidates(input_csv, [
            ("Haus", "maison", ""),
            ("der Hund", "le toutou", "slang"),
            ("die Katze", "le chat", ""),
            ("Katze", "la chatte", ""),
        ])

        candidates = [r.to_dict() for r in read_candidates_csv(input_csv)]
        duplicates = check_duplicates(candidates, "book-1", store)
        batch = find_batch_duplicates(candidates)
        out_csv = tmp_path / "out" / "report.csv"
        write_results_csv(out_csv, candidates, duplicates, batch)

        with out_csv.open(encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        assert [r["is_duplicate"] for r in rows] == ["True", "True", "False", "False"]
        assert rows[0]["match_reason"] == "similar-pair"
        assert rows[1]["match_reason"] == "exact-source-match"
        assert rows[1]["duplicate_of_target"] == "le chien"
        assert rows[2]["batch_duplicate_rows"] == "5"
        assert rows[3]["batch_duplicate_rows"] == "4"

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("front,back\nHaus,maison\n", encoding="utf-8")
        with pytest.raises(ValueError):
            read_candidates_csv(path)

    def test_header_case_and_spaces_ignored(self, tmp_path):
        """Headers like 'Source_Text' still map onto their fields."""
        path = tmp_path / "mixed.csv"
        path.write_text(" Source_Text ,Target_Text,NOTES\nder Hund , le chien,animal\n", encoding="utf-8")
        rows = read_candidates_csv(path)
        assert len(rows) == 1
        assert rows[0].source_text == "der Hund"
        assert rows[0].target_text == "le chien"
        assert rows[0].notes == "animal"

    def test_notes_column_optional(self, tmp_path):
        path = tmp_path / "plain.csv"
        path.write_text("source_text,target_text\nHaus,maison\n", encoding="utf-8")
        assert read_candidates_csv(path)[0].notes == ""


class TestCli:
    """Test the command line entrypoint."""

    def test_import_skips_duplicates(self, env, capsys):
        input_csv = env["tmp"] / "words.csv"
        _write_candidates(input_csv, [("das Haus", "la maison", ""), ("der Hund", "le chien", "")])

        assert main(["--config", env["config"], "import", "--input", str(input_csv), "--scope", "b1"]) == 0
        assert main(["--config", env["config"], "import", "--input", str(input_csv), "--scope", "b1"]) == 0
        out = capsys.readouterr().out
        assert "Imported 2 of 2" in out
        assert "Imported 0 of 2" in out

        store = VocabularyStore(env["db"])
        assert len(store.load_scope("b1")) == 2

    def test_import_skips_repeats_within_batch(self, env, capsys):
        input_csv = env["tmp"] / "words.csv"
        _write_candidates(input_csv, [
            ("der Hund", "le chien", ""),
            ("der Hund", "le chien", ""),
            ("die Katze", "le chat", ""),
        ])
        assert main(["--config", env["config"], "import", "--input", str(input_csv), "--scope", "b"]) == 0
        out = capsys.readouterr().out
        assert "Skipped row 3: 'der Hund' repeats row 2" in out
        assert "Imported 2 of 3" in out
        assert sorted(i.source_text for i in VocabularyStore(env["db"]).load_scope("b")) == ["der Hund", "die Katze"]

    def test_force_import(self, env):
        input_csv = env["tmp"] / "words.csv"
        _write_candidates(input_csv, [("das Haus", "la maison", "")])
        args = ["--config", env["config"], "import", "--input", str(input_csv), "--scope", "b1"]
        main(args)
        main(args + ["--force"])
        assert len(VocabularyStore(env["db"]).load_scope("b1")) == 2

    def test_check_duplicates_report(self, env, capsys):
        input_csv = env["tmp"] / "words.csv"
        _write_candidates(input_csv, [("das Haus", "la maison", "")])
        main(["--config", env["config"], "import", "--input", str(input_csv), "--scope", "b1"])

        out_csv = env["tmp"] / "report.csv"
        code = main([
            "--config", env["config"], "check-duplicates",
            "--input", str(input_csv), "--scope", "b1", "--out", str(out_csv),
        ])
        assert code == 0
        assert "Duplicate Detection Summary" in capsys.readouterr().out
        with out_csv.open(encoding="utf-8", newline="") as f:
            assert next(csv.DictReader(f))["is_duplicate"] == "True"

    def test_review_and_due(self, env, capsys):
        store = VocabularyStore(env["db"])
        store.init_db()
        item = store.add_item("der Hund", "le chien")

        assert main(["--config", env["config"], "review", "--item-id", item.id, "--quality", "5"]) == 0
        assert "interval=1" in capsys.readouterr().out

        tomorrow = (datetime.date.today() + datetime.timedelta(days=1)).isoformat()
        assert main(["--config", env["config"], "due", "--date", tomorrow]) == 0
        assert "1 items due" in capsys.readouterr().out

    def test_review_unknown_item(self, env, capsys):
        assert main(["--config", env["config"], "review", "--item-id", "nope", "--quality", "4"]) == 1
        assert "Error:" in capsys.readouterr().out

    def test_check_answer(self, env, capsys):
        assert main(["--config", env["config"], "check-answer", "--expected", "café", "--actual", "cafe"]) == 0
        assert "correct=True" in capsys.readouterr().out

        main(["--config", env["config"], "check-answer", "--expected", "hund", "--actual", "hand"])
        assert "expected: h[u]nd" in capsys.readouterr().out

    def test_voice_match(self, env, capsys):
        main(["--config", env["config"], "voice-match", "--expected", "le chien",
              "--transcript", "le shien", "--language", "fr"])
        assert "type=phonetic" in capsys.readouterr().out

    def test_missing_input(self, env, capsys):
        code = main(["--config", env["config"], "import", "--input", str(env["tmp"] / "nope.csv")])
        assert code == 1
        assert "Error:" in capsys.readouterr().out
