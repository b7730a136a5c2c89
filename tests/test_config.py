"""Tests for configuration loading."""

import json

import pytest

from lexitrainer.config import EngineConfig, load_config


@pytest.fixture(autouse=True)
def no_db_override(monkeypatch):
    monkeypatch.delenv("LEXITRAINER_DB", raising=False)


class TestLoadConfig:
    """Test load_config."""

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.json") == EngineConfig()

    def test_values_read(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "strictness": "lenient",
            "duplicate_threshold": 0.8,
            "target_language": "french",
            "database_path": "words.db",
        }), encoding="utf-8")
        cfg = load_config(path)
        assert cfg.strictness == "lenient"
        assert cfg.duplicate_threshold == 0.8
        assert cfg.source_language == "german"
        assert cfg.target_language == "french"
        assert cfg.database_path == "words.db"

    def test_env_overrides_database(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LEXITRAINER_DB", str(tmp_path / "env.db"))
        assert load_config(tmp_path / "missing.json").database_path == str(tmp_path / "env.db")

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[1, 2]",
            '{"strictness": "sloppy"}',
            '{"duplicate_threshold": 0}',
            '{"duplicate_threshold": 1.5}',
            '{"duplicate_threshold": [0.9]}',
            '{"duplicate_threshold": "high"}',
        ],
    )
    def test_invalid(self, tmp_path, content):
        path = tmp_path / "config.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)
