"""Engine configuration loaded from JSON.

A missing file yields the defaults. ``LEXITRAINER_DB`` overrides the database
path from the file.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .detect_duplicates import DEFAULT_THRESHOLD
from .fuzzy_match import NORMAL, STRICTNESS_LEVELS
from .store import DEFAULT_DB_PATH

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Engine settings.

    Attributes:
        strictness: Typed-answer strictness ("strict", "normal", "lenient")
        duplicate_threshold: Averaged similarity that flags an import duplicate
        source_language: The learner's native language
        target_language: Foreign language of the vocabulary (None if mixed)
        database_path: SQLite file for vocabulary and progress
    """
    strictness: str = NORMAL
    duplicate_threshold: float = DEFAULT_THRESHOLD
    source_language: str = "german"
    target_language: Optional[str] = None
    database_path: str = DEFAULT_DB_PATH


def load_config(path: str | Path) -> EngineConfig:
    """Load configuration from a JSON file.

    Raises:
        ValueError: If the JSON is invalid or a value is out of range
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Config %s not found, using defaults", path)
        data: dict = {}
    else:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {path}: {e}")
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")

    try:
        threshold = float(data.get("duplicate_threshold", DEFAULT_THRESHOLD))
    except (TypeError, ValueError):
        raise ValueError(f"duplicate_threshold must be a number, got {data.get('duplicate_threshold')!r}")

    cfg = EngineConfig(
        strictness=data.get("strictness", NORMAL),
        duplicate_threshold=threshold,
        source_language=data.get("source_language", "german"),
        target_language=data.get("target_language"),
        database_path=data.get("database_path", DEFAULT_DB_PATH),
    )
    env_db = os.environ.get("LEXITRAINER_DB")
    if env_db:
        cfg.database_path = env_db

    if cfg.strictness not in STRICTNESS_LEVELS:
        raise ValueError(f"Invalid strictness {cfg.strictness!r}; expected one of {STRICTNESS_LEVELS}")
    if not 0.0 < cfg.duplicate_threshold <= 1.0:
        raise ValueError(f"duplicate_threshold must be in (0, 1], got {cfg.duplicate_threshold}")
    return cfg
