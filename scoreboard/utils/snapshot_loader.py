"""
Load competition snapshots from JSON or YAML files.

A snapshot file holds the same keys as ``CompetitionSnapshot``:

    contestants: [...]
    categories: [...]
    rounds: [...]
    scores: [...]
    judges: [...]
    roundJudgeAssignments: {...}
    categoryJudgeAssignments: {...}

Bare file names that do not exist relative to the working directory are looked
up in the configured snapshot directory (SCOREBOARD_DATA_DIR/snapshots).
"""

import json
import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from scoreboard.config import get_snapshot_dir
from scoreboard.schemas.snapshot import CompetitionSnapshot

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class SnapshotLoadError(ValueError):
    """Raised when a snapshot file is missing, unparseable, or invalid."""


def resolve_snapshot_path(path: Union[str, Path]) -> Path:
    """Resolve a snapshot path, falling back to the snapshot directory."""
    candidate = Path(path).expanduser()
    if candidate.exists() or candidate.is_absolute():
        return candidate
    fallback = get_snapshot_dir() / candidate
    if fallback.exists():
        return fallback
    return candidate


def load_snapshot(path: Union[str, Path]) -> CompetitionSnapshot:
    """Load and validate a snapshot file.

    Args:
        path: JSON or YAML file

    Returns:
        Validated CompetitionSnapshot

    Raises:
        SnapshotLoadError: if the file is missing, cannot be parsed, or fails validation
    """
    file_path = resolve_snapshot_path(path)
    if not file_path.exists():
        raise SnapshotLoadError(f"Snapshot file not found: {file_path}")

    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotLoadError(f"Failed to read {file_path}: {e}") from e

    try:
        if file_path.suffix.lower() in YAML_SUFFIXES:
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotLoadError(f"Failed to parse {file_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise SnapshotLoadError(f"Snapshot {file_path} must contain a mapping, got {type(raw).__name__}")

    try:
        snapshot = CompetitionSnapshot.model_validate(raw)
    except ValidationError as e:
        raise SnapshotLoadError(f"Invalid snapshot {file_path}: {e}") from e

    logger.info(
        f"Loaded snapshot {file_path.name}: {len(snapshot.contestants)} contestants, "
        f"{len(snapshot.categories)} categories, {len(snapshot.rounds)} rounds, "
        f"{len(snapshot.scores)} scores"
    )
    return snapshot
