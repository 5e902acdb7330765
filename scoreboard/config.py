"""
Central configuration for the standings tooling.

Values come from environment variables (the CLI loads a ``.env`` file first):
  - SCOREBOARD_DATA_DIR (default: ~/.scoreboard-data) - snapshots and reports
  - SCOREBOARD_LOG_LEVEL (default: INFO)
  - SCOREBOARD_GENDER_TOKENS (default: config/gender_tokens.yaml in the project root)
"""

import os
from pathlib import Path

DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def get_data_dir() -> Path:
    """
    Get the local data directory for snapshots and generated reports.

    Uses SCOREBOARD_DATA_DIR environment variable if set, otherwise defaults
    to ~/.scoreboard-data/

    Returns:
        Path to data directory
    """
    env_path = os.environ.get("SCOREBOARD_DATA_DIR")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path.home() / ".scoreboard-data"


def get_snapshot_dir() -> Path:
    """Get the directory searched for snapshot files given by bare name."""
    return get_data_dir() / "snapshots"


def get_log_level() -> str:
    """Get the configured log level, falling back to INFO for unknown values."""
    level = os.environ.get("SCOREBOARD_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    return level if level in VALID_LOG_LEVELS else DEFAULT_LOG_LEVEL


def get_gender_tokens_path() -> Path:
    """Get the YAML file holding the gender prefix tokens.

    The default path is the project-root ``config/`` directory of a source
    checkout. A non-editable install has no such file, so it uses the built-in
    tokens unless SCOREBOARD_GENDER_TOKENS points at a file.
    """
    env_path = os.environ.get("SCOREBOARD_GENDER_TOKENS")
    if env_path:
        return Path(env_path).expanduser()
    return Path(__file__).parent.parent / "config" / "gender_tokens.yaml"

