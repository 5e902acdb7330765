"""Gender Normalizer - maps free-text gender labels onto the three standings buckets.

Contestants should carry an explicit ``Gender`` tag set at registration; the
prefix heuristic here is the safety net for rows that only have free text
("M", "Men", "Female", ...).

Prefix tokens are configured in ``config/gender_tokens.yaml``:

    male: [m, male, men, masculine]
    female: [f, female, women, feminine]

Male tokens are tried before female tokens. Anything unmatched, including an
empty label, is ``other``.
"""

import logging
from typing import Optional

import yaml

from scoreboard.config import get_gender_tokens_path
from scoreboard.schemas.snapshot import Contestant, Gender

logger = logging.getLogger(__name__)

DEFAULT_GENDER_TOKENS: dict[str, tuple[str, ...]] = {
    "male": ("m", "male", "men", "masculine"),
    "female": ("f", "female", "women", "feminine"),
}

# Static configuration only, never standings state
_tokens_cache: Optional[dict[str, tuple[str, ...]]] = None


def _load_tokens() -> dict[str, tuple[str, ...]]:
    """Load and cache prefix tokens from YAML, falling back to the defaults."""
    global _tokens_cache
    if _tokens_cache is not None:
        return _tokens_cache

    config_path = get_gender_tokens_path()
    if not config_path.exists():
        logger.debug(f"Gender tokens config not found at {config_path}, using defaults")
        _tokens_cache = dict(DEFAULT_GENDER_TOKENS)
        return _tokens_cache

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    tokens: dict[str, tuple[str, ...]] = {}
    for gender in ("male", "female"):
        configured = raw.get(gender)
        if not configured:
            tokens[gender] = DEFAULT_GENDER_TOKENS[gender]
            continue
        tokens[gender] = tuple(str(t).strip().lower() for t in configured if str(t).strip())

    _tokens_cache = tokens
    logger.debug(f"Loaded gender tokens from {config_path}: {tokens}")
    return _tokens_cache


def normalize_gender(label: Optional[str]) -> Gender:
    """Classify a free-text label as male, female, or other.

    Total function: never raises, empty or unknown input is ``Gender.OTHER``.
    """
    lower = (label or "").strip().lower()
    if not lower:
        return Gender.OTHER
    tokens = _load_tokens()
    if any(lower.startswith(token) for token in tokens["male"]):
        return Gender.MALE
    if any(lower.startswith(token) for token in tokens["female"]):
        return Gender.FEMALE
    return Gender.OTHER


def contestant_gender(contestant: Contestant) -> Gender:
    """Explicit tag if present, otherwise the label heuristic."""
    if contestant.gender is not None:
        return contestant.gender
    return normalize_gender(contestant.gender_label)


def clear_cache():
    """Clear the token cache (useful for testing)."""
    global _tokens_cache
    _tokens_cache = None
