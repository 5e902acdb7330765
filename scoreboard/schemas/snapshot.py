"""Pydantic schemas for the competition snapshot handed to the standings engine.

A snapshot is the complete, immutable picture of a competition at one instant:
contestants, judges, rounds, categories (with their criteria), raw score records
and the judge-assignment relations. The surrounding application builds one per
recomputation from whatever store it uses; the engine never mutates it.

Keys are accepted in snake_case, camelCase, or the legacy column names used by
the judging app's tables (``sex``, ``score``, ``participants_per_gender``, ...).
Entity ids are normalized to strings so ``1`` and ``"1"`` refer to the same row.
"""

import math
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# =============================================================================
# Gender
# =============================================================================


class Gender(str, Enum):
    """Gender bucket used for partitioned standings and per-gender caps."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


GENDER_ORDER = (Gender.MALE, Gender.FEMALE, Gender.OTHER)
GENDER_VALUES = {g.value for g in Gender}

# A cap is either one number for every bucket or a per-gender mapping
GenderLimit = Union[int, Dict[str, Optional[int]]]


# =============================================================================
# Coercion helpers
# =============================================================================


def as_entity_id(value: Any) -> Optional[str]:
    """Normalize an entity id to a string (``7``, ``7.0`` and ``"7"`` are equal)."""
    if value is None or value == "":
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def as_number_or_zero(value: Any) -> float:
    """Lenient numeric read for configuration values: missing or junk becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def as_optional_int(value: Any) -> Optional[int]:
    """Integer read for display numbers: anything not integral becomes None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def as_gender_limit(value: Any) -> Optional[GenderLimit]:
    """Lenient read of a cap: a number, or a per-gender mapping whose sides may be null."""
    if value is None:
        return None
    if isinstance(value, dict):
        return {
            str(gender).strip().lower(): None if cap is None else int(as_number_or_zero(cap))
            for gender, cap in value.items()
        }
    return int(as_number_or_zero(value))


def _apply_legacy_keys(data: Any, legacy: Dict[str, str]) -> Any:
    """Rename legacy column names to field names unless the field is already present."""
    if not isinstance(data, dict):
        return data
    remapped = dict(data)
    for old, new in legacy.items():
        if old in remapped and new not in remapped and to_camel(new) not in remapped:
            remapped[new] = remapped.pop(old)
    return remapped


def _rows_to_mapping(value: Any, owner_key: str) -> Any:
    """Turn assignment data into ``{owner_id: [judge_id, ...]}`` with string ids.

    Accepts either an already-built mapping or the raw rows of a many-to-many
    table, e.g. ``[{"round_id": 1, "judge_id": 4}, ...]``.
    """
    if value is None:
        return {}
    if isinstance(value, dict):
        normalized: Dict[str, List[str]] = {}
        for owner, judge_ids in value.items():
            key = as_entity_id(owner)
            if key is None:
                continue
            normalized[key] = [jid for jid in (as_entity_id(j) for j in judge_ids or []) if jid is not None]
        return normalized
    if not isinstance(value, list):
        return value
    mapping: Dict[str, List[str]] = {}
    camel_owner = to_camel(owner_key)
    for row in value:
        if not isinstance(row, dict):
            continue
        owner = as_entity_id(row.get(owner_key, row.get(camel_owner)))
        judge = as_entity_id(row.get("judge_id", row.get("judgeId")))
        if owner is None:
            continue
        mapping.setdefault(owner, [])
        if judge is not None:
            mapping[owner].append(judge)
    return mapping


class SnapshotModel(BaseModel):
    """Base for snapshot entities: camelCase aliases, snake_case names, immutable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# =============================================================================
# Entities
# =============================================================================


class Contestant(SnapshotModel):
    """A competitor. Display attributes (name, photo, ...) pass through untouched.

    ``gender`` is the explicit tag recorded at registration; ``gender_label`` is
    the free-text fallback that the prefix heuristic classifies when no valid tag
    is present.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    number: Optional[int] = None
    name: Optional[str] = None
    gender_label: str = ""
    gender: Optional[Gender] = None

    @model_validator(mode="before")
    @classmethod
    def _split_gender_tag(cls, data: Any) -> Any:
        data = _apply_legacy_keys(data, {"sex": "gender_label"})
        if not isinstance(data, dict) or "gender" not in data:
            return data
        raw = data["gender"]
        if isinstance(raw, Gender) or str(raw or "").strip().lower() in GENDER_VALUES:
            return data
        # Free text under "gender" is a label, not a tag
        data = dict(data)
        data.pop("gender")
        if not data.get("gender_label") and not data.get("genderLabel"):
            data["gender_label"] = raw or ""
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return as_entity_id(v)

    @field_validator("number", mode="before")
    @classmethod
    def _display_number(cls, v: Any) -> Optional[int]:
        return as_optional_int(v)

    @field_validator("gender_label", mode="before")
    @classmethod
    def _label_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("gender", mode="before")
    @classmethod
    def _tag_value(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class Judge(SnapshotModel):
    """A judge account. Inactive judges never count toward expected submissions."""

    id: str
    name: Optional[str] = None
    active: bool = True

    @model_validator(mode="before")
    @classmethod
    def _legacy_keys(cls, data: Any) -> Any:
        return _apply_legacy_keys(data, {"is_active": "active"})

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return as_entity_id(v)

    @field_validator("active", mode="before")
    @classmethod
    def _default_active(cls, v: Any) -> Any:
        return True if v is None else v


class Round(SnapshotModel):
    """An ordered competition phase with its own gender-based caps."""

    id: str
    name: Optional[str] = None
    order_index: int = 0
    judge_target: Optional[float] = None
    max_per_gender: Optional[GenderLimit] = None
    advance_per_gender: Optional[GenderLimit] = None
    highlight_per_gender: Optional[GenderLimit] = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_keys(cls, data: Any) -> Any:
        return _apply_legacy_keys(
            data,
            {
                "participants_per_gender": "max_per_gender",
                "advance_participants": "advance_per_gender",
                "highlight_participants": "highlight_per_gender",
            },
        )

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return as_entity_id(v)

    @field_validator("order_index", mode="before")
    @classmethod
    def _order_default(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("max_per_gender", "advance_per_gender", "highlight_per_gender", mode="before")
    @classmethod
    def _lenient_caps(cls, v: Any) -> Optional[GenderLimit]:
        return as_gender_limit(v)

    @field_validator("judge_target", mode="before")
    @classmethod
    def _numeric_target(cls, v: Any) -> Optional[float]:
        """Keep only finite numeric targets; anything else means "not configured"."""
        if v is None or isinstance(v, bool):
            return None
        try:
            target = float(v)
        except (TypeError, ValueError):
            return None
        return target if math.isfinite(target) else None


class Criterion(SnapshotModel):
    """An atomic point-scale item inside a category."""

    id: str
    name: Optional[str] = None
    max_points: float = 0.0
    order_index: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return as_entity_id(v)

    @field_validator("max_points", mode="before")
    @classmethod
    def _max_points(cls, v: Any) -> float:
        return as_number_or_zero(v)

    @field_validator("order_index", mode="before")
    @classmethod
    def _order_default(cls, v: Any) -> Any:
        return 0 if v is None else v


class Category(SnapshotModel):
    """A judged dimension with a percentage weight, composed of criteria."""

    id: str
    name: Optional[str] = None
    percentage: float = 0.0
    round_id: Optional[str] = None
    order_index: int = 0
    criteria: List[Criterion] = Field(default_factory=list)
    allowed_judge_ids: Optional[List[str]] = None

    @field_validator("id", "round_id", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return as_entity_id(v)

    @field_validator("percentage", mode="before")
    @classmethod
    def _percentage(cls, v: Any) -> float:
        return as_number_or_zero(v)

    @field_validator("order_index", mode="before")
    @classmethod
    def _order_default(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("criteria", mode="before")
    @classmethod
    def _criteria_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("allowed_judge_ids", mode="before")
    @classmethod
    def _judge_ids(cls, v: Any) -> Optional[List[str]]:
        if v is None:
            return None
        return [jid for jid in (as_entity_id(x) for x in v) if jid is not None]

    @property
    def ordered_criteria(self) -> List[Criterion]:
        """Criteria in display order (stable for equal order indexes)."""
        return sorted(self.criteria, key=lambda c: c.order_index)

    @property
    def max_total(self) -> float:
        """Sum of the criteria max points."""
        return sum(max(c.max_points, 0.0) for c in self.criteria)


class ScoreRecord(SnapshotModel):
    """One judge's value for one criterion of one contestant.

    ``value`` is kept as received; numeric coercion happens in the engine so that
    malformed writes can be audited instead of rejected.
    """

    contestant_id: Optional[str] = None
    criterion_id: Optional[str] = None
    judge_id: Optional[str] = None
    value: Any = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_keys(cls, data: Any) -> Any:
        return _apply_legacy_keys(data, {"score": "value"})

    @field_validator("contestant_id", "criterion_id", "judge_id", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return as_entity_id(v)


# =============================================================================
# Snapshot
# =============================================================================


class CompetitionSnapshot(SnapshotModel):
    """Everything the engine needs for one recomputation."""

    contestants: List[Contestant] = Field(default_factory=list)
    categories: List[Category] = Field(default_factory=list)
    rounds: List[Round] = Field(default_factory=list)
    scores: List[ScoreRecord] = Field(default_factory=list)
    judges: List[Judge] = Field(default_factory=list)
    round_judge_assignments: Dict[str, List[str]] = Field(default_factory=dict)
    category_judge_assignments: Dict[str, List[str]] = Field(default_factory=dict)

    @field_validator("contestants", "categories", "rounds", "scores", "judges", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("round_judge_assignments", mode="before")
    @classmethod
    def _round_rows(cls, v: Any) -> Any:
        return _rows_to_mapping(v, "round_id")

    @field_validator("category_judge_assignments", mode="before")
    @classmethod
    def _category_rows(cls, v: Any) -> Any:
        return _rows_to_mapping(v, "category_id")
