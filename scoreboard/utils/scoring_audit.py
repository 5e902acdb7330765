"""
Scoring Audit Trail - Records where the engine degraded gracefully.

The standings engine never raises on in-progress or malformed data; it coerces,
clamps, or falls back instead. This module keeps a record of each such decision so
that organizers can find corrupted score writes or misconfigured rounds without
the standings themselves changing.

An audit log is created by the caller for a single computation and passed in
explicitly. Entries are de-duplicated: the same record seen in the overall pass
and again in a round pass is reported once.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


class AuditKind(Enum):
    """What kind of degradation happened."""

    COERCED_VALUE = "coerced_value"  # Non-numeric score value read as 0
    OUT_OF_RANGE = "out_of_range"  # Score outside [0, max_points], clamped
    ZERO_MAX_CATEGORY = "zero_max_category"  # Category criteria sum to 0 max points
    OVERWEIGHT_ROUND = "overweight_round"  # Category percentages in a round exceed 100


@dataclass(frozen=True)
class StandingsAuditEntry:
    """A single audit entry."""

    kind: AuditKind
    message: str
    contestant_id: Optional[str] = None
    category_id: Optional[str] = None
    criterion_id: Optional[str] = None
    judge_id: Optional[str] = None
    round_id: Optional[str] = None
    value: Any = None

    @property
    def key(self) -> tuple:
        return (
            self.kind,
            self.contestant_id,
            self.category_id,
            self.criterion_id,
            self.judge_id,
            self.round_id,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "contestant_id": self.contestant_id,
            "category_id": self.category_id,
            "criterion_id": self.criterion_id,
            "judge_id": self.judge_id,
            "round_id": self.round_id,
            "value": self._serialize_value(self.value),
        }

    def _serialize_value(self, value: Any) -> Any:
        """Serialize value for JSON output."""
        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        if isinstance(value, (list, tuple)):
            return [self._serialize_value(v) for v in value]
        if isinstance(value, dict):
            return {str(k): self._serialize_value(v) for k, v in value.items()}
        return str(value)


class StandingsAuditLog:
    """Collects audit entries during one standings computation.

    Usage:
        audit_log = StandingsAuditLog()
        standings = compute_competition_standings(snapshot, audit_log=audit_log)

        for entry in audit_log.entries:
            print(entry.message)

        audit_log.export_to_json("/tmp/standings_audit.json")
    """

    def __init__(self):
        self._entries: list[StandingsAuditEntry] = []
        self._seen: set[tuple] = set()

    def record(
        self,
        kind: AuditKind,
        message: str,
        contestant_id: Optional[str] = None,
        category_id: Optional[str] = None,
        criterion_id: Optional[str] = None,
        judge_id: Optional[str] = None,
        round_id: Optional[str] = None,
        value: Any = None,
    ) -> Optional[StandingsAuditEntry]:
        """Record a degradation. Returns None if the same one was already recorded."""
        entry = StandingsAuditEntry(
            kind=kind,
            message=message,
            contestant_id=contestant_id,
            category_id=category_id,
            criterion_id=criterion_id,
            judge_id=judge_id,
            round_id=round_id,
            value=value,
        )
        if entry.key in self._seen:
            return None
        self._seen.add(entry.key)
        self._entries.append(entry)
        logger.warning(message)
        return entry

    @property
    def entries(self) -> list[StandingsAuditEntry]:
        return list(self._entries)

    def by_kind(self, kind: AuditKind) -> list[StandingsAuditEntry]:
        """Get entries of a single kind."""
        return [e for e in self._entries if e.kind == kind]

    def get_summary(self) -> dict:
        """Get a summary of audit entries by kind.

        Returns:
            Dict with total count and per-kind counts
        """
        by_kind: dict[str, int] = {}
        for entry in self._entries:
            by_kind[entry.kind.value] = by_kind.get(entry.kind.value, 0) + 1
        return {"total_entries": len(self._entries), "by_kind": by_kind}

    def export_to_json(self, path: str) -> None:
        """Export all audit entries to a JSON file."""
        output = {
            "summary": self.get_summary(),
            "entries": [e.to_dict() for e in self._entries],
        }
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(output, f, indent=2)
        logger.info(f"Exported {len(self._entries)} audit entries to {path}")

    def clear(self) -> None:
        """Clear all entries."""
        self._entries = []
        self._seen = set()

    def __len__(self) -> int:
        return len(self._entries)
