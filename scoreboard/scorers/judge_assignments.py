"""Judge Assignment Resolver - how many judges are expected, and which ones count.

The effective judge count is the denominator for completion tracking. Per round,
in priority order:

1. An explicit judge-assignment list: count = |assigned ∩ active|, even when that
   is 0.
2. A positive judge target configured on the round.
3. The number of active judges.

The overall count, used when scoring outside any single round, is the maximum
of the per-round counts, or the active-judge count when there are no rounds.

A category inherits its round's allowed-judge set and can narrow it further with
its own assignment list. Whenever a category has an allowed set, its judge count
is the size of that set.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from scoreboard.schemas.snapshot import Category, CompetitionSnapshot, Judge, Round

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundJudgeScope:
    """Resolved judges for one round."""

    round_id: str
    judge_count: int
    allowed_judge_ids: Optional[frozenset[str]] = None
    source: str = "active"  # "assignment", "target", or "active"


@dataclass(frozen=True)
class CategoryAssignment:
    """A category paired with the judges whose scores count toward it."""

    category: Category
    judge_count: int
    allowed_judge_ids: Optional[frozenset[str]] = None


@dataclass(frozen=True)
class JudgeAssignmentResolution:
    """All judge scopes for one snapshot."""

    active_judge_ids: frozenset[str]
    overall_judge_count: int
    rounds: dict[str, RoundJudgeScope] = field(default_factory=dict)
    category_judges: dict[str, Optional[frozenset[str]]] = field(default_factory=dict)

    def round_scope(self, round_id: str) -> RoundJudgeScope:
        """Scope for a round; unknown rounds fall back to all active judges."""
        scope = self.rounds.get(round_id)
        if scope is None:
            return RoundJudgeScope(round_id=round_id, judge_count=len(self.active_judge_ids))
        return scope

    def assign(self, categories: Iterable[Category], context_judge_count: int) -> list[CategoryAssignment]:
        """Pair categories with their judge scope.

        Args:
            categories: Categories to score
            context_judge_count: Count used for categories with no allowed set
                (the round's count inside a round, the overall count otherwise)
        """
        assignments = []
        for category in categories:
            allowed = self.category_judges.get(category.id)
            count = len(allowed) if allowed is not None else context_judge_count
            assignments.append(
                CategoryAssignment(category=category, judge_count=count, allowed_judge_ids=allowed)
            )
        return assignments


def resolve_active_judges(judges: Iterable[Judge]) -> frozenset[str]:
    """Ids of active judges."""
    return frozenset(j.id for j in judges if j.active)


def resolve_round_scope(
    round_: Round,
    active_judge_ids: frozenset[str],
    round_assignments: dict[str, list[str]],
) -> RoundJudgeScope:
    """Apply the assignment > target > active priority to one round."""
    if round_.id in round_assignments:
        allowed = frozenset(round_assignments[round_.id]) & active_judge_ids
        return RoundJudgeScope(
            round_id=round_.id,
            judge_count=len(allowed),
            allowed_judge_ids=allowed,
            source="assignment",
        )

    if round_.judge_target is not None and round_.judge_target > 0:
        return RoundJudgeScope(
            round_id=round_.id,
            judge_count=int(round_.judge_target),
            source="target",
        )

    return RoundJudgeScope(round_id=round_.id, judge_count=len(active_judge_ids))


def resolve_overall_judge_count(scopes: Iterable[RoundJudgeScope], active_judge_ids: frozenset[str]) -> int:
    """Maximum per-round count; all active judges when there are no rounds."""
    counts = [scope.judge_count for scope in scopes]
    if not counts:
        return len(active_judge_ids)
    return max(counts)


def resolve_category_judges(
    category: Category,
    round_scope: Optional[RoundJudgeScope],
    active_judge_ids: frozenset[str],
    category_assignments: dict[str, list[str]],
) -> Optional[frozenset[str]]:
    """Allowed judge ids for a category, or None when every judge counts.

    The category's own list comes from the assignment table, or from
    ``allowed_judge_ids`` on the category when the table has no entry for it.
    """
    inherited = round_scope.allowed_judge_ids if round_scope is not None else None

    own_list = category_assignments.get(category.id)
    if own_list is None:
        own_list = category.allowed_judge_ids
    if own_list is None:
        return inherited

    own = frozenset(own_list) & active_judge_ids
    if inherited is None:
        return own
    return own & inherited


def resolve_judge_assignments(snapshot: CompetitionSnapshot) -> JudgeAssignmentResolution:
    """Resolve every round and category judge scope for a snapshot."""
    active = resolve_active_judges(snapshot.judges)

    round_scopes = {
        r.id: resolve_round_scope(r, active, snapshot.round_judge_assignments) for r in snapshot.rounds
    }
    overall = resolve_overall_judge_count(round_scopes.values(), active)

    category_judges = {
        c.id: resolve_category_judges(
            c,
            round_scopes.get(c.round_id) if c.round_id else None,
            active,
            snapshot.category_judge_assignments,
        )
        for c in snapshot.categories
    }

    for scope in round_scopes.values():
        logger.debug(
            f"Round {scope.round_id}: {scope.judge_count} judges expected (source={scope.source})"
        )

    return JudgeAssignmentResolution(
        active_judge_ids=active,
        overall_judge_count=overall,
        rounds=round_scopes,
        category_judges=category_judges,
    )
