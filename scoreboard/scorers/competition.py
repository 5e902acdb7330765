"""Competition Standings Orchestrator - overall and round-by-round standings.

Pure function of a snapshot: no caches, no state kept between calls. The
surrounding application re-invokes it in full on every score write, roster change
or configuration edit, so duplicate or out-of-order notifications are harmless.

Round advancement is a fold over the rounds in order:

    pool_0 = all contestants
    pool_n+1 = advancing(round_n, pool_n)   (or pool_n if round_n advanced nobody)

A round whose advancing pool is empty (typically: nobody scored yet) leaves the
pool unchanged, so rounds that have not started are not starved in advance.
"""

import logging
from dataclasses import dataclass
from functools import partial, reduce
from typing import Any, Iterable, Optional, Union

from scoreboard.schemas.snapshot import Category, CompetitionSnapshot, Contestant, Round, ScoreRecord
from scoreboard.schemas.standings import (
    CompetitionStandings,
    OverallStandings,
    RoundProgression,
    RoundResult,
)
from scoreboard.scorers.category_scorer import score_contestant
from scoreboard.scorers.judge_assignments import JudgeAssignmentResolution, resolve_judge_assignments
from scoreboard.scorers.round_standings import (
    apply_gender_caps,
    compute_round_standings,
    rank_entries,
    round_categories,
)
from scoreboard.scorers.score_index import build_score_index
from scoreboard.utils.scoring_audit import AuditKind, StandingsAuditLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Progress:
    """Fold state: the pool entering the next round and the results so far."""

    pool: tuple[Contestant, ...]
    results: tuple[RoundResult, ...] = ()


def sort_rounds(rounds: Iterable[Round]) -> list[Round]:
    """Rounds by order index, then id."""
    return sorted(rounds, key=lambda r: (r.order_index, r.id))


def compute_overall_standings(
    contestants: Iterable[Contestant],
    categories: Iterable[Category],
    score_index: dict[str, list[ScoreRecord]],
    resolution: JudgeAssignmentResolution,
    audit_log: Optional[StandingsAuditLog] = None,
) -> OverallStandings:
    """Standings over every category regardless of round, with no caps."""
    ordered = sorted(categories, key=lambda c: c.order_index)
    assignments = resolution.assign(ordered, resolution.overall_judge_count)
    entries = [score_contestant(c, assignments, score_index, audit_log=audit_log) for c in contestants]
    ranked = rank_entries(entries)
    return OverallStandings(
        rankings=ranked,
        by_gender=apply_gender_caps(ranked),
        judge_count=resolution.overall_judge_count,
    )


def _advance_round(
    progress: _Progress,
    round_: Round,
    categories: list[Category],
    score_index: dict[str, list[ScoreRecord]],
    resolution: JudgeAssignmentResolution,
    audit_log: Optional[StandingsAuditLog],
) -> _Progress:
    """One fold step: rank the current pool in a round and pick the next pool."""
    scope = resolution.round_scope(round_.id)
    assignments = resolution.assign(round_categories(round_, categories), scope.judge_count)
    result = compute_round_standings(
        round_,
        assignments,
        progress.pool,
        score_index,
        scope.judge_count,
        audit_log=audit_log,
    )

    advancing = tuple(result.advancing)
    if not advancing:
        logger.debug(f"Round {round_.id} advanced nobody, keeping pool of {len(progress.pool)}")
    return _Progress(pool=advancing or progress.pool, results=progress.results + (result,))


def audit_configuration(snapshot: CompetitionSnapshot, audit_log: StandingsAuditLog) -> None:
    """Record configuration problems the engine tolerates silently."""
    for category in snapshot.categories:
        if category.criteria and category.max_total <= 0:
            audit_log.record(
                AuditKind.ZERO_MAX_CATEGORY,
                f"Category {category.id} criteria have no positive max points; it always scores 0",
                category_id=category.id,
                round_id=category.round_id,
            )

    for round_ in snapshot.rounds:
        total = sum(c.percentage for c in round_categories(round_, snapshot.categories))
        if total > 100:
            audit_log.record(
                AuditKind.OVERWEIGHT_ROUND,
                f"Round {round_.id} category percentages sum to {total:g} (expected <= 100)",
                round_id=round_.id,
                value=total,
            )


def compute_competition_standings(
    snapshot: Union[CompetitionSnapshot, dict[str, Any]],
    audit_log: Optional[StandingsAuditLog] = None,
) -> CompetitionStandings:
    """Compute overall and per-round standings for one snapshot.

    Args:
        snapshot: The competition snapshot (a model, or a plain dict to validate)
        audit_log: Optional collector for coerced values and configuration problems

    Returns:
        CompetitionStandings with ``overall`` and one ``RoundResult`` per round
    """
    if not isinstance(snapshot, CompetitionSnapshot):
        snapshot = CompetitionSnapshot.model_validate(snapshot)

    if audit_log is not None:
        audit_configuration(snapshot, audit_log)

    resolution = resolve_judge_assignments(snapshot)
    score_index = build_score_index(snapshot.scores)

    overall = compute_overall_standings(
        snapshot.contestants,
        snapshot.categories,
        score_index,
        resolution,
        audit_log=audit_log,
    )

    step = partial(
        _advance_round,
        categories=snapshot.categories,
        score_index=score_index,
        resolution=resolution,
        audit_log=audit_log,
    )
    progress = reduce(step, sort_rounds(snapshot.rounds), _Progress(pool=tuple(snapshot.contestants)))

    logger.debug(
        f"Computed standings: contestants={len(snapshot.contestants)} ranked={len(overall.rankings)} "
        f"rounds={len(progress.results)}"
    )
    return CompetitionStandings(overall=overall, rounds=list(progress.results))


def summarize_round_progression(rounds: Iterable[RoundResult]) -> list[RoundProgression]:
    """Participant head-count per gender for each round."""
    return [
        RoundProgression(
            round_id=result.round.id,
            name=result.round.name,
            male_count=len(result.participants.male),
            female_count=len(result.participants.female),
            other_count=len(result.participants.other),
        )
        for result in rounds
    ]
