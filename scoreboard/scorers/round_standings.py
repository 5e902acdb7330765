"""Round Standings Calculator - ranks a contestant pool within one round.

Steps:
1. A round with no categories cannot be scored: empty result.
2. Score every contestant in the pool over the round's categories.
3. Drop contestants with zero submissions in this round.
4. Sort by total weighted score (descending) and number the positions.
5. Bucket by gender, keeping order.
6. Truncate each bucket to the round's participation cap. The truncated set is
   what the round displays and the only set eligible to advance.
7. Mark the top of each capped bucket as highlighted (presentation only).
8. The advancing pool is the union of the capped buckets' contestants.

Equal totals are ordered by contestant number (unnumbered last), then by
contestant id, so the order never depends on input order.
"""

import logging
from typing import Iterable, Optional, Sequence

from scoreboard.schemas.snapshot import GENDER_ORDER, Category, Contestant, Gender, Round, ScoreRecord
from scoreboard.schemas.standings import (
    GenderBuckets,
    GenderLimits,
    ParticipantBuckets,
    RoundResult,
    StandingEntry,
)
from scoreboard.scorers.category_scorer import score_contestant
from scoreboard.scorers.judge_assignments import CategoryAssignment
from scoreboard.utils.scoring_audit import StandingsAuditLog

logger = logging.getLogger(__name__)


# =============================================================================
# Gender limits
# =============================================================================


def resolve_gender_limit(value) -> Optional[dict[Gender, int]]:
    """Expand a configured cap into a per-gender mapping.

    A single number applies to every bucket; a mapping sets buckets individually.
    Missing, zero, or negative caps mean "unlimited" and are left out.
    """
    if value is None:
        return None
    if isinstance(value, dict):
        limits = {}
        for gender in GENDER_ORDER:
            cap = value.get(gender.value)
            if cap is not None and cap > 0:
                limits[gender] = int(cap)
        return limits or None
    if value > 0:
        return {gender: int(value) for gender in GENDER_ORDER}
    return None


def build_gender_limits(round_: Round) -> GenderLimits:
    """Resolve the participation, advancement and highlight caps of a round."""
    return GenderLimits(
        participation=resolve_gender_limit(round_.max_per_gender),
        advancement=resolve_gender_limit(round_.advance_per_gender),
        highlight=resolve_gender_limit(round_.highlight_per_gender),
    )


# =============================================================================
# Ranking helpers (shared with the overall standings)
# =============================================================================


def standing_sort_key(entry: StandingEntry) -> tuple:
    """Score descending, then contestant number ascending, then id."""
    number = entry.contestant.number
    return (
        -entry.total_weighted_score,
        number is None,
        number if number is not None else 0,
        entry.contestant.id,
    )


def rank_entries(entries: Iterable[StandingEntry]) -> list[StandingEntry]:
    """Drop unscored entries, sort, and assign 1-based overall ranks."""
    scored = [e for e in entries if e.total_submissions > 0]
    scored.sort(key=standing_sort_key)
    return [e.model_copy(update={"overall_rank": position}) for position, e in enumerate(scored, start=1)]


def apply_gender_caps(
    ranked: Sequence[StandingEntry],
    participation: Optional[dict[Gender, int]] = None,
    highlight: Optional[dict[Gender, int]] = None,
) -> GenderBuckets:
    """Bucket ranked entries by gender, cap each bucket, and annotate it.

    Every kept entry gets its ``gender_rank``; ``is_highlighted`` is set only
    when a highlight cap is configured.
    """
    buckets: dict[Gender, list[StandingEntry]] = {gender: [] for gender in GENDER_ORDER}
    for entry in ranked:
        buckets[entry.gender].append(entry)

    annotated = {}
    for gender, entries in buckets.items():
        cap = participation.get(gender) if participation else None
        if cap is not None:
            entries = entries[:cap]
        highlight_cap = highlight.get(gender, 0) if highlight else None
        annotated[gender.value] = [
            e.model_copy(
                update={
                    "gender_rank": position,
                    "is_highlighted": None if highlight_cap is None else position <= highlight_cap,
                }
            )
            for position, e in enumerate(entries, start=1)
        ]
    return GenderBuckets(**annotated)


def displayed_rankings(by_gender: GenderBuckets) -> list[StandingEntry]:
    """Merge capped gender buckets back into one list in overall rank order."""
    merged = [e for _, entries in by_gender.items() for e in entries]
    merged.sort(key=lambda e: e.overall_rank)
    return merged


# =============================================================================
# Round standings
# =============================================================================


def compute_round_standings(
    round_: Round,
    assignments: Sequence[CategoryAssignment],
    contestants: Sequence[Contestant],
    score_index: dict[str, list[ScoreRecord]],
    judge_count: int,
    audit_log: Optional[StandingsAuditLog] = None,
) -> RoundResult:
    """Rank a contestant pool within one round.

    Args:
        round_: The round being scored
        assignments: The round's categories paired with their judge scopes
        contestants: Current pool (all contestants, or the previous round's advancers)
        score_index: Score records grouped by contestant
        judge_count: The round's effective judge count
        audit_log: Optional collector for degraded inputs

    Returns:
        RoundResult whose ``participants`` are the advancing pool
    """
    limits = build_gender_limits(round_)
    if not assignments:
        logger.debug(f"Round {round_.id} has no categories, nothing to rank")
        return RoundResult(round=round_, judge_count=judge_count, limits=limits)

    entries = [score_contestant(c, assignments, score_index, audit_log=audit_log) for c in contestants]
    ranked = rank_entries(entries)
    by_gender = apply_gender_caps(ranked, limits.participation, limits.highlight)

    participants = ParticipantBuckets(
        **{gender.value: [e.contestant for e in by_gender.get(gender)] for gender in GENDER_ORDER}
    )

    logger.debug(
        f"Round {round_.id}: pool={len(contestants)} scored={len(ranked)} "
        f"displayed={by_gender.total()} judges={judge_count}"
    )

    return RoundResult(
        round=round_,
        rankings=displayed_rankings(by_gender),
        by_gender=by_gender,
        participants=participants,
        judge_count=judge_count,
        limits=limits,
    )


def round_categories(round_: Round, categories: Iterable[Category]) -> list[Category]:
    """Categories attached to a round, in display order."""
    attached = [c for c in categories if c.round_id == round_.id]
    return sorted(attached, key=lambda c: c.order_index)
