"""Category Scorer - normalized, weighted and completion-damped category results.

For one contestant and one category:

1. Per criterion, average the contestant's records for that criterion (restricted
   to the allowed judges, when there are any). A criterion nobody scored averages
   0 and is still listed, so the category max covers every defined criterion.
2. raw_total = sum of averages; category_max = sum of criteria max points.
3. raw_normalized = raw_total / category_max * 100 (0 when the max is 0).
4. raw_weighted = raw_normalized * percentage / 100.
5. expected = judge_count * number_of_criteria when the judge count is positive,
   otherwise the actual submission count (an unknown judge count never forces
   completion to 0).
6. completion_ratio = min(submissions / expected, 1), 0 when nothing is expected.
7. normalized and weighted are the raw values times completion_ratio.
"""

from typing import Iterable, Optional, Sequence

from scoreboard.schemas.snapshot import Category, Contestant, Criterion, ScoreRecord
from scoreboard.schemas.standings import CategoryScore, CriterionDetail, StandingEntry
from scoreboard.scorers.gender import contestant_gender
from scoreboard.scorers.judge_assignments import CategoryAssignment
from scoreboard.scorers.score_index import coerce_score_value
from scoreboard.utils.scoring_audit import AuditKind, StandingsAuditLog


def safe_ratio(numerator: float, denominator: float) -> float:
    """Division that yields 0 for a zero denominator."""
    if not denominator:
        return 0.0
    return numerator / denominator


def _criterion_value(
    record: ScoreRecord,
    criterion: Criterion,
    category: Category,
    audit_log: Optional[StandingsAuditLog],
) -> float:
    """Read one record's value, clamped to the criterion's point range."""
    number, coerced = coerce_score_value(record.value)
    if coerced and audit_log is not None:
        audit_log.record(
            AuditKind.COERCED_VALUE,
            f"Score value {record.value!r} for contestant {record.contestant_id} "
            f"criterion {criterion.id} judge {record.judge_id} read as {number}",
            contestant_id=record.contestant_id,
            category_id=category.id,
            criterion_id=criterion.id,
            judge_id=record.judge_id,
            value=record.value,
        )

    upper = max(criterion.max_points, 0.0)
    clamped = min(max(number, 0.0), upper)
    if clamped != number and audit_log is not None:
        audit_log.record(
            AuditKind.OUT_OF_RANGE,
            f"Score {number} for contestant {record.contestant_id} criterion {criterion.id} "
            f"judge {record.judge_id} outside [0, {upper}], clamped to {clamped}",
            contestant_id=record.contestant_id,
            category_id=category.id,
            criterion_id=criterion.id,
            judge_id=record.judge_id,
            value=number,
        )
    return clamped


def score_category(
    category: Category,
    contestant_scores: Sequence[ScoreRecord],
    judge_count: int,
    allowed_judge_ids: Optional[frozenset[str]] = None,
    audit_log: Optional[StandingsAuditLog] = None,
) -> CategoryScore:
    """Score one category for one contestant.

    Args:
        category: Category with its criteria
        contestant_scores: The contestant's records (from the score index)
        judge_count: Effective judge count for this category
        allowed_judge_ids: Judges whose records count; None means all
        audit_log: Optional collector for coerced or clamped values

    Returns:
        CategoryScore with damped and raw values and per-criterion detail
    """
    criteria = category.ordered_criteria
    details: list[CriterionDetail] = []
    raw_total = 0.0
    submissions = 0

    for criterion in criteria:
        entries = [
            record
            for record in contestant_scores
            if record.criterion_id == criterion.id
            and (allowed_judge_ids is None or record.judge_id in allowed_judge_ids)
        ]
        if not entries:
            details.append(
                CriterionDetail(
                    criterion_id=criterion.id,
                    name=criterion.name,
                    average=0.0,
                    max_points=criterion.max_points,
                    submissions=0,
                )
            )
            continue

        values = [_criterion_value(record, criterion, category, audit_log) for record in entries]
        average = sum(values) / len(values)
        details.append(
            CriterionDetail(
                criterion_id=criterion.id,
                name=criterion.name,
                average=average,
                max_points=criterion.max_points,
                submissions=len(entries),
            )
        )
        raw_total += average
        submissions += len(entries)

    raw_normalized = safe_ratio(raw_total, category.max_total) * 100
    raw_weighted = raw_normalized * (category.percentage / 100)

    if judge_count and judge_count > 0:
        expected = judge_count * len(criteria)
    else:
        expected = submissions
    completion_ratio = min(safe_ratio(submissions, expected), 1.0)

    return CategoryScore(
        category_id=category.id,
        name=category.name,
        percentage=category.percentage,
        normalized=raw_normalized * completion_ratio,
        weighted=raw_weighted * completion_ratio,
        raw_normalized=raw_normalized,
        raw_weighted=raw_weighted,
        completion_ratio=completion_ratio,
        submissions=submissions,
        expected_submissions=expected,
        judge_count=max(judge_count or 0, 0),
        criteria_detail=details,
    )


def score_contestant(
    contestant: Contestant,
    assignments: Iterable[CategoryAssignment],
    score_index: dict[str, list[ScoreRecord]],
    audit_log: Optional[StandingsAuditLog] = None,
) -> StandingEntry:
    """Score a contestant across several categories (unranked entry).

    Totals are sums over categories; ``completion_rate`` is the integer
    percentage of expected submissions received, capped at 100.
    """
    contestant_scores = score_index.get(contestant.id, [])
    breakdown = [
        score_category(
            a.category,
            contestant_scores,
            a.judge_count,
            allowed_judge_ids=a.allowed_judge_ids,
            audit_log=audit_log,
        )
        for a in assignments
    ]

    total_submissions = sum(c.submissions for c in breakdown)
    expected = sum(c.expected_submissions for c in breakdown)
    completion = min(safe_ratio(total_submissions, expected), 1.0)

    return StandingEntry(
        contestant=contestant,
        gender=contestant_gender(contestant),
        total_weighted_score=sum(c.weighted for c in breakdown),
        undamped_weighted_score=sum(c.raw_weighted for c in breakdown),
        total_submissions=total_submissions,
        expected_submissions=expected,
        completion_rate=round(completion * 100),
        category_breakdown=breakdown,
    )
