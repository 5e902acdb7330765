"""Deterministic standings engine."""

from scoreboard.scorers.category_scorer import score_category, score_contestant
from scoreboard.scorers.competition import (
    compute_competition_standings,
    compute_overall_standings,
    summarize_round_progression,
)
from scoreboard.scorers.gender import contestant_gender, normalize_gender
from scoreboard.scorers.judge_assignments import (
    CategoryAssignment,
    JudgeAssignmentResolution,
    RoundJudgeScope,
    resolve_judge_assignments,
)
from scoreboard.scorers.round_standings import build_gender_limits, compute_round_standings
from scoreboard.scorers.score_index import build_score_index, coerce_score_value

__all__ = [
    # Gender
    "normalize_gender",
    "contestant_gender",
    # Score index
    "build_score_index",
    "coerce_score_value",
    # Judge assignments
    "CategoryAssignment",
    "JudgeAssignmentResolution",
    "RoundJudgeScope",
    "resolve_judge_assignments",
    # Scoring
    "score_category",
    "score_contestant",
    "build_gender_limits",
    "compute_round_standings",
    "compute_overall_standings",
    "compute_competition_standings",
    "summarize_round_progression",
]
