"""Input snapshot and output standings schemas."""

from scoreboard.schemas.snapshot import (
    GENDER_ORDER,
    Category,
    CompetitionSnapshot,
    Contestant,
    Criterion,
    Gender,
    Judge,
    Round,
    ScoreRecord,
)
from scoreboard.schemas.standings import (
    CategoryScore,
    CompetitionStandings,
    CriterionDetail,
    GenderBuckets,
    GenderLimits,
    OverallStandings,
    ParticipantBuckets,
    RoundProgression,
    RoundResult,
    StandingEntry,
)

__all__ = [
    # Snapshot
    "GENDER_ORDER",
    "Category",
    "CompetitionSnapshot",
    "Contestant",
    "Criterion",
    "Gender",
    "Judge",
    "Round",
    "ScoreRecord",
    # Standings
    "CategoryScore",
    "CompetitionStandings",
    "CriterionDetail",
    "GenderBuckets",
    "GenderLimits",
    "OverallStandings",
    "ParticipantBuckets",
    "RoundProgression",
    "RoundResult",
    "StandingEntry",
]
