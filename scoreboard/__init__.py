"""Live judging standings: ranked, gender-partitioned, completion-aware."""

from scoreboard.scorers.competition import compute_competition_standings, summarize_round_progression
from scoreboard.schemas.snapshot import CompetitionSnapshot
from scoreboard.schemas.standings import CompetitionStandings

__version__ = "1.0.0"

__all__ = [
    "CompetitionSnapshot",
    "CompetitionStandings",
    "compute_competition_standings",
    "summarize_round_progression",
]
