"""Pydantic schemas for the standings the engine produces.

The structure mirrors what the leaderboard, export and broadcast collaborators
consume: an overall (cross-round) ranking plus one result per round, each with a
gender-partitioned view. ``model_dump(by_alias=True)`` yields camelCase keys.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from scoreboard.schemas.snapshot import GENDER_ORDER, Contestant, Gender, Round


class StandingsModel(BaseModel):
    """Base for engine output: camelCase aliases, immutable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CriterionDetail(StandingsModel):
    """Averaged result for one criterion. Unanswered criteria are listed with 0."""

    criterion_id: str
    name: Optional[str] = None
    average: float = 0.0
    max_points: float = 0.0
    submissions: int = 0


class CategoryScore(StandingsModel):
    """One contestant's result in one category.

    ``normalized``/``weighted`` are damped by ``completion_ratio``; the ``raw_``
    variants are the undamped values.
    """

    category_id: str
    name: Optional[str] = None
    percentage: float = 0.0
    normalized: float = 0.0
    weighted: float = 0.0
    raw_normalized: float = 0.0
    raw_weighted: float = 0.0
    completion_ratio: float = 0.0
    submissions: int = 0
    expected_submissions: int = 0
    judge_count: int = 0
    criteria_detail: List[CriterionDetail] = Field(default_factory=list)


class StandingEntry(StandingsModel):
    """A contestant's position in a ranking."""

    contestant: Contestant
    gender: Gender
    total_weighted_score: float = 0.0
    undamped_weighted_score: float = 0.0
    total_submissions: int = 0
    expected_submissions: int = 0
    completion_rate: int = 0
    category_breakdown: List[CategoryScore] = Field(default_factory=list)
    overall_rank: int = 0
    gender_rank: Optional[int] = None
    is_highlighted: Optional[bool] = None

    @property
    def contestant_id(self) -> str:
        return self.contestant.id


class GenderBuckets(StandingsModel):
    """Standing entries split by gender, each list in ranking order."""

    male: List[StandingEntry] = Field(default_factory=list)
    female: List[StandingEntry] = Field(default_factory=list)
    other: List[StandingEntry] = Field(default_factory=list)

    def get(self, gender: Gender) -> List[StandingEntry]:
        return getattr(self, gender.value)

    def items(self) -> Iterator[Tuple[Gender, List[StandingEntry]]]:
        for gender in GENDER_ORDER:
            yield gender, self.get(gender)

    def total(self) -> int:
        return sum(len(entries) for _, entries in self.items())


class ParticipantBuckets(StandingsModel):
    """Contestant identities (no scores) split by gender."""

    male: List[Contestant] = Field(default_factory=list)
    female: List[Contestant] = Field(default_factory=list)
    other: List[Contestant] = Field(default_factory=list)

    def get(self, gender: Gender) -> List[Contestant]:
        return getattr(self, gender.value)

    def all(self) -> List[Contestant]:
        """Every participant, male first, then female, then other."""
        return [c for gender in GENDER_ORDER for c in self.get(gender)]


class GenderLimits(StandingsModel):
    """Resolved per-gender caps for a round. ``None`` means unlimited."""

    participation: Optional[Dict[Gender, int]] = None
    advancement: Optional[Dict[Gender, int]] = None
    highlight: Optional[Dict[Gender, int]] = None


class RoundResult(StandingsModel):
    """Standings for one round and the pool it advances."""

    round: Round
    rankings: List[StandingEntry] = Field(default_factory=list)
    by_gender: GenderBuckets = Field(default_factory=GenderBuckets)
    participants: ParticipantBuckets = Field(default_factory=ParticipantBuckets)
    judge_count: int = 0
    limits: GenderLimits = Field(default_factory=GenderLimits)

    @property
    def advancing(self) -> List[Contestant]:
        """The advancing pool: identities of every displayed participant."""
        return self.participants.all()


class OverallStandings(StandingsModel):
    """Cross-round standings over every category, without caps."""

    rankings: List[StandingEntry] = Field(default_factory=list)
    by_gender: GenderBuckets = Field(default_factory=GenderBuckets)
    judge_count: int = 0


class CompetitionStandings(StandingsModel):
    """Top-level engine output."""

    overall: OverallStandings = Field(default_factory=OverallStandings)
    rounds: List[RoundResult] = Field(default_factory=list)

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize with camelCase keys (stable for identical input)."""
        return self.model_dump_json(by_alias=True, indent=indent)


class RoundProgression(StandingsModel):
    """Head-count of a round's participants per gender."""

    round_id: str
    name: Optional[str] = None
    male_count: int = 0
    female_count: int = 0
    other_count: int = 0
