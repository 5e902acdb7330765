"""Tests for judge assignment resolution (expected-submission denominators)."""

from conftest import talent_category
from scoreboard.schemas.snapshot import Category, CompetitionSnapshot, Judge, Round
from scoreboard.scorers.judge_assignments import (
    resolve_active_judges,
    resolve_category_judges,
    resolve_judge_assignments,
    resolve_overall_judge_count,
    resolve_round_scope,
)

JUDGES = [
    Judge(id="j1"),
    Judge(id="j2"),
    Judge(id="j3"),
    Judge(id="j4", active=False),
]
ACTIVE = frozenset({"j1", "j2", "j3"})


class TestActiveJudges:
    def test_inactive_judges_excluded(self):
        assert resolve_active_judges(JUDGES) == ACTIVE

    def test_missing_active_flag_means_active(self):
        judge = Judge.model_validate({"id": 5, "is_active": None})
        assert judge.active is True


class TestRoundScope:
    """Assignment list > positive target > active count."""

    def test_assignment_list_intersects_active(self):
        scope = resolve_round_scope(Round(id="r1", judge_target=5), ACTIVE, {"r1": ["j1", "j4", "j9"]})
        assert scope.judge_count == 1
        assert scope.allowed_judge_ids == frozenset({"j1"})
        assert scope.source == "assignment"

    def test_empty_assignment_list_is_zero(self):
        """An assigned-but-empty round expects nobody rather than everybody."""
        scope = resolve_round_scope(Round(id="r1"), ACTIVE, {"r1": []})
        assert scope.judge_count == 0
        assert scope.allowed_judge_ids == frozenset()

    def test_judge_target(self):
        scope = resolve_round_scope(Round(id="r1", judge_target=5), ACTIVE, {})
        assert scope.judge_count == 5
        assert scope.allowed_judge_ids is None
        assert scope.source == "target"

    def test_non_positive_target_falls_back_to_active(self):
        for target in (0, -1, "many"):
            scope = resolve_round_scope(Round.model_validate({"id": "r1", "judge_target": target}), ACTIVE, {})
            assert scope.judge_count == 3
            assert scope.source == "active"

    def test_no_configuration_uses_active_count(self):
        scope = resolve_round_scope(Round(id="r1"), ACTIVE, {"other": ["j1"]})
        assert scope.judge_count == 3


class TestOverallJudgeCount:
    def test_maximum_of_round_counts(self):
        scopes = [
            resolve_round_scope(Round(id="r1", judge_target=2), ACTIVE, {}),
            resolve_round_scope(Round(id="r2", judge_target=6), ACTIVE, {}),
        ]
        assert resolve_overall_judge_count(scopes, ACTIVE) == 6

    def test_no_rounds_uses_active_count(self):
        assert resolve_overall_judge_count([], ACTIVE) == 3


class TestCategoryJudges:
    def test_inherits_round_set(self):
        round_scope = resolve_round_scope(Round(id="r1"), ACTIVE, {"r1": ["j1", "j2"]})
        category = Category.model_validate(talent_category())
        assert resolve_category_judges(category, round_scope, ACTIVE, {}) == frozenset({"j1", "j2"})

    def test_narrows_round_set(self):
        round_scope = resolve_round_scope(Round(id="r1"), ACTIVE, {"r1": ["j1", "j2"]})
        category = Category.model_validate(talent_category())
        allowed = resolve_category_judges(category, round_scope, ACTIVE, {"talent": ["j2", "j3"]})
        assert allowed == frozenset({"j2"})

    def test_own_list_without_round_set(self):
        round_scope = resolve_round_scope(Round(id="r1"), ACTIVE, {})
        category = Category.model_validate(talent_category())
        allowed = resolve_category_judges(category, round_scope, ACTIVE, {"talent": ["j3", "j4"]})
        assert allowed == frozenset({"j3"})

    def test_allowed_ids_on_category(self):
        category = Category.model_validate(talent_category(judge_ids=[1, 2]))
        assert resolve_category_judges(category, None, frozenset({"1", "2", "3"}), {}) == frozenset({"1", "2"})

    def test_unrestricted_category(self):
        category = Category.model_validate(talent_category())
        assert resolve_category_judges(category, None, ACTIVE, {}) is None


class TestResolveJudgeAssignments:
    def test_full_resolution(self):
        snapshot = CompetitionSnapshot.model_validate(
            {
                "judges": [{"id": "j1"}, {"id": "j2"}, {"id": "j3"}],
                "rounds": [{"id": "r1"}, {"id": "r2", "judge_target": 5}],
                "categories": [talent_category("r1"), {"id": "loose", "criteria": []}],
                "round_judge_assignments": [
                    {"round_id": "r1", "judge_id": "j1"},
                    {"round_id": "r1", "judge_id": "j2"},
                ],
            }
        )
        resolution = resolve_judge_assignments(snapshot)
        assert resolution.round_scope("r1").judge_count == 2
        assert resolution.round_scope("r2").judge_count == 5
        assert resolution.overall_judge_count == 5

        assigned = {a.category.id: a for a in resolution.assign(snapshot.categories, 7)}
        assert assigned["talent"].judge_count == 2
        assert assigned["talent"].allowed_judge_ids == frozenset({"j1", "j2"})
        assert assigned["loose"].judge_count == 7
        assert assigned["loose"].allowed_judge_ids is None

    def test_unknown_round_scope_uses_active_judges(self):
        snapshot = CompetitionSnapshot.model_validate({"judges": [{"id": "j1"}, {"id": "j2", "active": False}]})
        resolution = resolve_judge_assignments(snapshot)
        assert resolution.round_scope("nope").judge_count == 1
        assert resolution.overall_judge_count == 1
