"""Tests for snapshot file loading and schema ingestion."""

import json

import pytest
from conftest import score, talent_category
from scoreboard.schemas.snapshot import CompetitionSnapshot, Gender
from scoreboard.utils.snapshot_loader import SnapshotLoadError, load_snapshot, resolve_snapshot_path

SNAPSHOT = {
    "contestants": [{"id": 1, "number": 1, "name": "Ana", "gender": "female", "photoUrl": "ana.png"}],
    "categories": [talent_category()],
    "rounds": [{"id": "r1", "orderIndex": 1, "judgeTarget": 2}],
    "judges": [{"id": "A"}, {"id": "B", "is_active": False}],
    "scores": [score(1, "stage", "A", 30)],
    "roundJudgeAssignments": {"r1": ["A", "B"]},
}


class TestLoadSnapshot:
    def test_json(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(SNAPSHOT))
        snapshot = load_snapshot(path)

        assert snapshot.contestants[0].gender == Gender.FEMALE
        assert snapshot.rounds[0].judge_target == 2
        assert snapshot.judges[1].active is False
        assert snapshot.round_judge_assignments == {"r1": ["A", "B"]}

    def test_yaml(self, tmp_path):
        path = tmp_path / "snapshot.yaml"
        path.write_text(
            "contestants:\n"
            "  - id: 7\n"
            "    sex: Men\n"
            "rounds:\n"
            "  - id: final\n"
            "    participants_per_gender: 3\n"
        )
        snapshot = load_snapshot(path)
        assert snapshot.contestants[0].id == "7"
        assert snapshot.rounds[0].max_per_gender == 3

    def test_empty_file_is_empty_snapshot(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_snapshot(path) == CompetitionSnapshot()

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_DATA_DIR", str(tmp_path / "data"))
        with pytest.raises(SnapshotLoadError, match="not found"):
            load_snapshot(tmp_path / "nope.json")

    def test_unparseable(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotLoadError, match="Failed to parse"):
            load_snapshot(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(SnapshotLoadError, match="mapping"):
            load_snapshot(path)

    def test_validation_error(self, tmp_path):
        path = tmp_path / "invalid.json"
        path.write_text(json.dumps({"contestants": "everyone"}))
        with pytest.raises(SnapshotLoadError, match="Invalid snapshot"):
            load_snapshot(path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin.json"
        path.write_bytes(b'{"contestants": ["\xff"]}')
        with pytest.raises(SnapshotLoadError, match="Failed to read"):
            load_snapshot(path)

    def test_directory_is_not_a_snapshot(self, tmp_path):
        folder = tmp_path / "snapshot.json"
        folder.mkdir()
        with pytest.raises(SnapshotLoadError, match="Failed to read"):
            load_snapshot(folder)

    def test_load_error_is_value_error(self):
        assert issubclass(SnapshotLoadError, ValueError)


class TestResolveSnapshotPath:
    def test_falls_back_to_snapshot_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_DATA_DIR", str(tmp_path))
        monkeypatch.chdir(tmp_path)
        stored = tmp_path / "snapshots" / "pageant.json"
        stored.parent.mkdir()
        stored.write_text("{}")
        assert resolve_snapshot_path("pageant.json") == stored.resolve()

    def test_existing_relative_path_wins(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "local.json").write_text("{}")
        assert resolve_snapshot_path("local.json").name == "local.json"


class TestSnapshotIngestion:
    def test_extra_contestant_attributes_pass_through(self):
        snapshot = CompetitionSnapshot.model_validate(SNAPSHOT)
        assert snapshot.contestants[0].model_extra["photoUrl"] == "ana.png"

    def test_assignment_rows(self):
        snapshot = CompetitionSnapshot.model_validate(
            {
                "category_judge_assignments": [
                    {"category_id": 3, "judge_id": 1},
                    {"categoryId": 3, "judgeId": 2.0},
                    {"category_id": 4, "judge_id": None},
                ]
            }
        )
        assert snapshot.category_judge_assignments == {"3": ["1", "2"], "4": []}

    def test_none_collections(self):
        snapshot = CompetitionSnapshot.model_validate({"contestants": None, "scores": None})
        assert snapshot.contestants == []
        assert snapshot.scores == []

    @pytest.mark.parametrize("number, expected", [("A-12", None), ("12", 12), (12.0, 12), (3.5, None), (True, None)])
    def test_contestant_number_is_lenient(self, number, expected):
        snapshot = CompetitionSnapshot.model_validate({"contestants": [{"id": "m1", "sex": "M", "number": number}]})
        assert snapshot.contestants[0].number == expected

    def test_cap_mapping_with_null_side(self):
        snapshot = CompetitionSnapshot.model_validate(
            {"rounds": [{"id": "r1", "max_per_gender": {"male": 2, "female": None}}]}
        )
        assert snapshot.rounds[0].max_per_gender == {"male": 2, "female": None}

    def test_category_lenient_numbers(self):
        snapshot = CompetitionSnapshot.model_validate(
            {"categories": [{"id": 1, "percentage": "n/a", "criteria": [{"id": 2, "max_points": None}]}]}
        )
        category = snapshot.categories[0]
        assert category.percentage == 0.0
        assert category.max_total == 0.0
