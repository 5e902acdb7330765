"""Shared fixtures for standings engine tests.

Snapshots are written as plain dicts in the judging store's column style and
validated through ``CompetitionSnapshot`` so the tests exercise the same
ingestion path as the application.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path so tests can import scoreboard without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from scoreboard.schemas.snapshot import CompetitionSnapshot  # noqa: E402
from scoreboard.scorers import gender  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_gender_tokens():
    """Each test sees the token config as of its own environment."""
    gender.clear_cache()
    yield
    gender.clear_cache()


def talent_category(round_id="r1", judge_ids=None):
    """One category, two criteria of 50 points each, weight 100%."""
    category = {
        "id": "talent",
        "name": "Talent",
        "percentage": 100,
        "round_id": round_id,
        "criteria": [
            {"id": "stage", "name": "Stage Presence", "max_points": 50, "order_index": 1},
            {"id": "skill", "name": "Skill", "max_points": 50, "order_index": 2},
        ],
    }
    if judge_ids is not None:
        category["allowed_judge_ids"] = judge_ids
    return category


def score(contestant_id, criterion_id, judge_id, value):
    return {"contestant_id": contestant_id, "criterion_id": criterion_id, "judge_id": judge_id, "score": value}


@pytest.fixture
def scenario_a_snapshot():
    """Contestant 1 scored by judge A [30, 40] and judge B [20, 30]; judge target 2."""
    return CompetitionSnapshot.model_validate(
        {
            "contestants": [{"id": 1, "number": 1, "name": "Ana", "sex": "M"}],
            "categories": [talent_category()],
            "rounds": [{"id": "r1", "name": "Preliminary", "order_index": 1, "judge_target": 2}],
            "judges": [{"id": "A", "active": True}, {"id": "B", "active": True}],
            "scores": [
                score(1, "stage", "A", 30),
                score(1, "skill", "A", 40),
                score(1, "stage", "B", 20),
                score(1, "skill", "B", 30),
            ],
        }
    )


@pytest.fixture
def multi_round_raw():
    """Two rounds: a preliminary capped at two per gender, then a final.

    Preliminary scores (both judges): m1 9, m2 8, m3 7, f1 6, f2 5 out of 10.
    Nobody has been scored in the final yet.
    """
    contestants = [
        {"id": "m1", "number": 1, "name": "Marco", "gender": "male"},
        {"id": "m2", "number": 2, "name": "Miguel", "sex": "Male"},
        {"id": "m3", "number": 3, "name": "Mateo", "sex": "men"},
        {"id": "f1", "number": 4, "name": "Fiona", "sex": "F"},
        {"id": "f2", "number": 5, "name": "Frida", "sex": "female"},
    ]
    prelim_points = {"m1": 9, "m2": 8, "m3": 7, "f1": 6, "f2": 5}
    scores = [score(cid, "poise", judge, pts) for cid, pts in prelim_points.items() for judge in ("j1", "j2")]
    return {
        "contestants": contestants,
        "categories": [
            {
                "id": "prelim",
                "name": "Preliminary Walk",
                "percentage": 100,
                "round_id": "r1",
                "criteria": [{"id": "poise", "max_points": 10}],
            },
            {
                "id": "final",
                "name": "Final Q&A",
                "percentage": 100,
                "round_id": "r2",
                "criteria": [{"id": "answer", "max_points": 10}],
            },
        ],
        "rounds": [
            {"id": "r2", "name": "Final", "order_index": 2},
            {"id": "r1", "name": "Preliminary", "order_index": 1, "max_per_gender": 2, "highlight_per_gender": 1},
        ],
        "judges": [{"id": "j1"}, {"id": "j2"}, {"id": "j3", "active": False}],
        "scores": scores,
    }


@pytest.fixture
def multi_round_snapshot(multi_round_raw):
    return CompetitionSnapshot.model_validate(multi_round_raw)
