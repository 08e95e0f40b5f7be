"""
Tests for the volume-governor CLI.
"""

import json

import pytest
from click.testing import CliRunner

from volume_governor.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_json(tmp_path):
    def _write(name, payload):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def approach_file(write_json, approach_doc):
    return write_json("approach.json", approach_doc)


LEG_DAY_PROPOSAL = {
    "user_id": "u1",
    "workout": {
        "workout_id": "w1",
        "exercises": [
            {"name": "Back Squat", "sets": 3, "primary_muscles": ["quads"]},
            {"name": "Romanian Deadlift", "sets": 3, "primary_muscles": ["hamstrings"]},
        ],
    },
    "exercise_name": "Leg Extension",
    "target_muscles": ["quadriceps"],
    "sets": 3,
}


class TestNormalize:

    def test_labels(self, runner):
        result = runner.invoke(cli, ["normalize", "rear delts", "Quadriceps", "lower_back"])
        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"raw": "rear delts", "key": "shoulders_rear"},
            {"raw": "Quadriceps", "key": "quads"},
            {"raw": "lower_back", "key": "lowerBack"},
        ]

    def test_exercise_refines_generic_label(self, runner):
        result = runner.invoke(cli, ["normalize", "shoulders", "-e", "Cable Lateral Raise"])
        assert result.exit_code == 0
        assert json.loads(result.output)[0]["key"] == "shoulders_side"

    def test_requires_labels(self, runner):
        result = runner.invoke(cli, ["normalize"])
        assert result.exit_code != 0


class TestEvaluate:

    def test_statuses(self, runner, approach_file, write_json):
        volume = write_json("volume.json", {"quadriceps": 19, "chest": 4})
        result = runner.invoke(cli, ["evaluate", "-m", approach_file, "--volume", volume])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["quads"] == {"sets": 19, "status": "approaching_mrv"}
        assert payload["chest"]["status"] == "below_mev"
        assert payload["hamstrings"] == {"sets": 0, "status": "below_mev"}


class TestResolve:

    def test_constraint_set(self, runner, approach_file, write_json):
        volume = write_json("volume.json", {"quads": 22})
        context = write_json("context.json", {"readiness_score": 2.0})
        result = runner.invoke(
            cli, ["resolve", "-m", approach_file, "--volume", volume, "--context", context],
        )
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["methodology_id"] == "hypertrophy"
        assert payload["max_total_sets_per_workout"] == 16
        assert payload["rir_floor"] == 3
        assert payload["volume_adjustment_percent"] == -10
        assert payload["muscle_directives"]["quads"]["max_new_exercises"] == 0

    def test_invalid_context(self, runner, approach_file, write_json):
        context = write_json("context.json", {"mesocycle_phase": "hibernation"})
        result = runner.invoke(cli, ["resolve", "-m", approach_file, "--context", context])
        assert result.exit_code == 1


class TestValidateAddition:

    def test_caution_near_mrv(self, runner, approach_file, write_json):
        proposal = write_json("proposal.json", LEG_DAY_PROPOSAL)
        volume = write_json("volume.json", {"quads": 19})
        context = write_json("context.json", {"readiness_score": 4.5, "consecutive_training_days": 1})
        result = runner.invoke(cli, [
            "validate-addition", "-m", approach_file, "-p", proposal,
            "--volume", volume, "--context", context,
        ])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["validator"] == "addition"
        assert payload["decision"] == "caution"

    def test_approved_without_volume(self, runner, approach_file, write_json):
        proposal = write_json("proposal.json", LEG_DAY_PROPOSAL)
        result = runner.invoke(cli, ["validate-addition", "-m", approach_file, "-p", proposal])
        assert result.exit_code == 0
        assert json.loads(result.output)["decision"] == "approved"

    def test_missing_user_fails(self, runner, approach_file, write_json):
        proposal = write_json("proposal.json", dict(LEG_DAY_PROPOSAL, user_id=""))
        result = runner.invoke(cli, ["validate-addition", "-m", approach_file, "-p", proposal])
        assert result.exit_code == 1


class TestValidateSplitChange:

    def test_proceed(self, runner, approach_file, write_json):
        proposal = write_json("split.json", {
            "user_id": "u1",
            "current_split": "upper_lower",
            "target_split": "push_pull_legs",
            "current_volume": {"quads": 12, "chest": 12},
        })
        result = runner.invoke(cli, ["validate-split-change", "-m", approach_file, "-p", proposal])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["recommendation"] == "proceed"
        assert payload["decision"] == "approved"

    def test_unknown_split_fails(self, runner, approach_file, write_json):
        proposal = write_json("split.json", {
            "user_id": "u1",
            "current_split": "upper_lower",
            "target_split": "bodypart_roulette",
        })
        result = runner.invoke(cli, ["validate-split-change", "-m", approach_file, "-p", proposal])
        assert result.exit_code == 1
