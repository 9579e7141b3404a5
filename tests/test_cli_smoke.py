"""
Minimal smoke tests for the tiny-lifts CLI.

Tests basic functionality:
- App runs without errors
- Store file is created and seeded
- A session can be started, logged and finished
- History, progress and calendar render
- Settings can be edited
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tiny_lifts.cli.main import app


runner = CliRunner()


@pytest.fixture
def temp_store_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _invoke(store_path: Path, *args: str, **kwargs):
    return runner.invoke(app, [*args, "--store-path", str(store_path)], **kwargs)


def _complete_session(store_path: Path, workout: str = "a", weight: str = "60") -> None:
    assert _invoke(store_path, "start", workout).exit_code == 0
    for _ in range(5):
        assert _invoke(store_path, "log", "squat", "--weight", weight, "--reps", "5").exit_code == 0
    assert _invoke(store_path, "end").exit_code == 0


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "tiny-lifts" in result.output or "barbell" in result.output.lower()

    def test_workouts_seeds_store(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"
        result = _invoke(store_path, "workouts", "--json")

        assert result.exit_code == 0
        assert store_path.exists()
        data = json.loads(result.stdout)
        assert [w["workout_id"] for w in data] == ["wk-a", "wk-b"]
        assert [e["exercise_id"] for e in data[0]["exercises"]] == ["ex-squat", "ex-bench", "ex-row"]

    def test_workouts_table(self, temp_store_dir):
        result = _invoke(temp_store_dir / "store.json", "workouts")
        assert result.exit_code == 0
        assert "Workout A" in result.output

    def test_start_log_status_end(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"

        result = _invoke(store_path, "start", "a")
        assert result.exit_code == 0
        assert "Started Workout A" in result.output

        result = _invoke(store_path, "log", "squat", "--weight", "100", "--reps", "5")
        assert result.exit_code == 0
        assert "set 1" in result.output

        result = _invoke(store_path, "log", "squat")
        assert result.exit_code == 0
        assert "set 2" in result.output

        result = _invoke(store_path, "status", "--json")
        assert result.exit_code == 0
        status = json.loads(result.stdout)
        assert status["active"] is True
        squat = next(e for e in status["exercises"] if e["exercise_id"] == "ex-squat")
        # second set reuses the weight of the first
        assert [(s["weight"], s["reps"]) for s in squat["sets"]] == [(100, 5), (100, 5)]
        assert status["volume"]["current"] == 1000

        result = _invoke(store_path, "end")
        assert result.exit_code == 0
        assert "Workout complete" in result.output

        result = _invoke(store_path, "history", "--json")
        history = json.loads(result.stdout)
        assert len(history) == 1
        assert history[0]["total_volume"] == 1000

    def test_start_twice_fails(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"
        assert _invoke(store_path, "start", "a").exit_code == 0
        result = _invoke(store_path, "start", "b")
        assert result.exit_code == 1
        assert "active" in result.output

    def test_unknown_workout_fails(self, temp_store_dir):
        result = _invoke(temp_store_dir / "store.json", "start", "z")
        assert result.exit_code == 1
        assert "Unknown workout" in result.output

    def test_log_without_session_fails(self, temp_store_dir):
        result = _invoke(temp_store_dir / "store.json", "log", "squat")
        assert result.exit_code == 1
        assert "No active session" in result.output

    def test_log_invalid_weight_fails(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"
        _invoke(store_path, "start", "a")
        result = _invoke(store_path, "log", "squat", "--weight", "heavy")
        assert result.exit_code == 1
        assert "Invalid weight" in result.output

    def test_end_empty_session_discards(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"
        _invoke(store_path, "start", "a")
        result = _invoke(store_path, "end", "--force")
        assert result.exit_code == 0
        assert "discarded" in result.output

        history = json.loads(_invoke(store_path, "history", "--json").stdout)
        assert history == []

    def test_end_empty_session_can_be_cancelled(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"
        _invoke(store_path, "start", "a")
        result = _invoke(store_path, "end", input="n\n")
        assert result.exit_code == 0
        status = json.loads(_invoke(store_path, "status", "--json").stdout)
        assert status["active"] is True


class TestReports:
    def test_history_show_and_calendar(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"
        _complete_session(store_path)

        result = _invoke(store_path, "history")
        assert result.exit_code == 0
        assert "Workout" in result.output

        result = _invoke(store_path, "show", "1", "--json")
        assert result.exit_code == 0
        detail = json.loads(result.stdout)
        assert len(detail["exercises"]["ex-squat"]) == 5

        result = _invoke(store_path, "show", "9")
        assert result.exit_code == 1

        result = _invoke(store_path, "calendar", "--json")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["total_workouts"] == 1

    def test_calendar_bad_month(self, temp_store_dir):
        result = _invoke(temp_store_dir / "store.json", "calendar", "--month", "2024-13")
        assert result.exit_code != 0

    def test_progress_suggests_next_weight(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"
        _complete_session(store_path, weight="60")
        _complete_session(store_path, weight="62.5")

        result = _invoke(store_path, "progress", "squat", "--json")
        assert result.exit_code == 0
        card = json.loads(result.stdout)[0]
        assert card["trend"] == "Improving"
        assert card["suggested_next_weight"] == 67.5
        assert card["progression_suggestion"] == "+5 kg next session → 67.5 kg"

        result = _invoke(store_path, "progress")
        assert result.exit_code == 0
        assert "Squat" in result.output

    def test_history_limit_must_be_positive(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"
        _complete_session(store_path)

        result = _invoke(store_path, "history", "--limit=-1")
        assert result.exit_code != 0

        history = json.loads(_invoke(store_path, "history", "--limit", "1", "--json").stdout)
        assert len(history) == 1

    def test_out_of_range_stored_values_do_not_break_commands(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"
        _complete_session(store_path)

        data = json.loads(store_path.read_text())
        data["tables"]["exercises"]["ex-squat"]["category"] = "legs"
        data["tables"]["exercises"]["ex-squat"]["target_reps"] = 0
        first_set = next(iter(data["tables"]["sets"]))
        data["tables"]["sets"][first_set]["weight"] = -5
        store_path.write_text(json.dumps(data))

        result = _invoke(store_path, "progress", "squat", "--json")
        assert result.exit_code == 0
        assert json.loads(result.stdout)[0]["exercise_id"] == "ex-squat"
        assert _invoke(store_path, "history").exit_code == 0


class TestSettings:
    def test_edit_and_list(self, temp_store_dir):
        store_path = temp_store_dir / "store.json"
        result = _invoke(store_path, "settings", "bench", "--weight", "40", "--reps", "3", "--sets", "3")
        assert result.exit_code == 0
        assert "3x3" in result.output

        data = json.loads(_invoke(store_path, "settings", "--json").stdout)
        bench = next(e for e in data if e["exercise_id"] == "ex-bench")
        assert (bench["default_weight"], bench["target_reps"], bench["target_sets"]) == (40, 3, 3)

    def test_out_of_range_rejected(self, temp_store_dir):
        result = _invoke(temp_store_dir / "store.json", "settings", "bench", "--sets", "11")
        assert result.exit_code == 1
        assert "between 1 and 10" in result.output

    def test_unknown_exercise_rejected(self, temp_store_dir):
        result = _invoke(temp_store_dir / "store.json", "settings", "curl", "--reps", "8")
        assert result.exit_code == 1


class TestTimersAndMenu:
    def test_rest_unknown_intensity(self):
        result = runner.invoke(app, ["rest", "brutal"])
        assert result.exit_code == 1
        assert "Unknown intensity" in result.output

    def test_rest_adjusted_to_zero_completes_immediately(self):
        result = runner.invoke(app, ["rest", "light", "--adjust=-60"])
        assert result.exit_code == 0
        assert "Rest complete" in result.output

    def test_menu_quit(self):
        result = runner.invoke(app, [], input="0\n")
        assert result.exit_code == 0
        assert "tiny-lifts" in result.output

    def test_menu_log_rejects_exercise_zero(self, temp_store_dir, monkeypatch):
        monkeypatch.setenv("HOME", str(temp_store_dir))
        assert runner.invoke(app, ["start", "a"]).exit_code == 0

        result = runner.invoke(app, [], input="3\n0\n")
        assert result.exit_code == 0
        assert "Invalid choice: 0" in result.output

        status = json.loads(runner.invoke(app, ["status", "--json"]).stdout)
        assert all(not e["sets"] for e in status["exercises"])
