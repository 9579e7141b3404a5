"""
Tests for the plateau / progression engine and the history aggregator.

Values are hand-computed so the tests double as worked examples of the
progression rules (5x5 linear progression, 10% deload on plateau).
"""

import pytest

from tiny_lifts.core.history import exercise_history, exercise_trend
from tiny_lifts.core.models import Exercise, Session, SessionSummary, SetRecord
from tiny_lifts.core.progression import (
    deload_weight,
    detect_plateau,
    progression_increment,
    stagnant_count,
    suggest_rep_scheme,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _summary(max_weight: float, total_reps: int, date: int = 0, session_id: str = "s") -> SessionSummary:
    return SessionSummary(
        session_id=session_id,
        max_weight=max_weight,
        total_reps=total_reps,
        total_volume=max_weight * total_reps,
        date=date,
    )


def _exercise(category: str = "upper", reps: int = 5, sets: int = 5) -> Exercise:
    return Exercise(
        exercise_id="ex-test",
        name="Test Lift",
        category=category,  # type: ignore[arg-type]
        target_reps=reps,
        target_sets=sets,
    )


def _session(session_id: str, start: int, status: str = "completed", workout_id: str = "wk-a") -> Session:
    return Session(
        session_id=session_id,
        workout_id=workout_id,
        start_time=start,
        end_time=start + 3_600_000 if status == "completed" else 0,
        status=status,  # type: ignore[arg-type]
    )


def _set(session_id: str, exercise_id: str, weight: float, reps: int, n: int) -> SetRecord:
    return SetRecord(
        set_id=f"{session_id}-{exercise_id}-{n}",
        session_id=session_id,
        exercise_id=exercise_id,
        weight=weight,
        reps=reps,
        timestamp=n,
        set_number=n,
    )


# ---------------------------------------------------------------------------
# Plateau detection
# ---------------------------------------------------------------------------


class TestPlateau:
    """Three sessions without weight or rep gains trigger a deload."""

    def test_flat_three_sessions_is_plateau_with_deload(self):
        history = [_summary(100, 25), _summary(100, 25), _summary(100, 25)]
        result = detect_plateau(history, _exercise())

        assert result.is_plateau is True
        assert result.stagnant_count == 3
        assert result.suggested_deload_weight == 90
        assert result.suggested_rep_scheme == "3x5"
        assert result.progression_suggestion is None
        assert result.suggested_next_weight is None

    def test_declining_sessions_count_as_plateau(self):
        # newest-first: weight and reps both non-increasing from oldest to newest
        history = [_summary(95, 20), _summary(100, 24), _summary(100, 25)]
        result = detect_plateau(history, _exercise())
        assert result.is_plateau is True

    @pytest.mark.parametrize(
        "weights,expected",
        [
            ([10, 10, 10], True),
            # newest-first 10, 10, 20: the lift dropped from 20, still no gain
            ([10, 10, 20], True),
            ([10, 10], False),
            ([20, 10, 10], False),
        ],
    )
    def test_weight_sequences(self, weights, expected):
        history = [_summary(w, 5) for w in weights]
        assert detect_plateau(history, _exercise()).is_plateau is expected

    def test_deload_rounds_to_half_kg(self):
        # 62.5 * 0.9 = 56.25 -> *2 = 112.5 -> half-up 113 -> 56.5
        assert deload_weight(62.5) == 56.5
        # 47.5 * 0.9 = 42.75 -> 85.5 -> 86 -> 43.0
        assert deload_weight(47.5) == 43.0

    def test_3x5_target_steps_down_to_3x3(self):
        history = [_summary(80, 15)] * 3
        result = detect_plateau(history, _exercise(sets=3, reps=5))
        assert result.suggested_rep_scheme == "3x3"

    def test_other_scheme_suggests_deload_text(self):
        history = [_summary(100, 5)] * 3
        result = detect_plateau(history, _exercise(category="deadlift", sets=1, reps=5))
        assert result.suggested_rep_scheme == "Deload to 90 kg"

    def test_rep_scheme_helper(self):
        assert suggest_rep_scheme(5, 5, 90) == "3x5"
        assert suggest_rep_scheme(3, 5, 90) == "3x3"
        assert suggest_rep_scheme(4, 8, 67.5) == "Deload to 67.5 kg"

    def test_newest_gain_breaks_plateau(self):
        history = [_summary(102.5, 25), _summary(100, 25), _summary(100, 25)]
        result = detect_plateau(history, _exercise())
        assert result.is_plateau is False
        assert result.stagnant_count == 0

    def test_two_newest_flat_counts_two(self):
        # oldest -> middle went up, middle -> newest flat
        history = [_summary(100, 25), _summary(100, 25), _summary(95, 25)]
        assert stagnant_count(history) == 2
        result = detect_plateau(history, _exercise())
        assert result.is_plateau is False
        assert result.stagnant_count == 2

    def test_fewer_than_three_sessions_counts_nothing(self):
        assert stagnant_count([_summary(100, 25), _summary(100, 25)]) == 0

    def test_only_three_newest_considered(self):
        # an old stagnant streak beyond the window is ignored
        history = [_summary(110, 25), _summary(105, 25), _summary(100, 25), _summary(100, 25)]
        assert detect_plateau(history, _exercise()).is_plateau is False


# ---------------------------------------------------------------------------
# Progression suggestions
# ---------------------------------------------------------------------------


class TestProgression:
    """Linear progression once all target reps are completed."""

    def test_lower_body_adds_5kg(self):
        history = [_summary(100, 25), _summary(97.5, 25)]
        result = detect_plateau(history, _exercise(category="lower"))

        assert result.is_plateau is False
        assert result.suggested_next_weight == 105
        assert result.progression_suggestion == "+5 kg next session → 105 kg"

    def test_deadlift_adds_10kg(self):
        history = [_summary(140, 5), _summary(130, 5)]
        result = detect_plateau(history, _exercise(category="deadlift", sets=1, reps=5))
        assert result.suggested_next_weight == 150
        assert result.progression_suggestion == "+10 kg next session → 150 kg"

    def test_upper_body_adds_2_5kg(self):
        history = [_summary(60, 25), _summary(57.5, 25)]
        result = detect_plateau(history, _exercise(category="upper"))
        assert result.suggested_next_weight == 62.5
        assert result.progression_suggestion == "+2.5 kg next session → 62.5 kg"

    def test_missed_reps_holds_weight(self):
        history = [_summary(60, 23), _summary(57.5, 25)]
        result = detect_plateau(history, _exercise())

        assert result.suggested_next_weight is None
        assert result.progression_suggestion == "Keep at 60 kg until all 5x5 completed"

    def test_single_session_is_neutral(self):
        result = detect_plateau([_summary(60, 25)], _exercise())
        assert result.is_plateau is False
        assert result.stagnant_count == 0
        assert result.progression_suggestion is None
        assert result.suggested_deload_weight is None

    def test_empty_history_is_neutral(self):
        result = detect_plateau([], _exercise())
        assert result.progression_suggestion is None

    def test_missing_exercise_uses_upper_5x5(self):
        history = [_summary(60, 25), _summary(57.5, 25)]
        result = detect_plateau(history, None)
        assert result.suggested_next_weight == 62.5

    @pytest.mark.parametrize(
        "category,expected",
        [("deadlift", 10.0), ("lower", 5.0), ("upper", 2.5), ("other", 2.5)],
    )
    def test_increment_by_category(self, category, expected):
        assert progression_increment(category) == expected


# ---------------------------------------------------------------------------
# History aggregator
# ---------------------------------------------------------------------------


class TestExerciseHistory:
    """Per-session summaries from raw sets."""

    def test_groups_sets_by_session_newest_first(self):
        sessions = {
            "s1": _session("s1", 1_000),
            "s2": _session("s2", 2_000),
        }
        sets = [
            _set("s1", "ex-squat", 100, 5, 1),
            _set("s1", "ex-squat", 100, 5, 2),
            _set("s2", "ex-squat", 105, 5, 2),
            _set("s2", "ex-squat", 102.5, 3, 1),
        ]
        history = exercise_history(sets, sessions, "ex-squat")

        assert [h.session_id for h in history] == ["s2", "s1"]
        newest = history[0]
        assert newest.max_weight == 105
        assert newest.total_reps == 8
        assert newest.total_volume == pytest.approx(105 * 5 + 102.5 * 3)
        assert newest.date == 2_000
        assert [d.set_number for d in newest.sets] == [1, 2]

    def test_active_and_missing_sessions_ignored(self):
        sessions = {
            "done": _session("done", 1_000),
            "live": _session("live", 2_000, status="active"),
        }
        sets = [
            _set("done", "ex-bench", 60, 5, 1),
            _set("live", "ex-bench", 62.5, 5, 1),
            _set("gone", "ex-bench", 65, 5, 1),
        ]
        history = exercise_history(sets, sessions, "ex-bench")
        assert [h.session_id for h in history] == ["done"]

    def test_other_exercises_filtered_out(self):
        sessions = {"s1": _session("s1", 1_000)}
        sets = [_set("s1", "ex-bench", 60, 5, 1), _set("s1", "ex-row", 50, 5, 1)]
        history = exercise_history(sets, sessions, "ex-row")
        assert len(history) == 1
        assert history[0].max_weight == 50

    def test_count_truncates(self):
        sessions = {f"s{i}": _session(f"s{i}", i * 1_000) for i in range(1, 6)}
        sets = [_set(f"s{i}", "ex-ohp", 40 + i, 5, 1) for i in range(1, 6)]
        history = exercise_history(sets, sessions, "ex-ohp", count=3)
        assert [h.session_id for h in history] == ["s5", "s4", "s3"]

    def test_no_completed_sessions_is_empty(self):
        assert exercise_history([], {}, "ex-squat") == []


class TestTrend:
    def test_labels(self):
        assert exercise_trend([]) == "No data"
        assert exercise_trend([_summary(100, 25)]) == "First session"
        assert exercise_trend([_summary(102.5, 25), _summary(100, 25)]) == "Improving"
        assert exercise_trend([_summary(100, 26), _summary(100, 25)]) == "Improving"
        assert exercise_trend([_summary(95, 25), _summary(100, 25)]) == "Declining"
        assert exercise_trend([_summary(100, 20), _summary(100, 25)]) == "Flat"
