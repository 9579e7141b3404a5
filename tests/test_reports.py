"""
Tests for session volume comparison, history reports and the calendar.
"""

from datetime import date, datetime

import pytest

from tiny_lifts.core.ascii_plot import create_month_calendar, create_simple_bar_chart
from tiny_lifts.core.models import Session, SetRecord, Workout
from tiny_lifts.core.reports import month_activity, session_detail, session_overviews
from tiny_lifts.core.volume import previous_session, session_volume


def _ms(year: int, month: int, day: int, hour: int = 18) -> int:
    return int(datetime(year, month, day, hour).timestamp() * 1000)


def _session(session_id, workout_id="wk-a", start=0, minutes=60, status="completed"):
    return Session(
        session_id=session_id,
        workout_id=workout_id,
        start_time=start,
        end_time=start + minutes * 60_000 if status == "completed" else 0,
        status=status,
    )


def _set(set_id, session_id, exercise_id, weight, reps, n=1, ts=0):
    return SetRecord(set_id, session_id, exercise_id, weight, reps, ts, n)


class TestSessionVolume:
    def _data(self):
        sessions = {
            "old": _session("old", start=1_000),
            "prev": _session("prev", start=2_000),
            "other": _session("other", workout_id="wk-b", start=2_500),
            "now": _session("now", start=3_000, status="active"),
        }
        sets = [
            _set("1", "old", "ex-squat", 100, 5),
            _set("2", "prev", "ex-squat", 100, 5),
            _set("3", "prev", "ex-bench", 50, 10),
            _set("4", "other", "ex-ohp", 40, 5),
            _set("5", "now", "ex-squat", 105, 5),
            _set("6", "now", "ex-bench", 50, 5),
        ]
        return sets, sessions

    def test_compares_with_immediately_previous_same_workout(self):
        sets, sessions = self._data()
        info = session_volume(sets, sessions, "now")

        assert info.current_volume == 775
        assert info.previous_volume == 1000
        assert info.volume_delta == -225
        assert info.percent_change == -22  # -22.5 rounds half-up to -22

    def test_previous_session_lookup(self):
        _, sessions = self._data()
        assert previous_session(sessions, sessions["now"]).session_id == "prev"
        assert previous_session(sessions, sessions["old"]) is None

    def test_no_previous_session(self):
        sets, sessions = self._data()
        info = session_volume(sets, sessions, "old")
        assert info.current_volume == 500
        assert info.previous_volume == 0
        assert info.volume_delta == 500
        assert info.percent_change == 0

    @pytest.mark.parametrize("session_id", [None, "", "missing"])
    def test_unknown_session_is_all_zero(self, session_id):
        sets, sessions = self._data()
        info = session_volume(sets, sessions, session_id)
        assert (info.current_volume, info.previous_volume, info.volume_delta, info.percent_change) == (
            0, 0, 0, 0,
        )

    def test_percent_rounds_half_up(self):
        sessions = {
            "a": _session("a", start=1_000),
            "b": _session("b", start=2_000, status="active"),
        }
        sets = [_set("1", "a", "ex-squat", 100, 2), _set("2", "b", "ex-squat", 100, 2)]
        sets.append(_set("3", "b", "ex-squat", 1, 1))
        # (201 - 200) / 200 = 0.5% -> 1
        assert session_volume(sets, sessions, "b").percent_change == 1


class TestOverviews:
    def test_completed_only_newest_first(self):
        sessions = {
            "s1": _session("s1", start=_ms(2024, 3, 1), minutes=50),
            "s2": _session("s2", workout_id="wk-b", start=_ms(2024, 3, 3), minutes=62),
            "s3": _session("s3", start=_ms(2024, 3, 5), status="active"),
        }
        workouts = {"wk-a": Workout("wk-a", "Workout A"), "wk-b": Workout("wk-b", "Workout B")}
        sets = [
            _set("1", "s1", "ex-squat", 100, 5),
            _set("2", "s1", "ex-bench", 60, 5),
            _set("3", "s1", "ex-bench", 60, 5, n=2),
            _set("4", "s2", "ex-squat", 100, 5),
        ]

        overviews = session_overviews(sessions, workouts, sets)

        assert [o.session_id for o in overviews] == ["s2", "s1"]
        assert overviews[0].workout_name == "Workout B"
        assert overviews[0].duration_minutes == 62
        assert overviews[1].exercise_count == 2

    def test_missing_workout_gets_generic_name(self):
        sessions = {"s1": _session("s1", workout_id="wk-gone", start=1_000)}
        assert session_overviews(sessions, {}, [])[0].workout_name == "Workout"

    def test_detail_groups_by_exercise(self):
        sets = [
            _set("1", "s1", "ex-squat", 100, 5, n=1, ts=1),
            _set("2", "s1", "ex-bench", 60, 5, n=1, ts=2),
            _set("3", "s1", "ex-squat", 100, 4, n=2, ts=3),
            _set("4", "s2", "ex-squat", 100, 5, n=1, ts=4),
        ]
        grouped = session_detail(sets, "s1")
        assert list(grouped) == ["ex-squat", "ex-bench"]
        assert [s.reps for s in grouped["ex-squat"]] == [5, 4]


class TestCalendar:
    def test_march_2024_layout(self):
        # 1 March 2024 was a Friday: five leading blanks in a Sunday-first grid
        sessions = [
            _session("a", start=_ms(2024, 3, 4)),
            _session("b", start=_ms(2024, 3, 6)),
            _session("c", start=_ms(2024, 3, 6, hour=7)),
            _session("d", start=_ms(2024, 3, 8), status="active"),
            _session("e", start=_ms(2024, 4, 1)),
        ]
        activity = month_activity(sessions, 2024, 3, today=date(2024, 3, 6))

        first_week = activity.weeks[0]
        assert [c.day for c in first_week] == [0, 0, 0, 0, 0, 1, 2]
        assert all(len(week) == 7 for week in activity.weeks)
        assert activity.total_workouts == 3

        days = {c.day: c for week in activity.weeks for c in week if c.is_current_month}
        assert len(days) == 31
        assert days[4].has_workout and days[6].has_workout
        assert not days[8].has_workout
        assert days[6].is_today and not days[4].is_today

    def test_month_starting_on_sunday_has_no_padding(self):
        # 1 September 2024 was a Sunday
        activity = month_activity([], 2024, 9, today=date(2024, 1, 1))
        assert activity.weeks[0][0].day == 1
        assert activity.total_workouts == 0

    def test_render(self):
        sessions = [_session("a", start=_ms(2024, 3, 4))]
        text = create_month_calendar(month_activity(sessions, 2024, 3, today=date(2024, 3, 6)))
        assert text.startswith("March 2024")
        assert "1 workout this month" in text
        assert "4*" in text
        assert "[6]" in text


class TestBarChart:
    def test_scales_to_largest(self):
        chart = create_simple_bar_chart(["a", "b"], [50, 100], width=10)
        lines = chart.splitlines()
        assert lines[0].count("█") == 5
        assert lines[1].count("█") == 10

    def test_empty(self):
        assert create_simple_bar_chart([], []) == "No data to display."
