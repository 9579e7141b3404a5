"""
Read-only reports over completed sessions: history list, per-session
detail and the monthly activity calendar.
"""

import calendar
from datetime import date, datetime
from typing import Iterable, Mapping

from .models import (
    CalendarDay,
    MonthActivity,
    Session,
    SessionOverview,
    SetRecord,
    Workout,
)


def _local_date(timestamp_ms: int) -> date:
    return datetime.fromtimestamp(timestamp_ms / 1000).date()


def session_overviews(
    sessions: Mapping[str, Session],
    workouts: Mapping[str, Workout],
    sets: Iterable[SetRecord],
) -> list[SessionOverview]:
    """
    Build the completed-session history list, newest-first.

    Args:
        sessions: All sessions keyed by id
        workouts: All workouts keyed by id
        sets: All set records

    Returns:
        One overview per completed session
    """
    exercises_by_session: dict[str, set[str]] = {}
    for s in sets:
        exercises_by_session.setdefault(s.session_id, set()).add(s.exercise_id)

    overviews = []
    for session in sessions.values():
        if not session.is_completed:
            continue
        workout = workouts.get(session.workout_id)
        overviews.append(
            SessionOverview(
                session_id=session.session_id,
                workout_name=workout.name if workout else "Workout",
                date=session.start_time,
                total_volume=session.total_volume,
                duration_minutes=session.duration_minutes,
                exercise_count=len(exercises_by_session.get(session.session_id, ())),
            )
        )
    overviews.sort(key=lambda o: o.date, reverse=True)
    return overviews


def session_detail(sets: Iterable[SetRecord], session_id: str) -> dict[str, list[SetRecord]]:
    """
    Group one session's sets by exercise, each list ordered by set number.

    Exercises appear in the order their first set was logged.
    """
    mine = sorted(
        (s for s in sets if s.session_id == session_id),
        key=lambda s: (s.timestamp, s.set_number),
    )
    grouped: dict[str, list[SetRecord]] = {}
    for s in mine:
        grouped.setdefault(s.exercise_id, []).append(s)
    for group in grouped.values():
        group.sort(key=lambda s: s.set_number)
    return grouped


def month_activity(
    sessions: Iterable[Session],
    year: int,
    month: int,
    today: date | None = None,
) -> MonthActivity:
    """
    Lay out a Sunday-first calendar for one month, flagging workout days.

    Leading and trailing padding cells have ``day == 0`` and
    ``is_current_month == False``.

    Args:
        sessions: Sessions to consider (only completed ones count)
        year: Calendar year
        month: Calendar month (1-12)
        today: Date to highlight (default: today)

    Returns:
        MonthActivity with weeks of exactly seven cells
    """
    today = today or date.today()

    in_month = [
        s for s in sessions
        if s.is_completed and s.start_time
        and (_local_date(s.start_time).year, _local_date(s.start_time).month) == (year, month)
    ]
    workout_days = {_local_date(s.start_time).day for s in in_month}

    # calendar.weekday: Monday=0; shift so Sunday is the first column
    leading = (calendar.weekday(year, month, 1) + 1) % 7
    days_in_month = calendar.monthrange(year, month)[1]

    cells = [CalendarDay(day=0) for _ in range(leading)]
    for day in range(1, days_in_month + 1):
        cells.append(
            CalendarDay(
                day=day,
                has_workout=day in workout_days,
                is_today=date(year, month, day) == today,
                is_current_month=True,
            )
        )
    while len(cells) % 7:
        cells.append(CalendarDay(day=0))

    weeks = [cells[i:i + 7] for i in range(0, len(cells), 7)]
    return MonthActivity(year=year, month=month, weeks=weeks, total_workouts=len(in_month))
