"""
Per-exercise history aggregation.

Groups raw set records by session and summarises each completed session's
performance on one exercise.  Everything is recomputed on every call; the
per-exercise data set is bounded by real-world training frequency.
"""

from typing import Iterable, Literal, Mapping

from .config import DEFAULT_HISTORY_COUNT
from .metrics import max_weight, total_reps, total_volume
from .models import Session, SessionSummary, SetDetail, SetRecord

TrendLabel = Literal["Improving", "Declining", "Flat", "First session", "No data"]


def exercise_history(
    sets: Iterable[SetRecord],
    sessions: Mapping[str, Session],
    exercise_id: str,
    count: int = DEFAULT_HISTORY_COUNT,
) -> list[SessionSummary]:
    """
    Summarise the most recent completed sessions for an exercise.

    Sets whose session is missing or still active are ignored.

    Args:
        sets: All set records
        sessions: All sessions keyed by session id
        exercise_id: Exercise to summarise
        count: Maximum number of summaries to return

    Returns:
        Summaries sorted newest-first, at most ``count`` long
    """
    by_session: dict[str, list[SetRecord]] = {}
    for s in sets:
        if s.exercise_id != exercise_id:
            continue
        by_session.setdefault(s.session_id, []).append(s)

    summaries: list[SessionSummary] = []
    for session_id, group in by_session.items():
        session = sessions.get(session_id)
        if session is None or not session.is_completed:
            continue

        group.sort(key=lambda s: s.set_number)
        summaries.append(
            SessionSummary(
                session_id=session_id,
                max_weight=max_weight(group),
                total_reps=total_reps(group),
                total_volume=total_volume(group),
                date=session.start_time,
                sets=[SetDetail(s.weight, s.reps, s.set_number) for s in group],
            )
        )

    summaries.sort(key=lambda h: h.date, reverse=True)
    return summaries[: max(count, 0)]


def exercise_trend(history: list[SessionSummary]) -> TrendLabel:
    """
    Label the direction of the latest session against the one before it.

    Args:
        history: Summaries, newest-first

    Returns:
        "Improving" if max weight or total reps went up, "Declining" if max
        weight went down, "Flat" otherwise; "First session" / "No data" when
        there is nothing to compare.
    """
    if not history:
        return "No data"
    if len(history) < 2:
        return "First session"

    latest, prev = history[0], history[1]
    if latest.max_weight > prev.max_weight or latest.total_reps > prev.total_reps:
        return "Improving"
    if latest.max_weight < prev.max_weight:
        return "Declining"
    return "Flat"
