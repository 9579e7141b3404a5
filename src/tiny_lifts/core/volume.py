"""
Session volume comparison.

Compares the volume of a session with the immediately preceding completed
session of the same workout.
"""

from typing import Iterable, Mapping

from .metrics import round_half_up, session_sets, total_volume
from .models import Session, SetRecord, VolumeInfo


def previous_session(
    sessions: Mapping[str, Session],
    session: Session,
) -> Session | None:
    """
    Find the completed session of the same workout that came right before.

    Args:
        sessions: All sessions keyed by id
        session: Session to look back from

    Returns:
        The completed session with the latest start time strictly before
        ``session.start_time``, or None
    """
    best: Session | None = None
    for other in sessions.values():
        if other.session_id == session.session_id:
            continue
        if other.workout_id != session.workout_id or not other.is_completed:
            continue
        if other.start_time >= session.start_time:
            continue
        if best is None or other.start_time > best.start_time:
            best = other
    return best


def session_volume(
    sets: Iterable[SetRecord],
    sessions: Mapping[str, Session],
    session_id: str | None,
) -> VolumeInfo:
    """
    Calculate a session's live volume and compare it with the previous one.

    Volumes are always summed from the sets, never read from
    ``Session.total_volume``.

    Args:
        sets: All set records
        sessions: All sessions keyed by id
        session_id: Session to evaluate

    Returns:
        VolumeInfo; all zeros when the session is unknown
    """
    if not session_id:
        return VolumeInfo()
    session = sessions.get(session_id)
    if session is None:
        return VolumeInfo()

    all_sets = list(sets)
    current = total_volume(session_sets(all_sets, session_id))

    prev = previous_session(sessions, session)
    previous = total_volume(session_sets(all_sets, prev.session_id)) if prev else 0.0

    delta = current - previous
    percent = round_half_up(delta / previous * 100) if previous > 0 else 0

    return VolumeInfo(
        current_volume=current,
        previous_volume=previous,
        volume_delta=delta,
        percent_change=percent,
    )
