"""History commands: history, show, calendar."""

import json
from datetime import date
from typing import Annotated, Optional

import typer

from ...core.reports import month_activity, session_detail, session_overviews
from .. import views
from ..app import JsonOption, StorePathOption, app, get_repos


@app.command("history")
def show_history(
    store_path: StorePathOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Limit number of sessions to show", min=1),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display completed workouts, newest first.
    """
    snapshot = get_repos(store_path).snapshot()
    overviews = session_overviews(snapshot.sessions, snapshot.workouts, snapshot.sets)

    if limit is not None:
        overviews = overviews[:limit]

    if json_out:
        output = []
        for o in overviews:
            output.append({
                "session_id": o.session_id,
                "workout": o.workout_name,
                "date": o.date,
                "total_volume": o.total_volume,
                "duration_minutes": o.duration_minutes,
                "exercise_count": o.exercise_count,
            })
        print(json.dumps(output, indent=2))
        return

    views.print_history(overviews)


@app.command()
def show(
    session_ref: Annotated[
        str,
        typer.Argument(help="Session id, or its # from 'history' (1 = newest)"),
    ],
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show every set of one completed session.
    """
    snapshot = get_repos(store_path).snapshot()
    overviews = session_overviews(snapshot.sessions, snapshot.workouts, snapshot.sets)

    session_id = session_ref
    if session_ref.isdigit():
        index = int(session_ref)
        if not 1 <= index <= len(overviews):
            views.print_error(f"Session #{index} not found (have {len(overviews)})")
            raise typer.Exit(1)
        session_id = overviews[index - 1].session_id

    overview = next((o for o in overviews if o.session_id == session_id), None)
    if overview is None:
        views.print_error(f"Completed session not found: {session_ref}")
        raise typer.Exit(1)

    grouped = session_detail(snapshot.sets, session_id)

    if json_out:
        print(json.dumps({
            "session_id": overview.session_id,
            "workout": overview.workout_name,
            "date": overview.date,
            "total_volume": overview.total_volume,
            "duration_minutes": overview.duration_minutes,
            "exercises": {
                eid: [
                    {"set_number": s.set_number, "weight": s.weight, "reps": s.reps}
                    for s in sets
                ]
                for eid, sets in grouped.items()
            },
        }, indent=2))
        return

    views.console.print()
    views.console.print(
        f"[bold cyan]{overview.workout_name}[/bold cyan]  "
        f"{views.fmt_date(overview.date)}  ·  {overview.duration_minutes} min  ·  "
        f"volume {overview.total_volume:,.0f}"
    )
    views.print_session_detail(grouped, snapshot.exercises)


def _parse_month(raw: str) -> tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    try:
        year_s, month_s = raw.split("-")
        year, month = int(year_s), int(month_s)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM, got {raw!r}")
    if not 1 <= month <= 12:
        raise typer.BadParameter(f"Month must be 01-12, got {month_s}")
    return year, month


@app.command()
def calendar(
    month: Annotated[
        Optional[str],
        typer.Option("--month", "-m", help="Month to show as YYYY-MM (default: this month)"),
    ] = None,
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show a monthly calendar of completed workouts.
    """
    today = date.today()
    year, month_num = _parse_month(month) if month else (today.year, today.month)

    snapshot = get_repos(store_path).snapshot()
    activity = month_activity(snapshot.sessions.values(), year, month_num, today=today)

    if json_out:
        print(json.dumps({
            "year": activity.year,
            "month": activity.month,
            "total_workouts": activity.total_workouts,
            "workout_days": [
                cell.day for week in activity.weeks for cell in week if cell.has_workout
            ],
        }, indent=2))
        return

    views.print_calendar(activity)
