"""Progress commands: progress (trends and plateau suggestions) and settings."""

import json
from typing import Annotated, Optional

import typer

from ...core.config import PROGRESS_HISTORY_COUNT, SETTINGS_REPS_RANGE, SETTINGS_SETS_RANGE
from ...core.history import exercise_history, exercise_trend
from ...core.progression import detect_plateau
from ...io.serializers import ValidationError, parse_int_in_range, parse_weight
from .. import views
from ..app import JsonOption, StorePathOption, app, get_repos, resolve_exercise


@app.command("progress")
def show_progress(
    exercise: Annotated[
        Optional[str],
        typer.Argument(help="Only this exercise (id or name)"),
    ] = None,
    count: Annotated[
        int,
        typer.Option("--count", "-n", help="Recent sessions per exercise", min=1),
    ] = PROGRESS_HISTORY_COUNT,
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show per-exercise trends, recent sessions and what to lift next.
    """
    snapshot = get_repos(store_path).snapshot()

    exercise_ids = list(snapshot.exercises)
    if exercise is not None:
        exercise_id = resolve_exercise(snapshot, exercise)
        if exercise_id is None:
            views.print_error(f"Unknown exercise: {exercise}")
            raise typer.Exit(1)
        exercise_ids = [exercise_id]

    cards = []
    for eid in exercise_ids:
        ex = snapshot.exercises[eid]
        history = exercise_history(snapshot.sets, snapshot.sessions, eid, count=count)
        cards.append((ex, history, exercise_trend(history), detect_plateau(history, ex)))

    if json_out:
        output = []
        for ex, history, trend, plateau in cards:
            output.append({
                "exercise_id": ex.exercise_id,
                "name": ex.name,
                "trend": trend,
                "is_plateau": plateau.is_plateau,
                "stagnant_count": plateau.stagnant_count,
                "suggested_deload_weight": plateau.suggested_deload_weight,
                "suggested_rep_scheme": plateau.suggested_rep_scheme,
                "progression_suggestion": plateau.progression_suggestion,
                "suggested_next_weight": plateau.suggested_next_weight,
                "history": [
                    {
                        "session_id": h.session_id,
                        "date": h.date,
                        "max_weight": h.max_weight,
                        "total_reps": h.total_reps,
                        "total_volume": h.total_volume,
                    }
                    for h in history
                ],
            })
        print(json.dumps(output, indent=2))
        return

    for ex, _, _, plateau in cards:
        if plateau.is_plateau:
            views.print_plateau_banner(ex.name, plateau)

    for ex, history, trend, plateau in cards:
        views.print_progress_card(ex, history, trend, plateau)


@app.command()
def settings(
    exercise: Annotated[
        Optional[str],
        typer.Argument(help="Exercise to edit (id or name); omit to list all"),
    ] = None,
    weight: Annotated[
        Optional[str],
        typer.Option("--weight", "-w", help="Default starting weight in kg"),
    ] = None,
    reps: Annotated[
        Optional[str],
        typer.Option("--reps", "-r", help=f"Target reps per set ({SETTINGS_REPS_RANGE[0]}-{SETTINGS_REPS_RANGE[1]})"),
    ] = None,
    sets: Annotated[
        Optional[str],
        typer.Option("--sets", "-s", help=f"Target sets ({SETTINGS_SETS_RANGE[0]}-{SETTINGS_SETS_RANGE[1]})"),
    ] = None,
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show or edit exercise defaults (weight, reps, sets).
    """
    repos = get_repos(store_path)

    if exercise is None:
        exercises = repos.exercises.all()
        if json_out:
            output = [
                {
                    "exercise_id": e.exercise_id,
                    "name": e.name,
                    "category": e.category,
                    "muscle_group": e.muscle_group,
                    "default_weight": e.default_weight,
                    "target_reps": e.target_reps,
                    "target_sets": e.target_sets,
                }
                for e in exercises
            ]
            print(json.dumps(output, indent=2))
            return
        views.print_settings(exercises)
        return

    exercise_id = resolve_exercise(repos.snapshot(), exercise)
    if exercise_id is None:
        views.print_error(f"Unknown exercise: {exercise}")
        raise typer.Exit(1)

    try:
        new_weight = parse_weight(weight) if weight is not None else None
        new_reps = (
            parse_int_in_range(reps, "reps", *SETTINGS_REPS_RANGE) if reps is not None else None
        )
        new_sets = (
            parse_int_in_range(sets, "sets", *SETTINGS_SETS_RANGE) if sets is not None else None
        )
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if new_weight is None and new_reps is None and new_sets is None:
        views.print_settings([repos.exercises.get(exercise_id)])
        return

    try:
        updated = repos.exercises.update_settings(
            exercise_id,
            default_weight=new_weight,
            target_reps=new_reps,
            target_sets=new_sets,
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(
        f"{updated.name}: {updated.scheme} @ {views.fmt_kg(updated.default_weight)}"
    )
