"""Session commands: workouts, start, log, status, end, and menu helpers."""

import json
from typing import Annotated, Optional

import typer

from ...core.history import exercise_history
from ...core.progression import detect_plateau
from ...core.timers import format_countdown, format_elapsed
from .. import views
from ..app import (
    JsonOption,
    StorePathOption,
    app,
    build_logger,
    get_repos,
    resolve_exercise,
    resolve_workout,
)
from .timers import run_rest_countdown


@app.command()
def workouts(
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List the available workouts and their exercises.
    """
    snapshot = get_repos(store_path).snapshot()
    ordered = sorted(snapshot.workouts.values(), key=lambda w: w.workout_id)
    exercise_ids = {w.workout_id: snapshot.exercise_ids(w.workout_id) for w in ordered}

    if json_out:
        output = []
        for w in ordered:
            output.append({
                "workout_id": w.workout_id,
                "name": w.name,
                "exercises": [
                    {
                        "exercise_id": eid,
                        "name": snapshot.exercises[eid].name,
                        "scheme": snapshot.exercises[eid].scheme,
                        "default_weight": snapshot.exercises[eid].default_weight,
                    }
                    for eid in exercise_ids[w.workout_id]
                    if eid in snapshot.exercises
                ],
            })
        print(json.dumps(output, indent=2))
        return

    views.print_workouts(ordered, exercise_ids, snapshot.exercises)


@app.command()
def start(
    workout: Annotated[
        str,
        typer.Argument(help="Workout id or name, e.g. 'a', 'wk-b' or 'Workout A'"),
    ],
    store_path: StorePathOption = None,
) -> None:
    """
    Start a session for a workout.
    """
    repos = get_repos(store_path)
    snapshot = repos.snapshot()
    workout_id = resolve_workout(snapshot, workout)
    if workout_id is None:
        views.print_error(f"Unknown workout: {workout}")
        views.print_info("Run 'tiny-lifts workouts' to list them.")
        raise typer.Exit(1)

    workout_logger, _ = build_logger(repos)
    try:
        new_session = workout_logger.start_session(workout_id)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Started {snapshot.workouts[workout_id].name} ({new_session.session_id})")
    for eid in snapshot.exercise_ids(workout_id):
        exercise = snapshot.exercises.get(eid)
        if exercise is None:
            continue
        views.console.print(
            f"  {exercise.name:<16} {exercise.scheme:>5}  @ {views.fmt_kg(exercise.default_weight)}"
        )


@app.command("log")
def log_set(
    exercise: Annotated[
        str,
        typer.Argument(help="Exercise id or name, e.g. 'squat' or 'Bench Press'"),
    ],
    weight: Annotated[
        Optional[str],
        typer.Option("--weight", "-w", help="Weight in kg (default: last set, else the exercise default)"),
    ] = None,
    reps: Annotated[
        Optional[str],
        typer.Option("--reps", "-r", help="Reps performed (default: target reps)"),
    ] = None,
    wait: Annotated[
        bool,
        typer.Option("--wait", help="Run the rest countdown after logging"),
    ] = False,
    store_path: StorePathOption = None,
) -> None:
    """
    Log one set in the active session and start the rest timer.
    """
    repos = get_repos(store_path)
    snapshot = repos.snapshot()
    exercise_id = resolve_exercise(snapshot, exercise)
    if exercise_id is None:
        views.print_error(f"Unknown exercise: {exercise}")
        raise typer.Exit(1)

    workout_logger, scheduler = build_logger(repos)
    active = workout_logger.active_session
    if active is None:
        views.print_error("No active session. Start one with 'tiny-lifts start WORKOUT'.")
        raise typer.Exit(1)

    if exercise_id not in workout_logger.workout_exercise_ids():
        views.print_warning(f"{snapshot.exercises[exercise_id].name} is not part of this workout.")

    previous = workout_logger.logged_sets().get(exercise_id, [])
    if weight is None and previous:
        workout_logger.set_weight(exercise_id, previous[-1].weight)
    if weight is not None and not workout_logger.set_weight(exercise_id, weight):
        views.print_error(f"Invalid weight: {weight!r}")
        raise typer.Exit(1)
    if reps is not None and not workout_logger.set_reps(exercise_id, reps):
        views.print_error(f"Invalid reps: {reps!r}")
        raise typer.Exit(1)

    record = workout_logger.log_set(exercise_id)
    if record is None:
        views.print_error("No active session.")
        raise typer.Exit(1)

    timer = workout_logger.rest_timer
    views.print_success(
        f"{snapshot.exercises[exercise_id].name} set {record.set_number}: "
        f"{views.fmt_kg(record.weight)} × {record.reps}"
    )
    views.print_info(f"{timer.intensity.capitalize()} rest: {format_countdown(timer.total_seconds)}")

    if wait:
        if run_rest_countdown(timer, scheduler):
            views.print_success("Rest complete. Next set!")
        else:
            views.print_warning("Rest skipped.")


@app.command()
def status(
    store_path: StorePathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the active session: logged sets, elapsed time and volume.
    """
    repos = get_repos(store_path)
    workout_logger, _ = build_logger(repos)
    active = workout_logger.active_session

    if active is None:
        if json_out:
            print(json.dumps({"active": False}, indent=2))
            return
        views.print_info("No active session. Start one with 'tiny-lifts start WORKOUT'.")
        return

    snapshot = repos.snapshot()
    logged = workout_logger.logged_sets()
    exercise_ids = workout_logger.workout_exercise_ids()
    exercise_ids += [eid for eid in logged if eid not in exercise_ids]
    volume = workout_logger.volume()
    elapsed = format_elapsed(workout_logger.elapsed_ms())
    plateaus = {
        eid: detect_plateau(
            exercise_history(snapshot.sets, snapshot.sessions, eid),
            snapshot.exercises.get(eid),
        )
        for eid in exercise_ids
    }
    workout = snapshot.workouts.get(active.workout_id)
    workout_name = workout.name if workout else active.workout_id

    if json_out:
        print(json.dumps({
            "active": True,
            "session_id": active.session_id,
            "workout_id": active.workout_id,
            "workout": workout_name,
            "elapsed": elapsed,
            "volume": {
                "current": volume.current_volume,
                "previous": volume.previous_volume,
                "delta": volume.volume_delta,
                "percent_change": volume.percent_change,
            },
            "exercises": [
                {
                    "exercise_id": eid,
                    "is_plateau": plateaus[eid].is_plateau,
                    "sets": [
                        {"set_number": s.set_number, "weight": s.weight, "reps": s.reps}
                        for s in logged.get(eid, [])
                    ],
                }
                for eid in exercise_ids
            ],
        }, indent=2))
        return

    views.print_session_status(
        workout_name, elapsed, exercise_ids, snapshot.exercises, logged, volume, plateaus
    )


@app.command()
def end(
    store_path: StorePathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Finish the active session. Sessions without any volume are discarded.
    """
    repos = get_repos(store_path)
    workout_logger, _ = build_logger(repos)

    if workout_logger.active_session is None:
        views.print_info("No active session.")
        return

    if not workout_logger.logged_sets() and not force:
        if not views.confirm_action("No sets logged. Discard this session?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    volume = workout_logger.volume()
    completed = workout_logger.end_session()

    if completed is None:
        views.print_warning("Session discarded: nothing was logged.")
        return

    views.print_success(
        f"Workout complete: {completed.duration_minutes} min, "
        f"volume {completed.total_volume:,.0f}"
    )
    views.console.print(views.format_volume_comparison(volume))


def menu_start() -> None:
    """Interactive workout picker called from the main menu."""
    repos = get_repos(None)
    snapshot = repos.snapshot()
    ordered = sorted(snapshot.workouts.values(), key=lambda w: w.workout_id)
    views.print_workouts(
        ordered,
        {w.workout_id: snapshot.exercise_ids(w.workout_id) for w in ordered},
        snapshot.exercises,
    )

    raw = views.console.input("Workout to start (Enter to cancel): ").strip()
    if raw:
        start(workout=raw)


def menu_log() -> None:
    """Interactive set entry called from the main menu."""
    repos = get_repos(None)
    workout_logger, _ = build_logger(repos)
    if workout_logger.active_session is None:
        views.print_info("No active session. Start one first.")
        return

    snapshot = repos.snapshot()
    exercise_ids = workout_logger.workout_exercise_ids()
    for i, eid in enumerate(exercise_ids, 1):
        done = len(workout_logger.logged_sets().get(eid, []))
        exercise = snapshot.exercises[eid]
        views.console.print(f"  \\[{i}] {exercise.name} ({done}/{exercise.target_sets})")

    raw = views.console.input("Exercise # (Enter to cancel): ").strip()
    if not raw:
        return
    index = int(raw) if raw.isdigit() else 0
    if not 1 <= index <= len(exercise_ids):
        views.print_error(f"Invalid choice: {raw}")
        return
    exercise_id = exercise_ids[index - 1]

    entry = workout_logger.current_input(exercise_id)
    weight = views.console.input(f"Weight kg [{entry.weight:g}]: ").strip() or None
    reps = views.console.input(f"Reps [{entry.reps}]: ").strip() or None
    log_set(exercise=exercise_id, weight=weight, reps=reps, wait=True)
