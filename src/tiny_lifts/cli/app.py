"""Shared Typer app object, shared option types, and store utilities."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from ..core.feedback import Feedback, TerminalFeedback
from ..core.program import seed_if_empty
from ..core.scheduler import RealtimeScheduler
from ..core.timers import Metronome, RestTimer
from ..core.workout_log import WorkoutLogger
from ..io.repositories import Repositories, TrainingSnapshot, open_repositories
from ..io.serializers import ValidationError
from . import views

# Shared --store-path option type used across all commands
StorePathOption = Annotated[
    Optional[Path],
    typer.Option("--store-path", "-p", help="Path to the JSON store file"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="tiny-lifts",
    help="Log 5x5-style barbell workouts, track volume and get progression suggestions.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def setup_logging(verbose: bool) -> None:
    """Route library logging through Rich; WARNING by default, DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=views.err_console, show_path=False)],
        force=True,
    )


def get_repos(store_path: Path | None) -> Repositories:
    """Open the store (default location when None) and seed it on first use."""
    try:
        repos = open_repositories(store_path)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    seed_if_empty(repos)
    return repos


def build_logger(
    repos: Repositories,
    feedback: Feedback | None = None,
) -> tuple[WorkoutLogger, RealtimeScheduler]:
    """Wire a WorkoutLogger to real-time timers and re-attach to the active session."""
    scheduler = RealtimeScheduler()
    feedback = feedback if feedback is not None else TerminalFeedback(views.err_console)
    workout_logger = WorkoutLogger(
        repos,
        rest_timer=RestTimer(scheduler, feedback),
        metronome=Metronome(scheduler, feedback),
        feedback=feedback,
    )
    workout_logger.resume_active()
    return workout_logger, scheduler


def _normalise(token: str) -> str:
    return token.strip().lower().replace("_", " ").replace("-", " ")


def resolve_exercise(snapshot: TrainingSnapshot, token: str) -> str | None:
    """
    Find an exercise id from an id ("ex-squat"), a short key ("squat")
    or a display name ("Bench Press"), case-insensitively.
    """
    if token in snapshot.exercises:
        return token
    wanted = _normalise(token)
    for exercise_id, exercise in snapshot.exercises.items():
        short = exercise_id.removeprefix("ex-")
        if wanted in (_normalise(exercise_id), _normalise(short), _normalise(exercise.name)):
            return exercise_id
    return None


def resolve_workout(snapshot: TrainingSnapshot, token: str) -> str | None:
    """Find a workout id from an id ("wk-a"), a short key ("a") or its name."""
    if token in snapshot.workouts:
        return token
    wanted = _normalise(token)
    for workout_id, workout in snapshot.workouts.items():
        short = workout_id.removeprefix("wk-")
        if wanted in (_normalise(workout_id), _normalise(short), _normalise(workout.name)):
            return workout_id
    return None
