"""Timer commands: rest, metronome, and the live countdown helpers."""

from typing import Annotated, Optional

import typer
from rich.live import Live

from ...core.config import (
    DEFAULT_INTENSITY,
    METRONOME_TOTAL_REPS,
    PHASE_DURATION_SECONDS,
    REST_ADJUST_STEP_SECONDS,
    REST_DURATIONS,
)
from ...core.feedback import TerminalFeedback
from ...core.scheduler import RealtimeScheduler
from ...core.timers import Metronome, RestTimer, format_countdown
from .. import views
from ..app import app

# Screen refresh interval for the live displays (seconds)
LIVE_REFRESH_SECONDS = 0.25


def run_rest_countdown(timer: RestTimer, scheduler: RealtimeScheduler) -> bool:
    """
    Show the running rest timer until it reaches zero.

    Ctrl+C skips the remaining rest.

    Returns:
        True if the rest ran to completion, False if skipped
    """
    with Live(views.format_rest_timer(timer), console=views.console, transient=True) as live:
        refresh = scheduler.call_every(
            LIVE_REFRESH_SECONDS, lambda: live.update(views.format_rest_timer(timer))
        )
        try:
            scheduler.run_until(lambda: not timer.is_running)
        except KeyboardInterrupt:
            timer.reset()
            return False
        finally:
            refresh.cancel()
    return True


@app.command()
def rest(
    intensity: Annotated[
        Optional[str],
        typer.Argument(help="light (1:00), moderate (2:00) or heavy (4:00)"),
    ] = None,
    adjust: Annotated[
        int,
        typer.Option(
            "--adjust", "-a",
            help=f"Add or remove seconds, e.g. {REST_ADJUST_STEP_SECONDS} or -{REST_ADJUST_STEP_SECONDS}",
        ),
    ] = 0,
) -> None:
    """
    Run a rest countdown. Ctrl+C skips it.
    """
    intensity = (intensity or DEFAULT_INTENSITY).lower()
    if intensity not in REST_DURATIONS:
        views.print_error(
            f"Unknown intensity '{intensity}'. Choose from: {', '.join(REST_DURATIONS)}"
        )
        raise typer.Exit(1)

    scheduler = RealtimeScheduler()
    timer = RestTimer(scheduler, TerminalFeedback(views.err_console))
    timer.start(intensity)  # type: ignore[arg-type]
    if adjust:
        timer.adjust_time(adjust)

    if not timer.is_running:
        views.print_success("Rest complete.")
        return

    views.print_info(f"{intensity.capitalize()} rest: {format_countdown(timer.seconds_left)}")
    if run_rest_countdown(timer, scheduler):
        views.print_success("Rest complete. Next set!")
    else:
        views.print_warning("Rest skipped.")


@app.command()
def metronome(
    reps: Annotated[
        int,
        typer.Option("--reps", "-r", help="Number of reps to pace", min=1),
    ] = METRONOME_TOTAL_REPS,
    phase: Annotated[
        float,
        typer.Option("--phase", help="Seconds per up / down phase", min=0.5),
    ] = PHASE_DURATION_SECONDS,
) -> None:
    """
    Pace reps with an up/down tempo: a high tone starts each lift,
    a low tone each lowering. Ctrl+C stops it.
    """
    scheduler = RealtimeScheduler()
    beat = Metronome(scheduler, TerminalFeedback(views.err_console), total_reps=reps, phase_duration=phase)
    beat.start()

    with Live(views.format_metronome(beat), console=views.console, transient=True) as live:
        refresh = scheduler.call_every(
            LIVE_REFRESH_SECONDS / 2, lambda: live.update(views.format_metronome(beat))
        )
        try:
            scheduler.run_until(lambda: not beat.is_active)
        except KeyboardInterrupt:
            beat.stop()
            views.print_warning("Metronome stopped.")
            return
        finally:
            refresh.cancel()

    views.print_success(f"{reps} reps done.")
