"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workouts, sessions and progress.
"""

from datetime import datetime

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_month_calendar, create_volume_trend_chart
from ..core.history import TrendLabel
from ..core.models import (
    Exercise,
    MonthActivity,
    PlateauResult,
    SessionOverview,
    SessionSummary,
    SetRecord,
    VolumeInfo,
    Workout,
)
from ..core.timers import Metronome, RestTimer, format_countdown

console = Console()
err_console = Console(stderr=True)

_TREND_STYLE: dict[str, str] = {
    "Improving": "green",
    "Declining": "red",
    "Flat": "yellow",
}


def fmt_kg(value: float) -> str:
    return f"{value:g} kg"


def fmt_date(timestamp_ms: int, now: datetime | None = None) -> str:
    """
    Human date for a session: Today, Yesterday, "N days ago" within a
    week, otherwise e.g. "Mar 4".
    """
    when = datetime.fromtimestamp(timestamp_ms / 1000)
    now = now or datetime.now()
    days = (now - when).days
    if days == 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if 1 < days < 7:
        return f"{days} days ago"
    return f"{when:%b} {when.day}"


def print_workouts(
    workouts: list[Workout],
    exercise_ids: dict[str, list[str]],
    exercises: dict[str, Exercise],
) -> None:
    """
    Print the available workouts and their exercises.

    Args:
        workouts: Workouts to list
        exercise_ids: Ordered exercise ids per workout id
        exercises: Exercises keyed by id
    """
    table = Table(title="Workouts")
    table.add_column("ID", style="dim")
    table.add_column("Workout", style="cyan")
    table.add_column("Exercises")

    for workout in workouts:
        names = [
            f"{exercises[eid].name} {exercises[eid].scheme}"
            for eid in exercise_ids.get(workout.workout_id, [])
            if eid in exercises
        ]
        table.add_row(workout.workout_id, workout.name, ", ".join(names))

    console.print(table)


def format_volume_comparison(volume: VolumeInfo) -> str:
    """One-line volume comparison, coloured by direction."""
    current = f"Volume: {volume.current_volume:,.0f}"
    if volume.previous_volume <= 0:
        return f"{current} [dim](no previous session)[/dim]"
    if volume.volume_delta > 0:
        style, sign = "green", "+"
    elif volume.volume_delta < 0:
        style, sign = "red", ""
    else:
        style, sign = "yellow", ""
    return (
        f"{current} vs {volume.previous_volume:,.0f} last time  "
        f"[{style}]{sign}{volume.volume_delta:,.0f} ({sign}{volume.percent_change}%)[/{style}]"
    )


def print_session_status(
    workout_name: str,
    elapsed: str,
    exercise_ids: list[str],
    exercises: dict[str, Exercise],
    logged: dict[str, list[SetRecord]],
    volume: VolumeInfo,
    plateaus: dict[str, PlateauResult] | None = None,
) -> None:
    """
    Print the active session: one row per exercise with its logged sets.
    """
    console.print()
    console.print(f"[bold cyan]{workout_name}[/bold cyan]  [dim]{elapsed}[/dim]")
    console.print(format_volume_comparison(volume))
    console.print()

    table = Table(show_header=True, header_style="dim")
    table.add_column("Exercise", style="cyan")
    table.add_column("Target", justify="right")
    table.add_column("Sets")
    table.add_column("Note", style="yellow")

    plateaus = plateaus or {}
    for eid in exercise_ids:
        exercise = exercises.get(eid)
        if exercise is None:
            continue
        cells = []
        for s in logged.get(eid, []):
            style = "green" if s.reps >= exercise.target_reps else "yellow"
            cells.append(f"[{style}]{s.reps}@{s.weight:g}[/{style}]")
        remaining = exercise.target_sets - len(logged.get(eid, []))
        if remaining > 0:
            cells.append(f"[dim]{' '.join('·' * remaining)}[/dim]")
        note = "Plateau" if plateaus.get(eid, PlateauResult()).is_plateau else ""
        table.add_row(exercise.name, exercise.scheme, " ".join(cells), note)

    console.print(table)


def format_history_table(sessions: list[SessionOverview]) -> Table:
    """
    Create a Rich table displaying completed sessions.

    Args:
        sessions: Overviews, newest-first

    Returns:
        Rich Table object
    """
    table = Table(title="Training History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Workout", style="magenta")
    table.add_column("Volume", justify="right", style="bold")
    table.add_column("Duration", justify="right")
    table.add_column("Exercises", justify="right")
    table.add_column("ID", style="dim")

    for i, s in enumerate(sessions, 1):
        table.add_row(
            str(i),
            fmt_date(s.date),
            s.workout_name,
            f"{s.total_volume:,.0f}",
            f"{s.duration_minutes} min" if s.duration_minutes else "-",
            str(s.exercise_count),
            s.session_id,
        )

    return table


def print_history(sessions: list[SessionOverview]) -> None:
    if not sessions:
        console.print("[yellow]No workouts yet. Complete your first workout and it will appear here.[/yellow]")
        return
    console.print(format_history_table(sessions))


def print_session_detail(
    grouped: dict[str, list[SetRecord]],
    exercises: dict[str, Exercise],
) -> None:
    """Print every set of one session, grouped by exercise."""
    if not grouped:
        console.print("[yellow]No sets recorded for this session.[/yellow]")
        return

    table = Table(show_header=True, header_style="dim")
    table.add_column("Exercise", style="cyan")
    table.add_column("Set", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Volume", justify="right")

    for eid, sets in grouped.items():
        name = exercises[eid].name if eid in exercises else eid
        for s in sets:
            table.add_row(name, str(s.set_number), fmt_kg(s.weight), str(s.reps), f"{s.volume:,.0f}")
            name = ""

    console.print(table)


def format_suggestion(plateau: PlateauResult) -> str:
    """Text of the plateau / progression suggestion, empty if none."""
    if plateau.is_plateau and plateau.suggested_deload_weight is not None:
        lines = [
            "[bold red]Plateau detected[/bold red]",
            f"Deload to {fmt_kg(plateau.suggested_deload_weight)} (10% reduction).",
        ]
        if plateau.suggested_rep_scheme:
            lines.append(f"Consider switching to {plateau.suggested_rep_scheme}.")
        return "\n".join(lines)
    if plateau.progression_suggestion:
        return f"[green]{plateau.progression_suggestion}[/green]"
    return ""


def print_progress_card(
    exercise: Exercise,
    history: list[SessionSummary],
    trend: TrendLabel,
    plateau: PlateauResult,
) -> None:
    """Print trend, recent sessions, volume bars and suggestion for one exercise."""
    style = _TREND_STYLE.get(trend, "dim")
    badge = "  [bold red]PLATEAU[/bold red]" if plateau.is_plateau else ""
    console.print()
    console.print(f"[bold]{exercise.name}[/bold]  [{style}]{trend}[/{style}]{badge}")

    if not history:
        console.print("[dim]No completed sessions yet.[/dim]")
        return

    latest = history[0]
    console.print(
        f"{fmt_kg(latest.max_weight)}  ·  {latest.total_reps}/{exercise.target_total_reps} reps  ·  "
        f"{latest.total_volume:,.0f} vol"
    )

    table = Table(show_header=True, header_style="dim", title="Recent Sessions")
    table.add_column("Date", style="cyan")
    table.add_column("Top set", justify="right")
    table.add_column("Volume", justify="right")
    for h in history:
        when = datetime.fromtimestamp(h.date / 1000)
        table.add_row(
            f"{when:%b} {when.day}",
            f"{fmt_kg(h.max_weight)} × {h.total_reps} reps",
            f"{h.total_volume:,.0f}",
        )
    console.print(table)
    console.print(create_volume_trend_chart(history))

    suggestion = format_suggestion(plateau)
    if suggestion:
        console.print(suggestion)


def print_plateau_banner(exercise_name: str, plateau: PlateauResult) -> None:
    """Prominent warning shown above the progress cards."""
    parts = [f"[bold red]Plateau: {exercise_name}[/bold red]"]
    if plateau.suggested_deload_weight is not None:
        parts.append(f"deload to {fmt_kg(plateau.suggested_deload_weight)}")
    if plateau.suggested_rep_scheme:
        parts.append(f"try {plateau.suggested_rep_scheme}")
    console.print(", ".join(parts))


def print_calendar(activity: MonthActivity) -> None:
    console.print()
    console.print(create_month_calendar(activity))
    console.print()


def print_settings(exercises: list[Exercise]) -> None:
    """Print each exercise's configurable defaults."""
    table = Table(title="Exercise Defaults")
    table.add_column("ID", style="dim")
    table.add_column("Exercise", style="cyan")
    table.add_column("Category")
    table.add_column("Muscles", style="dim")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Sets", justify="right")

    for e in exercises:
        table.add_row(
            e.exercise_id,
            e.name,
            e.category,
            e.muscle_group,
            fmt_kg(e.default_weight),
            str(e.target_reps),
            str(e.target_sets),
        )
    console.print(table)


def format_rest_timer(timer: RestTimer) -> str:
    """Countdown line for the live rest display."""
    label = timer.intensity.capitalize()
    state = "" if timer.is_running else "  [yellow](paused)[/yellow]"
    return (
        f"[bold]Rest[/bold] {label}  {format_countdown(timer.seconds_left)} "
        f"[dim]/ {format_countdown(timer.total_seconds)}  "
        f"{timer.progress_percent:.0f}%[/dim]{state}"
    )


def format_metronome(metronome: Metronome) -> str:
    """Phase bar for the live metronome display."""
    width = 20
    filled = int(metronome.progress * width)
    arrow = "▲ UP  " if metronome.phase == "up" else "▼ DOWN"
    return (
        f"Rep {metronome.current_rep}/{metronome.total_reps}  {arrow} "
        f"{'█' * filled}{'░' * (width - filled)} {metronome.elapsed:.1f}s"
    )


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
