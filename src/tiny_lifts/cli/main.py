"""
CLI entry point using Typer.

Provides commands for logging barbell workouts:
- workouts / start / log / status / end: run a session
- history / show / calendar: completed sessions
- progress / settings: trends, plateau suggestions and exercise defaults
- rest / metronome: live timers
"""

from typing import Annotated

import typer

from . import views
from .app import app, setup_logging
from .commands import history, progress, session, timers  # noqa: F401  (registers commands)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Barbell workout logger. Run without a command for interactive mode.
    """
    setup_logging(verbose)

    if ctx.invoked_subcommand is not None:
        return

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]tiny-lifts[/bold cyan]: barbell workout logger")
    views.console.print()

    menu = {
        "1": ("status",    "Current session"),
        "2": ("workouts",  "Start a workout"),
        "3": ("log",       "Log a set"),
        "4": ("end",       "Finish workout"),
        "5": ("history",   "Workout history"),
        "6": ("progress",  "Progress & plateaus"),
        "7": ("calendar",  "Monthly calendar"),
        "8": ("rest",      "Rest timer"),
        "9": ("metronome", "Tempo metronome"),
        "s": ("settings",  "Exercise settings"),
        "0": ("quit",      "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = {k: v[0] for k, v in menu.items()}.get(choice)
    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "status":
        ctx.invoke(session.status)
    elif chosen == "workouts":
        session.menu_start()
    elif chosen == "log":
        session.menu_log()
    elif chosen == "end":
        ctx.invoke(session.end)
    elif chosen == "history":
        ctx.invoke(history.show_history)
    elif chosen == "progress":
        ctx.invoke(progress.show_progress)
    elif chosen == "calendar":
        ctx.invoke(history.calendar)
    elif chosen == "rest":
        ctx.invoke(timers.rest)
    elif chosen == "metronome":
        ctx.invoke(timers.metronome)
    elif chosen == "settings":
        ctx.invoke(progress.settings)


if __name__ == "__main__":
    app()
