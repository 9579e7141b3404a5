"""
ASCII charts for terminal output.

Bar charts for per-exercise volume trends and a text grid for the
monthly activity calendar.
"""

import calendar
from datetime import datetime

from .models import MonthActivity, SessionSummary

WEEKDAY_HEADER = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(l) for l in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        bar = "█" * bar_len
        lines.append(f"{label:>{max_label_len}} │{bar} {value:,.0f}")

    return "\n".join(lines)


def create_volume_trend_chart(history: list[SessionSummary], width: int = 30) -> str:
    """
    Chart the volume of recent sessions, oldest at the top.

    Args:
        history: Summaries, newest-first
        width: Maximum bar width

    Returns:
        ASCII chart string
    """
    if not history:
        return "No completed sessions yet."

    ordered = list(reversed(history))
    labels = [datetime.fromtimestamp(h.date / 1000).strftime("%b %d") for h in ordered]
    values = [h.total_volume for h in ordered]
    return create_simple_bar_chart(labels, values, width=width, title="Volume Trend")


def create_month_calendar(activity: MonthActivity) -> str:
    """
    Render a month as a text grid; workout days are marked with ``*``,
    today is wrapped in brackets.

    Returns:
        Multi-line string, header first
    """
    title = f"{calendar.month_name[activity.month]} {activity.year}"
    plural = "" if activity.total_workouts == 1 else "s"
    lines = [
        title,
        f"{activity.total_workouts} workout{plural} this month",
        "",
        " ".join(f"{d:>4}" for d in WEEKDAY_HEADER),
    ]
    for week in activity.weeks:
        cells = []
        for cell in week:
            if not cell.is_current_month:
                cells.append("    ")
                continue
            text = f"{cell.day}{'*' if cell.has_workout else ''}"
            if cell.is_today:
                text = f"[{text}]"
            cells.append(f"{text:>4}")
        lines.append(" ".join(cells))
    return "\n".join(lines)
