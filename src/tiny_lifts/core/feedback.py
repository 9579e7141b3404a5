"""
Haptic and audio feedback.

Feedback is fire-and-forget: nothing waits on it and a failing device
must never interrupt logging or the timers.
"""

import logging
from typing import Protocol, Sequence

from rich.console import Console

logger = logging.getLogger(__name__)


class Feedback(Protocol):
    """Output device for vibration patterns (ms on/off) and tones (Hz)."""

    def vibrate(self, pattern: Sequence[int]) -> None: ...

    def beep(self, frequency: int) -> None: ...


class SilentFeedback:
    """Feedback sink that does nothing."""

    def vibrate(self, pattern: Sequence[int]) -> None:
        pass

    def beep(self, frequency: int) -> None:
        pass


class TerminalFeedback:
    """
    Terminal stand-in for haptics and audio: rings the console bell.

    The terminal cannot play distinct pitches, so the tone frequency is
    only logged.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def vibrate(self, pattern: Sequence[int]) -> None:
        logger.debug("vibrate %s", list(pattern))
        self.console.bell()

    def beep(self, frequency: int) -> None:
        logger.debug("beep %d Hz", frequency)
        self.console.bell()


def safe_vibrate(feedback: Feedback | None, pattern: Sequence[int]) -> None:
    """Vibrate, swallowing any device failure."""
    if feedback is None:
        return
    try:
        feedback.vibrate(pattern)
    except Exception as exc:
        logger.debug("Vibration unavailable: %s", exc)


def safe_beep(feedback: Feedback | None, frequency: int) -> None:
    """Play a tone, swallowing any device failure."""
    if feedback is None:
        return
    try:
        feedback.beep(frequency)
    except Exception as exc:
        logger.debug("Audio unavailable: %s", exc)
