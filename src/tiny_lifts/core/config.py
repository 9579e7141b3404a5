"""
Configuration constants for the workout logger.

All adjustable parameters are centralized here for easy tuning.
"""

from typing import Final

# =============================================================================
# REST TIMER
# =============================================================================

REST_DURATIONS: Final[dict[str, int]] = {
    "light": 60,
    "moderate": 120,
    "heavy": 240,
}
DEFAULT_INTENSITY: Final[str] = "moderate"
REST_TICK_SECONDS: Final[float] = 1.0
REST_ADJUST_STEP_SECONDS: Final[int] = 15  # +/- step offered by the CLI

# Intensity classification: weight as a fraction of the session max
LIGHT_INTENSITY_RATIO: Final[float] = 0.60
MODERATE_INTENSITY_RATIO: Final[float] = 0.85

# =============================================================================
# METRONOME
# =============================================================================

PHASE_DURATION_SECONDS: Final[float] = 5.0
METRONOME_TICK_SECONDS: Final[float] = 0.05
METRONOME_TOTAL_REPS: Final[int] = 5
UP_TONE_HZ: Final[int] = 880
DOWN_TONE_HZ: Final[int] = 440

# =============================================================================
# HAPTICS
# =============================================================================

REST_COMPLETE_VIBRATION: Final[tuple[int, ...]] = (200, 100, 200)
SET_LOGGED_VIBRATION: Final[tuple[int, ...]] = (50,)

# =============================================================================
# PROGRESSION / PLATEAU
# =============================================================================

PLATEAU_WINDOW: Final[int] = 3  # Completed sessions examined for stagnation
PLATEAU_MIN_HISTORY: Final[int] = 2  # Below this no suggestion is made
DELOAD_FACTOR: Final[float] = 0.90  # 10% reduction on plateau

CATEGORY_INCREMENTS_KG: Final[dict[str, float]] = {
    "deadlift": 10.0,
    "lower": 5.0,
}
DEFAULT_INCREMENT_KG: Final[float] = 2.5

# Rep-scheme step-down on plateau, keyed by (target_sets, target_reps)
REP_SCHEME_STEP_DOWN: Final[dict[tuple[int, int], str]] = {
    (5, 5): "3x5",
    (3, 5): "3x3",
}

DEFAULT_HISTORY_COUNT: Final[int] = 3
PROGRESS_HISTORY_COUNT: Final[int] = 5

# =============================================================================
# EXERCISE DEFAULTS
# =============================================================================

EXERCISE_CATEGORIES: Final[tuple[str, ...]] = ("upper", "lower", "deadlift")
DEFAULT_CATEGORY: Final[str] = "upper"
DEFAULT_TARGET_REPS: Final[int] = 5
DEFAULT_TARGET_SETS: Final[int] = 5
DEFAULT_START_WEIGHT_KG: Final[float] = 20.0

# =============================================================================
# INPUT BOUNDS
# =============================================================================

WEIGHT_MAX_KG: Final[float] = 9999.0
REPS_INPUT_MAX: Final[int] = 30

SETTINGS_REPS_RANGE: Final[tuple[int, int]] = (1, 30)
SETTINGS_SETS_RANGE: Final[tuple[int, int]] = (1, 10)

# =============================================================================
# STORAGE
# =============================================================================

APP_DIR_NAME: Final[str] = ".tiny-lifts"
STORE_FILE_NAME: Final[str] = "store.json"
PROGRAM_FILE_NAME: Final[str] = "program.yaml"
