"""
YAML → seed program loader.

Loads the bundled ``src/tiny_lifts/programs/default.yaml`` (five exercises,
Workout A and Workout B).  A user file at ``~/.tiny-lifts/program.yaml`` is
deep-merged over it, so only changed keys need to be listed; user-only
exercises or workouts are added.

Usage:
    from tiny_lifts.core.program import load_seed_program, seed_if_empty
    program = load_seed_program()
    seed_if_empty(repos, program)
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from ..config import APP_DIR_NAME, PROGRAM_FILE_NAME
from ..models import Exercise, Workout, WorkoutExercise

if TYPE_CHECKING:
    from ...io.repositories import Repositories

logger = logging.getLogger(__name__)

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset({"name", "category"})
_REQUIRED_WORKOUT_FIELDS: frozenset[str] = frozenset({"name", "exercises"})


@dataclass
class SeedProgram:
    """Exercises, workouts and their ordered links to write on first start."""

    exercises: list[Exercise] = field(default_factory=list)
    workouts: list[Workout] = field(default_factory=list)
    links: list[WorkoutExercise] = field(default_factory=list)


def exercise_from_dict(exercise_id: str, d: dict) -> Exercise:
    """Convert a raw dict (from YAML) to an Exercise.

    Raises ValueError if a required field is absent or a value is invalid.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"exercise '{exercise_id}' missing fields: {sorted(missing)}")
    return Exercise(
        exercise_id=exercise_id,
        name=str(d["name"]),
        category=str(d["category"]),  # type: ignore[arg-type]
        muscle_group=str(d.get("muscle_group", "")),
        target_reps=int(d.get("target_reps", 5)),
        target_sets=int(d.get("target_sets", 5)),
        default_weight=float(d.get("default_weight", 20.0)),
    )


def _link_id(workout_id: str, position: int) -> str:
    # wk-a -> we-a1, we-a2, ...
    return f"we-{workout_id.removeprefix('wk-')}{position}"


def program_from_dict(d: dict) -> SeedProgram:
    """Convert the raw program mapping to a SeedProgram.

    Raises ValueError on missing fields or references to unknown exercises.
    """
    program = SeedProgram()
    for exercise_id, raw in (d.get("exercises") or {}).items():
        program.exercises.append(exercise_from_dict(str(exercise_id), raw or {}))

    known = {e.exercise_id for e in program.exercises}
    for workout_id, raw in (d.get("workouts") or {}).items():
        raw = raw or {}
        missing = _REQUIRED_WORKOUT_FIELDS - set(raw)
        if missing:
            raise ValueError(f"workout '{workout_id}' missing fields: {sorted(missing)}")
        workout_id = str(workout_id)
        program.workouts.append(
            Workout(workout_id=workout_id, name=str(raw["name"]), kind=str(raw.get("type", "program")))
        )
        for position, exercise_id in enumerate(raw["exercises"], 1):
            if exercise_id not in known:
                raise ValueError(
                    f"workout '{workout_id}' references unknown exercise '{exercise_id}'"
                )
            program.links.append(
                WorkoutExercise(
                    link_id=_link_id(workout_id, position),
                    workout_id=workout_id,
                    exercise_id=str(exercise_id),
                    order=position,
                )
            )
    return program


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML mapping; raises yaml.YAMLError / OSError on failure."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_program_path() -> Path:
    """Return the path to the bundled default program."""
    # loader.py lives at src/tiny_lifts/core/program/loader.py
    return Path(__file__).parent.parent.parent / "programs" / "default.yaml"


def get_user_program_path() -> Path | None:
    """Return ~/.tiny-lifts/program.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / APP_DIR_NAME / PROGRAM_FILE_NAME
    return p if p.exists() else None


def load_seed_program(user_path: Path | None = None) -> SeedProgram:
    """
    Load the seed program, merging the user override when present.

    A user file that cannot be parsed or produces an invalid program is
    ignored with a warning.

    Args:
        user_path: Override file (default: ~/.tiny-lifts/program.yaml)

    Returns:
        SeedProgram

    Raises:
        RuntimeError: If the bundled program is missing or invalid
    """
    bundled = get_bundled_program_path()
    try:
        raw = _load_yaml_file(bundled)
        base = program_from_dict(raw)
    except (OSError, yaml.YAMLError, ValueError) as exc:
        raise RuntimeError(
            f"tiny-lifts: bundled program could not be loaded from {bundled}: {exc}"
        ) from exc

    user = user_path if user_path is not None else get_user_program_path()
    if user is None or not user.exists():
        return base

    try:
        merged = program_from_dict(_deep_merge(raw, _load_yaml_file(user)))
    except (OSError, yaml.YAMLError, ValueError) as exc:
        warnings.warn(
            f"tiny-lifts: ignoring user program {user} ({exc})",
            stacklevel=2,
        )
        return base
    logger.debug("Merged user program from %s", user)
    return merged


def seed_if_empty(repos: Repositories, program: SeedProgram | None = None) -> bool:
    """
    Write the seed program unless exercises already exist.

    Returns:
        True if the program was written
    """
    if not repos.store.is_empty("exercises"):
        return False
    program = program or load_seed_program()
    with repos.store.transaction():
        for exercise in program.exercises:
            repos.exercises.save(exercise)
        for workout in program.workouts:
            repos.workouts.save(workout)
        for link in program.links:
            repos.workouts.add_exercise(link)
    logger.info(
        "Seeded %d exercises and %d workouts",
        len(program.exercises), len(program.workouts),
    )
    return True
