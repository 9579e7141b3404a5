"""
Seed program for tiny-lifts.

The two starter workouts and their exercises, loaded from YAML and
written to an empty store on first start.
"""

from .loader import SeedProgram, load_seed_program, seed_if_empty

__all__ = [
    "SeedProgram",
    "load_seed_program",
    "seed_if_empty",
]
