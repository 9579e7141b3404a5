"""
JSON-backed table store for training records.

Holds five tables (workouts, exercises, workout_exercises, sessions, sets),
each a mapping of record id to a flat field map.  Every mutation is written
back to disk immediately; an in-memory store is used when no path is given.
"""

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator

from ..core.config import APP_DIR_NAME, EXERCISE_CATEGORIES, STORE_FILE_NAME
from .serializers import ValidationError

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Table = dict[str, Record]

# table -> field -> (type, default)
SCHEMA: dict[str, dict[str, tuple[type, Any]]] = {
    "workouts": {
        "name": (str, ""),
        "type": (str, "program"),
    },
    "exercises": {
        "name": (str, ""),
        "category": (str, "upper"),
        "muscle_group": (str, ""),
        "target_reps": (float, 5),
        "target_sets": (float, 5),
        "default_weight": (float, 20),
    },
    "workout_exercises": {
        "workout_id": (str, ""),
        "exercise_id": (str, ""),
        "order": (float, 0),
    },
    "sessions": {
        "workout_id": (str, ""),
        "start_time": (float, 0),
        "end_time": (float, 0),
        "total_volume": (float, 0),
        "status": (str, "active"),
    },
    "sets": {
        "session_id": (str, ""),
        "exercise_id": (str, ""),
        "weight": (float, 0),
        "reps": (float, 0),
        "timestamp": (float, 0),
        "set_number": (float, 1),
    },
}

TABLES: tuple[str, ...] = tuple(SCHEMA)

# table -> field -> (predicate, description); a failing value takes the default
CONSTRAINTS: dict[str, dict[str, tuple[Callable[[Any], bool], str]]] = {
    "exercises": {
        "category": (lambda v: v in EXERCISE_CATEGORIES, f"one of {EXERCISE_CATEGORIES}"),
        "target_reps": (lambda v: v >= 1, "1 or greater"),
        "target_sets": (lambda v: v >= 1, "1 or greater"),
        "default_weight": (lambda v: v >= 0, "non-negative"),
    },
    "sessions": {
        "start_time": (lambda v: v >= 0, "non-negative"),
        "end_time": (lambda v: v >= 0, "non-negative"),
        "total_volume": (lambda v: v >= 0, "non-negative"),
        "status": (lambda v: v in ("active", "completed"), "'active' or 'completed'"),
    },
    "sets": {
        "weight": (lambda v: v >= 0, "non-negative"),
        "reps": (lambda v: v >= 0, "non-negative"),
        "set_number": (lambda v: v >= 1, "1 or greater"),
    },
}


def _matches(value: Any, kind: type) -> bool:
    if kind is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, kind)


def _violation(table: str, field: str, value: Any) -> str | None:
    """Description of the constraint ``value`` breaks, or None."""
    rule = CONSTRAINTS.get(table, {}).get(field)
    if rule is None:
        return None
    check, description = rule
    return None if check(value) else description


class RecordStore:
    """
    Table/record store with a fixed schema.

    Writes are serialized behind a single re-entrant lock and reads return
    copies taken under the same lock, so a reader never sees a partially
    applied mutation.  Use ``transaction()`` to apply several mutations
    with a single save.
    """

    def __init__(self, path: str | Path | None = None):
        """
        Initialize the store, loading ``path`` if it exists.

        Args:
            path: JSON file to persist to, or None for an in-memory store
        """
        self.path = Path(path) if path is not None else None
        self._lock = threading.RLock()
        self._tables: dict[str, Table] = {name: {} for name in TABLES}
        self._depth = 0
        self._dirty = False
        if self.path is not None and self.path.exists():
            self._load()

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def get_all(self, table: str) -> Table:
        """Return a copy of every record in ``table``."""
        self._check_table(table)
        with self._lock:
            return copy.deepcopy(self._tables[table])

    def get_record(self, table: str, record_id: str) -> Record | None:
        """Return a copy of one record, or None if absent."""
        self._check_table(table)
        with self._lock:
            record = self._tables[table].get(record_id)
            return dict(record) if record is not None else None

    def create_or_replace_record(self, table: str, record_id: str, fields: Record) -> None:
        """
        Write a full record, applying schema defaults.

        Fields not in the schema are dropped; missing, mistyped or
        out-of-range fields take the schema default.
        """
        self._check_table(table)
        with self._lock:
            self._tables[table][record_id] = self._normalise(table, fields)
            self._changed()

    def set_field(self, table: str, record_id: str, field: str, value: Any) -> None:
        """
        Update a single field; creates the record from defaults if absent.
        """
        self._check_table(table)
        kind, _ = self._field_spec(table, field)
        if not _matches(value, kind):
            raise ValidationError(
                f"{table}.{field} expects {kind.__name__}, got {type(value).__name__}"
            )
        problem = _violation(table, field, value)
        if problem is not None:
            raise ValidationError(f"{table}.{field} must be {problem}, got {value!r}")
        with self._lock:
            record = self._tables[table].get(record_id)
            if record is None:
                record = self._normalise(table, {})
                self._tables[table][record_id] = record
            record[field] = value
            self._changed()

    def delete_record(self, table: str, record_id: str) -> None:
        """Remove a record; missing records are ignored."""
        self._check_table(table)
        with self._lock:
            if self._tables[table].pop(record_id, None) is not None:
                self._changed()

    # ------------------------------------------------------------------
    # Batching / snapshots
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator["RecordStore"]:
        """
        Hold the write lock for a group of mutations and save once at the end.
        """
        with self._lock:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
                if self._depth == 0 and self._dirty:
                    self._save()

    def snapshot(self) -> dict[str, Table]:
        """Return a consistent copy of every table."""
        with self._lock:
            return copy.deepcopy(self._tables)

    def is_empty(self, table: str) -> bool:
        self._check_table(table)
        with self._lock:
            return not self._tables[table]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_table(self, table: str) -> None:
        if table not in SCHEMA:
            raise KeyError(f"Unknown table '{table}'. Valid tables: {', '.join(TABLES)}")

    def _field_spec(self, table: str, field: str) -> tuple[type, Any]:
        spec = SCHEMA[table].get(field)
        if spec is None:
            raise KeyError(f"Unknown field '{field}' for table '{table}'")
        return spec

    def _normalise(self, table: str, fields: Record) -> Record:
        record: Record = {}
        for name, (kind, default) in SCHEMA[table].items():
            if name not in fields:
                record[name] = default
                continue
            value = fields[name]
            if not _matches(value, kind):
                logger.warning(
                    "Ignoring %s.%s=%r (expected %s); using default %r",
                    table, name, value, kind.__name__, default,
                )
                record[name] = default
                continue
            problem = _violation(table, name, value)
            if problem is not None:
                logger.warning(
                    "Ignoring %s.%s=%r (must be %s); using default %r",
                    table, name, value, problem, default,
                )
                record[name] = default
            else:
                record[name] = value
        dropped = set(fields) - set(SCHEMA[table])
        if dropped:
            logger.debug("Dropping unknown %s fields: %s", table, sorted(dropped))
        return record

    def _changed(self) -> None:
        self._dirty = True
        if self._depth == 0:
            self._save()

    def _load(self) -> None:
        assert self.path is not None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing store file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ValidationError(f"Store file {self.path} must contain a JSON object")

        tables = data.get("tables", {})
        for name in TABLES:
            raw = tables.get(name, {})
            if not isinstance(raw, dict):
                raise ValidationError(f"Table '{name}' in {self.path} is not an object")
            self._tables[name] = {
                str(rid): self._normalise(name, rec if isinstance(rec, dict) else {})
                for rid, rec in raw.items()
            }
        logger.debug("Loaded store from %s", self.path)

    def _save(self) -> None:
        self._dirty = False
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"version": 1, "tables": self._tables}

        # Sibling temp file + rename: the store file is always complete
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


def get_default_store_path() -> Path:
    """
    Get the default store file path (~/.tiny-lifts/store.json).
    """
    return Path.home() / APP_DIR_NAME / STORE_FILE_NAME
