import csv
import datetime
import io
import logging
import math
import sqlite3
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from algorithms import DateTools
from config import YamlConfig
from exercise_catalog import FALLBACK_CATEGORY, ExerciseCatalog
from models import BodyWeightEntry, Goals, WorkoutEntry, valid_sets
from settings_schema import default_settings, validate_settings

LOGGER = logging.getLogger(__name__)

WORKOUTS_KEY = "fitness-workouts"
CUSTOM_EXERCISES_KEY = "fitness-custom-exercises"
BODY_WEIGHT_KEY = "fitness-bodyweight"
GOALS_KEY = "fitness-goals"
SETTINGS_KEY = "fitness-settings"

CSV_HEADER = ["Date", "Exercise", "Category", "Set#", "Weight(kg)", "Reps"]


class Database:
    """Provides SQLite connection management and schema initialization."""

    _SCHEMA = """CREATE TABLE IF NOT EXISTS storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT
                );"""

    def __init__(self, db_path: str = "fitness.db") -> None:
        self._db_path = db_path
        self._ensure_schema()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            conn.execute(self._SCHEMA)


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> None:
        with self._connection() as conn:
            conn.execute(query, params)

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class KeyValueStore(BaseRepository):
    """Namespaced persistence provider holding one serialized value per key."""

    def load(self, key: str) -> Optional[str]:
        rows = self.fetch_all("SELECT value FROM storage WHERE key = ?;", (key,))
        return rows[0][0] if rows else None

    def save(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO storage (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at;",
            (key, value, datetime.datetime.now().isoformat(timespec="seconds")),
        )


class JsonRepository(KeyValueStore):
    """Keeps one JSON document under ``key`` and falls back to a default on corruption."""

    key: str = ""

    def _read(self, adapter: TypeAdapter, default: Any) -> Any:
        raw = self.load(self.key)
        if raw is None:
            return default
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            LOGGER.warning(
                "discarding unreadable value for %s: %s", self.key, e.errors()[:1]
            )
            return default

    def _write(self, adapter: TypeAdapter, value: Any) -> None:
        self.save(self.key, adapter.dump_json(value).decode("utf-8"))
        LOGGER.debug("flushed %s", self.key)


class WorkoutRepository(JsonRepository):
    """In-memory list of workout entries mirrored to storage after every change."""

    key = WORKOUTS_KEY
    _adapter = TypeAdapter(List[WorkoutEntry])

    def __init__(
        self, db_path: str = "fitness.db", catalog: Optional[ExerciseCatalog] = None
    ) -> None:
        super().__init__(db_path)
        self.catalog = catalog
        self._entries: List[WorkoutEntry] = self._read(self._adapter, [])

    def _flush(self) -> None:
        self._write(self._adapter, self._entries)

    def _next_id(self) -> int:
        candidate = int(time.time() * 1000)
        if self._entries:
            candidate = max(candidate, max(e.id for e in self._entries) + 1)
        return candidate

    def _index(self, entry_id: int) -> int:
        for idx, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return idx
        raise ValueError("workout not found")

    def _build(
        self,
        entry_id: int,
        date: str | datetime.date,
        exercise: str,
        raw_sets: Iterable[Any],
        category: Optional[str],
    ) -> WorkoutEntry:
        name = (exercise or "").strip()
        if not name:
            raise ValueError("exercise is required")
        sets = valid_sets(raw_sets)
        if not sets:
            raise ValueError("at least one set with weight and reps is required")
        if not category and self.catalog is not None:
            found = self.catalog.category_for(name, default="")
            category = found or None
        return WorkoutEntry(
            id=entry_id,
            date=DateTools.parse_date(date),
            exercise=name,
            category=category or None,
            sets=sets,
        )

    def save_workout(
        self,
        date: str | datetime.date,
        exercise: str,
        raw_sets: Iterable[Any],
        category: Optional[str] = None,
    ) -> WorkoutEntry:
        """Validate and append a new entry. Incomplete sets are dropped."""
        entry = self._build(self._next_id(), date, exercise, raw_sets, category)
        self._entries.append(entry)
        self._flush()
        LOGGER.debug("saved workout %s", entry.id)
        return entry

    def update_workout(
        self,
        entry_id: int,
        date: str | datetime.date,
        exercise: str,
        raw_sets: Iterable[Any],
        category: Optional[str] = None,
    ) -> WorkoutEntry:
        """Replace the entry with ``entry_id`` keeping its id and position."""
        idx = self._index(entry_id)
        entry = self._build(entry_id, date, exercise, raw_sets, category)
        self._entries[idx] = entry
        self._flush()
        return entry

    def delete_workout(self, entry_id: int) -> None:
        idx = self._index(entry_id)
        del self._entries[idx]
        self._flush()
        LOGGER.debug("deleted workout %s", entry_id)

    def fetch(self, entry_id: int) -> WorkoutEntry:
        return self._entries[self._index(entry_id)]

    def fetch_all_workouts(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[WorkoutEntry]:
        """Return entries in insertion order, optionally limited to a date range."""
        start = DateTools.parse_date(start_date) if start_date else None
        end = DateTools.parse_date(end_date) if end_date else None
        return [
            e
            for e in self._entries
            if (start is None or e.date >= start) and (end is None or e.date <= end)
        ]

    def exercises(self) -> List[str]:
        """Distinct exercise names in order of first use."""
        return list(dict.fromkeys(e.exercise for e in self._entries))

    def export_csv(self) -> str:
        """Return all sets as CSV, one row per set."""
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for entry in self._entries:
            category = entry.category
            if not category:
                category = (
                    self.catalog.category_for(entry.exercise)
                    if self.catalog is not None
                    else FALLBACK_CATEGORY
                )
            for number, s in enumerate(entry.sets, start=1):
                writer.writerow(
                    [
                        entry.date.isoformat(),
                        entry.exercise,
                        category,
                        number,
                        f"{s.weight:g}",
                        s.reps,
                    ]
                )
        return output.getvalue()


class CustomExerciseRepository(JsonRepository):
    """User-added exercises grouped by category."""

    key = CUSTOM_EXERCISES_KEY
    _adapter = TypeAdapter(Dict[str, List[str]])

    def __init__(self, db_path: str = "fitness.db") -> None:
        super().__init__(db_path)
        self._custom: Dict[str, List[str]] = self._read(self._adapter, {})

    def add(self, category: str, name: str) -> None:
        category = (category or "").strip()
        name = (name or "").strip()
        if not category or not name:
            raise ValueError("category and exercise name are required")
        if name in self.catalog().exercises(category):
            return
        self._custom.setdefault(category, []).append(name)
        self._write(self._adapter, self._custom)

    def remove(self, category: str, name: str) -> None:
        names = self._custom.get(category, [])
        if name not in names:
            raise ValueError("exercise not found")
        names.remove(name)
        if not names:
            del self._custom[category]
        self._write(self._adapter, self._custom)

    def fetch_custom(self) -> Dict[str, List[str]]:
        return {c: list(n) for c, n in self._custom.items()}

    def catalog(self) -> ExerciseCatalog:
        return ExerciseCatalog(self.fetch_custom())


class BodyWeightRepository(JsonRepository):
    """Repository for body weight logs."""

    key = BODY_WEIGHT_KEY
    _adapter = TypeAdapter(List[BodyWeightEntry])

    def __init__(self, db_path: str = "fitness.db") -> None:
        super().__init__(db_path)
        self._entries: List[BodyWeightEntry] = self._read(self._adapter, [])

    def log(self, date: str | datetime.date, weight: float) -> BodyWeightEntry:
        if weight is None or not math.isfinite(float(weight)) or float(weight) <= 0:
            raise ValueError("weight must be a positive number")
        entry = BodyWeightEntry(date=DateTools.parse_date(date), weight=float(weight))
        self._entries.append(entry)
        self._write(self._adapter, self._entries)
        return entry

    def fetch_history(
        self, start_date: Optional[str] = None, end_date: Optional[str] = None
    ) -> List[BodyWeightEntry]:
        start = DateTools.parse_date(start_date) if start_date else None
        end = DateTools.parse_date(end_date) if end_date else None
        rows = [
            e
            for e in self._entries
            if (start is None or e.date >= start) and (end is None or e.date <= end)
        ]
        return sorted(rows, key=lambda e: e.date)

    def fetch_latest_weight(self) -> float | None:
        """Return the most recent logged body weight if available."""
        history = self.fetch_history()
        if history:
            return history[-1].weight
        return None


class GoalRepository(JsonRepository):
    """Stores the weekly and monthly training-day targets."""

    key = GOALS_KEY
    _adapter = TypeAdapter(Goals)

    def __init__(self, db_path: str = "fitness.db") -> None:
        super().__init__(db_path)
        self._goals: Goals = self._read(self._adapter, Goals())

    def fetch(self) -> Goals:
        return self._goals

    def update(self, weekly: int | None = None, monthly: int | None = None) -> Goals:
        data = self._goals.model_dump()
        if weekly is not None:
            data["weekly"] = weekly
        if monthly is not None:
            data["monthly"] = monthly
        try:
            goals = Goals(**data)
        except ValidationError as e:
            raise ValueError(str(e))
        self._goals = goals
        self._write(self._adapter, self._goals)
        return goals


class SettingsRepository(JsonRepository):
    """Application settings stored in the database and mirrored to YAML."""

    key = SETTINGS_KEY
    _adapter = TypeAdapter(Dict[str, Any])

    def __init__(
        self, db_path: str = "fitness.db", yaml_path: str = "settings.yaml"
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._settings: Dict[str, Any] = default_settings()
        self._restore(self._read(self._adapter, {}), "database")
        self._restore(self._yaml.load(), "YAML")
        self._sync_to_yaml()

    def _restore(self, data: Dict[str, Any], source: str) -> None:
        """Merge ``data`` over the current settings if the result validates."""
        if not data:
            return
        merged = {**self._settings, **data}
        try:
            validate_settings(merged)
        except ValueError as e:
            LOGGER.warning("ignoring invalid settings in %s: %s", source, e)
        else:
            self._settings = merged
        self._write(self._adapter, self._settings)

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._settings)

    def get_text(self, key: str, default: str) -> str:
        value = self._settings.get(key)
        return default if value is None else str(value)

    def update(self, values: Dict[str, Any]) -> None:
        merged = {**self._settings, **values}
        validate_settings(merged)
        self._settings = merged
        self._write(self._adapter, self._settings)
        self._sync_to_yaml()
