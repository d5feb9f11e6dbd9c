"""Persistence collaborator: repository protocols and the SQLite store for exercises, workouts, and records."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from .models import ExerciseCatalogEntry, PersonalRecord, Workout

_DATA_DIR = Path(__file__).resolve().parent / "data"


class ExerciseCatalog(Protocol):
    def fetch_all_exercises(self) -> list[ExerciseCatalogEntry]: ...

    def save_exercise(self, entry: ExerciseCatalogEntry) -> None: ...


class RecordStore(Protocol):
    def fetch_all_personal_records(self) -> list[PersonalRecord]: ...

    def save_personal_record(self, pr: PersonalRecord) -> None: ...

    def delete_personal_record(self, pr: PersonalRecord) -> None: ...

    def delete_personal_records(self, workout_id: str) -> None: ...


def _dict_factory(cursor: sqlite3.Cursor, row: tuple) -> dict:
    return {col[0]: row[i] for i, col in enumerate(cursor.description)}


class Storage:
    """SQLite-backed storage for ironlog. Implements ExerciseCatalog and RecordStore."""

    def __init__(self, db_path: str | Path = "ironlog.db"):
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = _dict_factory
            self._ensure_schema()
        return self._conn

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def _ensure_schema(self) -> None:
        conn = self.connect()
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS exercises (
                exercise_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                entry_json TEXT NOT NULL,
                is_custom INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            );
            CREATE UNIQUE INDEX IF NOT EXISTS idx_exercises_name ON exercises(name COLLATE NOCASE);
            CREATE TABLE IF NOT EXISTS workouts (
                workout_id TEXT PRIMARY KEY,
                workout_date TEXT NOT NULL,
                workout_json TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            );
            CREATE INDEX IF NOT EXISTS idx_workouts_date ON workouts(workout_date);
            CREATE TABLE IF NOT EXISTS personal_records (
                pr_id TEXT PRIMARY KEY,
                exercise_id TEXT NOT NULL,
                workout_id TEXT NOT NULL,
                estimated_one_rep_max REAL NOT NULL,
                record_json TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_prs_exercise ON personal_records(exercise_id);
            CREATE INDEX IF NOT EXISTS idx_prs_workout ON personal_records(workout_id);
        """)
        conn.commit()

    # --- Exercise catalog ---

    def fetch_all_exercises(self) -> list[ExerciseCatalogEntry]:
        """Catalog entries in insertion order (seeded entries first)."""
        conn = self.connect()
        rows = conn.execute("SELECT entry_json FROM exercises ORDER BY rowid").fetchall()
        return [ExerciseCatalogEntry.model_validate_json(r["entry_json"]) for r in rows]

    def save_exercise(self, entry: ExerciseCatalogEntry) -> None:
        """Insert or update by id. A second entry with the same name (any case) raises sqlite3.IntegrityError."""
        conn = self.connect()
        conn.execute(
            """
            INSERT INTO exercises (exercise_id, name, entry_json, is_custom)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(exercise_id) DO UPDATE SET
                name = excluded.name,
                entry_json = excluded.entry_json,
                is_custom = excluded.is_custom
            """,
            (entry.id, entry.name, entry.model_dump_json(), int(entry.is_custom)),
        )
        conn.commit()

    def seed_catalog(self, path: str | Path | None = None) -> int:
        """Load catalog entries from JSON if the catalog is empty. Returns number of entries added."""
        if self.fetch_all_exercises():
            return 0
        path = Path(path) if path else _DATA_DIR / "exercise_catalog.json"
        if not path.exists():
            return 0
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        for item in raw:
            self.save_exercise(ExerciseCatalogEntry.model_validate(item))
        return len(raw)

    # --- Workouts ---

    def save_workout(self, workout: Workout) -> None:
        conn = self.connect()
        conn.execute(
            """
            INSERT OR REPLACE INTO workouts (workout_id, workout_date, workout_json)
            VALUES (?, ?, ?)
            """,
            (workout.id, workout.date.isoformat(), workout.model_dump_json()),
        )
        conn.commit()

    def fetch_workout(self, workout_id: str) -> Optional[Workout]:
        conn = self.connect()
        row = conn.execute(
            "SELECT workout_json FROM workouts WHERE workout_id = ?", (workout_id,)
        ).fetchone()
        if not row:
            return None
        return Workout.model_validate_json(row["workout_json"])

    def delete_workout(self, workout_id: str) -> None:
        conn = self.connect()
        conn.execute("DELETE FROM workouts WHERE workout_id = ?", (workout_id,))
        conn.commit()

    def fetch_workouts(self) -> list[Workout]:
        """All workouts, oldest first."""
        conn = self.connect()
        rows = conn.execute(
            "SELECT workout_json FROM workouts ORDER BY workout_date, rowid"
        ).fetchall()
        return [Workout.model_validate_json(r["workout_json"]) for r in rows]

    def fetch_workouts_by_date_range(self, start: datetime, end: datetime) -> list[Workout]:
        """Workouts with start <= date <= end, oldest first."""
        conn = self.connect()
        rows = conn.execute(
            """
            SELECT workout_json FROM workouts
            WHERE workout_date >= ? AND workout_date <= ?
            ORDER BY workout_date, rowid
            """,
            (start.isoformat(), end.isoformat()),
        ).fetchall()
        return [Workout.model_validate_json(r["workout_json"]) for r in rows]

    # --- Personal records ---

    def fetch_all_personal_records(self) -> list[PersonalRecord]:
        conn = self.connect()
        rows = conn.execute("SELECT record_json FROM personal_records ORDER BY rowid").fetchall()
        return [PersonalRecord.model_validate_json(r["record_json"]) for r in rows]

    def save_personal_record(self, pr: PersonalRecord) -> None:
        conn = self.connect()
        conn.execute(
            """
            INSERT OR REPLACE INTO personal_records
                (pr_id, exercise_id, workout_id, estimated_one_rep_max, record_json)
            VALUES (?, ?, ?, ?, ?)
            """,
            (pr.id, pr.exercise_id, pr.workout_id, pr.estimated_one_rep_max, pr.model_dump_json()),
        )
        conn.commit()

    def delete_personal_record(self, pr: PersonalRecord) -> None:
        conn = self.connect()
        conn.execute("DELETE FROM personal_records WHERE pr_id = ?", (pr.id,))
        conn.commit()

    def delete_personal_records(self, workout_id: str) -> None:
        conn = self.connect()
        conn.execute("DELETE FROM personal_records WHERE workout_id = ?", (workout_id,))
        conn.commit()
