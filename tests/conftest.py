"""In-memory fakes of the persistence collaborator, plus shared CSV builders."""

from __future__ import annotations

from datetime import datetime

import pytest

from ironlog.models import WIRE_COLUMNS, ExerciseCatalogEntry, PersonalRecord

HEADER = ",".join(WIRE_COLUMNS)


class MemoryCatalog:
    def __init__(self, entries: list[ExerciseCatalogEntry] | None = None):
        self.entries: list[ExerciseCatalogEntry] = list(entries or [])
        self.saved: list[ExerciseCatalogEntry] = []

    def fetch_all_exercises(self) -> list[ExerciseCatalogEntry]:
        return list(self.entries)

    def save_exercise(self, entry: ExerciseCatalogEntry) -> None:
        self.entries.append(entry)
        self.saved.append(entry)


class MemoryRecords:
    def __init__(self) -> None:
        self.records: list[PersonalRecord] = []

    def fetch_all_personal_records(self) -> list[PersonalRecord]:
        return list(self.records)

    def save_personal_record(self, pr: PersonalRecord) -> None:
        self.records.append(pr)

    def delete_personal_record(self, pr: PersonalRecord) -> None:
        self.records = [r for r in self.records if r.id != pr.id]

    def delete_personal_records(self, workout_id: str) -> None:
        self.records = [r for r in self.records if r.workout_id != workout_id]


def entry(name: str, category: str = "barbell", muscles: list[str] | None = None, equipment: str = "barbell") -> ExerciseCatalogEntry:
    return ExerciseCatalogEntry(
        id="ex_" + name.lower().replace(" ", "_"),
        name=name,
        category=category,
        muscle_groups=muscles or ["chest"],
        equipment=equipment,
    )


def csv_line(
    exercise: str,
    weight: str,
    reps: str,
    set_index: int = 0,
    title: str = "Push Day",
    start: str = "4 Feb 2025, 16:21",
    end: str = "4 Feb 2025, 17:21",
    description: str = "",
    superset_id: str = "",
    set_type: str = "normal",
    rpe: str = "",
) -> str:
    fields = [
        f'"{title}"',
        f'"{start}"',
        f'"{end}"',
        f'"{description}"',
        f'"{exercise}"',
        superset_id,
        '""',
        str(set_index),
        f'"{set_type}"',
        weight,
        reps,
        "",
        "",
        rpe,
    ]
    return ",".join(fields)


def fixed_clock() -> datetime:
    return datetime(2025, 1, 1, 12, 0)


@pytest.fixture
def catalog() -> MemoryCatalog:
    return MemoryCatalog([
        entry("Bench Press", muscles=["chest", "triceps"]),
        entry("Incline Bench Press", muscles=["chest", "shoulders"]),
        entry("Squat", muscles=["quads", "glutes"]),
        entry("Deadlift", muscles=["back", "hamstrings"]),
        entry("Bicep Curl", category="dumbbell", muscles=["biceps"], equipment="dumbbell"),
    ])


@pytest.fixture
def records() -> MemoryRecords:
    return MemoryRecords()
