"""Pydantic models for ironlog: parsed rows, exercise catalog, workouts, personal records, tool I/O."""

from __future__ import annotations

import math
import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


# --- Wire rows ---

WIRE_COLUMNS: tuple[str, ...] = (
    "title",
    "start_time",
    "end_time",
    "description",
    "exercise_title",
    "superset_id",
    "exercise_notes",
    "set_index",
    "set_type",
    "weight_kg",
    "reps",
    "distance_km",
    "duration_seconds",
    "rpe",
)

REQUIRED_COLUMNS: frozenset[str] = frozenset({
    "title",
    "start_time",
    "end_time",
    "exercise_title",
    "set_index",
    "weight_kg",
    "reps",
})


class Row(BaseModel):
    """One parsed data line. Known columns are typed fields; anything else lands in extras."""

    model_config = ConfigDict(frozen=True)

    line_number: int
    title: str = ""
    start_time: str = ""
    end_time: str = ""
    description: str = ""
    exercise_title: str = ""
    superset_id: str = ""
    exercise_notes: str = ""
    set_index: str = ""
    set_type: str = ""
    weight_kg: str = ""
    reps: str = ""
    distance_km: str = ""
    duration_seconds: str = ""
    rpe: str = ""
    extras: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_fields(cls, header: list[str], fields: list[str], line_number: int) -> "Row":
        known: dict[str, str] = {}
        extras: dict[str, str] = {}
        for name, value in zip(header, fields):
            if name in WIRE_COLUMNS:
                known[name] = value
            else:
                extras[name] = value
        return cls(line_number=line_number, extras=extras, **known)

    def text(self, column: str) -> Optional[str]:
        """Trimmed value of a column, None when absent or blank."""
        value = getattr(self, column) if column in WIRE_COLUMNS else self.extras.get(column)
        value = (value or "").strip()
        return value or None

    def number(self, column: str) -> Optional[float]:
        """Float value of a column; None when blank, unparseable or not finite (nan, inf, 1e400)."""
        value = self.text(column)
        if value is None:
            return None
        try:
            parsed = float(value)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None

    def integer(self, column: str) -> Optional[int]:
        value = self.text(column)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            pass
        try:
            as_float = float(value)
        except ValueError:
            return None
        return int(as_float) if as_float.is_integer() else None

    @property
    def weight(self) -> Optional[float]:
        return self.number("weight_kg")

    @property
    def rep_count(self) -> Optional[int]:
        return self.integer("reps")

    @property
    def set_position(self) -> Optional[int]:
        return self.integer("set_index")

    def with_weight(self, weight: float) -> "Row":
        return self.model_copy(update={"weight_kg": format_weight(weight)})


def format_weight(weight: float) -> str:
    """Shortest text that reads back as the same float (80 -> '80.0', 22.6796 -> '22.6796')."""
    return repr(float(weight))


# --- Exercise catalog ---

MAX_EXERCISE_NAME_LENGTH = 100

ExerciseCategory = Literal["barbell", "dumbbell", "bodyweight", "machine", "cable", "weightlifting"]
Equipment = Literal["barbell", "dumbbell", "none", "machine", "cable", "kettlebell", "plate", "band"]
MuscleGroup = Literal[
    "chest",
    "back",
    "shoulders",
    "traps",
    "biceps",
    "triceps",
    "quads",
    "hamstrings",
    "glutes",
    "calves",
    "core",
    "full_body",
]


class ExerciseCatalogEntry(BaseModel):
    id: str = Field(default_factory=lambda: generate_id("ex"))
    name: str
    category: ExerciseCategory
    muscle_groups: list[MuscleGroup]
    equipment: Equipment
    is_custom: bool = False

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("exercise name cannot be empty")
        if len(v) > MAX_EXERCISE_NAME_LENGTH:
            raise ValueError(f"exercise name must be {MAX_EXERCISE_NAME_LENGTH} characters or less")
        return v

    @field_validator("muscle_groups")
    @classmethod
    def _check_muscle_groups(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("exercise must target at least one muscle group")
        return v


# --- Workouts ---

WorkoutType = Literal["lifting", "cardio", "metcon"]


class WorkoutSet(BaseModel):
    reps: int = Field(gt=0)
    weight: float = Field(default=0.0, ge=0)  # kg; 0 = bodyweight only
    is_completed: bool = True
    notes: Optional[str] = None
    set_type: Optional[str] = None  # e.g. "normal", "warmup", "failure", "dropset"
    rpe: Optional[float] = None

    @property
    def estimated_one_rep_max(self) -> Optional[float]:
        from .records import e1rm_brzycki
        return e1rm_brzycki(self.weight, self.reps)

    @property
    def is_pr_candidate(self) -> bool:
        return self.is_completed and self.estimated_one_rep_max is not None


class WorkoutExercise(BaseModel):
    exercise: ExerciseCatalogEntry
    order: int = Field(ge=0)
    superset_id: Optional[str] = None
    sets: list[WorkoutSet] = Field(default_factory=list)


class Workout(BaseModel):
    id: str = Field(default_factory=lambda: generate_id("wkt"))
    title: Optional[str] = None
    date: datetime
    duration: float = 0.0  # seconds
    notes: Optional[str] = None
    workout_type: WorkoutType = "lifting"
    exercises: list[WorkoutExercise] = Field(default_factory=list)


# --- Personal records ---

class PersonalRecord(BaseModel):
    id: str = Field(default_factory=lambda: generate_id("pr"))
    exercise_id: str
    exercise_name: str
    estimated_one_rep_max: float
    actual_weight: float
    reps: int
    date: datetime
    workout_id: str


# --- Import output ---

IssueType = Literal["field_count_mismatch", "unreadable_row", "invalid_date", "dropped_set"]


class IssueRecord(BaseModel):
    """A row-local problem that was skipped or defaulted; the import carried on."""
    severity: Literal["warning"] = "warning"
    type: IssueType
    line: Optional[int] = None
    message: str
    raw_excerpt: Optional[str] = None


class ImportResult(BaseModel):
    workouts: list[Workout] = Field(default_factory=list)
    fixed_outliers: int = 0
    total_rows: int = 0
    skipped_rows: int = 0
    issues: list[IssueRecord] = Field(default_factory=list)


# --- Tool inputs/outputs ---

class ImportCsvInput(BaseModel):
    content: str
    filename: Optional[str] = None


class ImportCsvOutput(BaseModel):
    status: Literal["ok", "error"]
    message: Optional[str] = None
    workouts_imported: int = 0
    workout_ids: list[str] = Field(default_factory=list)
    fixed_outliers: int = 0
    total_rows: int = 0
    skipped_rows: int = 0
    new_records: list[PersonalRecord] = Field(default_factory=list)
    issues: list[IssueRecord] = Field(default_factory=list)


class DateRange(BaseModel):
    start: str  # YYYY-MM-DD
    end: str    # YYYY-MM-DD


class ExportCsvInput(BaseModel):
    range: Optional[DateRange] = None


class RecalculatePrsInput(BaseModel):
    workout_id: Optional[str] = None  # only this workout's records; all workouts when omitted


class RecalculatePrsOutput(BaseModel):
    status: Literal["ok", "error"]
    message: Optional[str] = None
    new_records: list[PersonalRecord] = Field(default_factory=list)


class PersonalRecordsInput(BaseModel):
    limit: Optional[int] = 20


class PersonalRecordsOutput(BaseModel):
    count: int
    records: list[PersonalRecord] = Field(default_factory=list)
