"""Group corrected rows into Workout → WorkoutExercise → WorkoutSet hierarchies."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from loguru import logger
from pydantic import BaseModel, Field

from .models import IssueRecord, Row, Workout, WorkoutExercise, WorkoutSet
from .normalize import DateLocale, parse_export_date
from .resolver import ExerciseResolver


class AssembleResult(BaseModel):
    workouts: list[Workout] = Field(default_factory=list)
    issues: list[IssueRecord] = Field(default_factory=list)


def group_rows(rows: list[Row]) -> list[tuple[tuple[str, str], list[Row]]]:
    """Partition by (title, start_time), the export's workout identity; groups sorted by key."""
    groups: dict[tuple[str, str], list[Row]] = {}
    for row in rows:
        title = row.text("title")
        start_time = row.text("start_time")
        if title is None or start_time is None:
            continue
        groups.setdefault((title, start_time), []).append(row)
    return sorted(groups.items(), key=lambda kv: kv[0])


def group_by_exercise(rows: list[Row]) -> list[tuple[str, list[Row]]]:
    """Partition by exercise_title, in first-seen order."""
    groups: dict[str, list[Row]] = {}
    for row in rows:
        name = row.text("exercise_title")
        if name is None:
            continue
        groups.setdefault(name, []).append(row)
    return list(groups.items())


class WorkoutAssembler:
    """Builds Workouts from rows. Resolves each exercise once per workout; never persists workouts."""

    def __init__(
        self,
        resolver: ExerciseResolver,
        locales: list[DateLocale] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.resolver = resolver
        self.locales = locales
        self.clock = clock

    def assemble(self, rows: list[Row]) -> AssembleResult:
        result = AssembleResult()
        for _key, group in group_rows(rows):
            workout = self.build_workout(group, result.issues)
            if workout is not None:
                result.workouts.append(workout)
        return result

    def build_workout(self, rows: list[Row], issues: list[IssueRecord]) -> Workout | None:
        first = rows[0]
        start = self._parse_date(first, "start_time", issues)
        end = parse_export_date(first.text("end_time"), self.locales)
        if end is None:
            if first.text("end_time") is not None:
                self._date_issue(first, "end_time", issues, fallback="start time")
            end = start
        duration = max(0.0, (end - start).total_seconds())

        workout = Workout(
            title=first.text("title"),
            date=start,
            duration=duration,
            notes=first.text("description"),
            workout_type="lifting",
        )
        for name, exercise_rows in group_by_exercise(rows):
            workout_exercise = self.build_exercise(name, exercise_rows, len(workout.exercises), issues)
            if workout_exercise is not None:
                workout.exercises.append(workout_exercise)
        if not workout.exercises:
            return None
        return workout

    def build_exercise(
        self,
        name: str,
        rows: list[Row],
        order: int,
        issues: list[IssueRecord],
    ) -> WorkoutExercise | None:
        ordered = sorted(rows, key=lambda r: r.set_position or 0)
        sets = [s for s in (self.build_set(r, issues) for r in ordered) if s is not None]
        if not sets:
            return None
        return WorkoutExercise(
            exercise=self.resolver.resolve(name),
            order=order,
            superset_id=rows[0].text("superset_id"),
            sets=sets,
        )

    def build_set(self, row: Row, issues: list[IssueRecord]) -> WorkoutSet | None:
        reps = row.rep_count
        if reps is None or reps <= 0:
            message = f"Line {row.line_number}: set without valid reps ({row.reps!r}) dropped."
            logger.warning(message)
            issues.append(IssueRecord(type="dropped_set", line=row.line_number, message=message))
            return None
        weight = row.weight
        if weight is None or weight < 0:
            weight = 0.0
        return WorkoutSet(
            reps=reps,
            weight=weight,
            is_completed=True,  # exports only contain performed sets
            notes=row.text("exercise_notes"),
            set_type=row.text("set_type"),
            rpe=row.number("rpe"),
        )

    def _parse_date(self, row: Row, column: str, issues: list[IssueRecord]) -> datetime:
        parsed = parse_export_date(row.text(column), self.locales)
        if parsed is not None:
            return parsed
        self._date_issue(row, column, issues, fallback="current date")
        return self.clock()

    def _date_issue(self, row: Row, column: str, issues: list[IssueRecord], fallback: str) -> None:
        message = f"Line {row.line_number}: could not parse {column} {row.text(column)!r}, using {fallback}."
        logger.warning(message)
        issues.append(IssueRecord(type="invalid_date", line=row.line_number, message=message))
