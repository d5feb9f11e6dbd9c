"""Workout export CSV: parse text into header + Rows, and serialize workouts back to the same format.

Wire columns (comma-separated, UTF-8, RFC4180-style quoting):
    title,start_time,end_time,description,exercise_title,superset_id,exercise_notes,
    set_index,set_type,weight_kg,reps,distance_km,duration_seconds,rpe
Only title, start_time, end_time, exercise_title, set_index, weight_kg and reps are required
on import; other columns are optional and unknown ones are kept in Row.extras.
"""

from __future__ import annotations

import csv
import re
from datetime import timedelta

from loguru import logger
from pydantic import BaseModel, Field

from .errors import EmptyFileError, MissingRequiredColumnsError
from .models import (
    REQUIRED_COLUMNS,
    WIRE_COLUMNS,
    IssueRecord,
    Row,
    Workout,
    format_weight,
)
from .normalize import format_export_date

# Record separators only; U+2028, form feed and friends stay inside their field.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class ParsedTable(BaseModel):
    header: list[str]
    rows: list[Row] = Field(default_factory=list)
    total_rows: int = 0
    skipped_rows: int = 0
    issues: list[IssueRecord] = Field(default_factory=list)


def split_fields(line: str) -> list[str]:
    """Quote-aware split of one physical line. '""' inside a quoted field is a literal quote."""
    fields = next(csv.reader([line]), [])
    return [f.strip() for f in fields]


def parse_csv_text(content: str) -> ParsedTable:
    """
    Parse export text. The first non-empty line is the header.
    Raises EmptyFileError / MissingRequiredColumnsError; malformed data lines are skipped, not fatal.
    """
    if not content or not content.strip():
        raise EmptyFileError()

    lines = _LINE_BREAK.split(content)
    header_at = next(i for i, line in enumerate(lines) if line.strip())
    header = [h.lstrip("\ufeff").strip().lower() for h in split_fields(lines[header_at])]
    missing = REQUIRED_COLUMNS - set(header)
    if missing:
        raise MissingRequiredColumnsError(list(missing))

    table = ParsedTable(header=header)
    for index in range(header_at + 1, len(lines)):
        line = lines[index]
        if not line.strip():
            continue
        line_number = index + 1
        table.total_rows += 1
        try:
            fields = split_fields(line)
        except csv.Error as e:
            _skip(table, line_number, line, "unreadable_row", f"Line {line_number} could not be read: {e}")
            continue
        if len(fields) != len(header):
            _skip(
                table,
                line_number,
                line,
                "field_count_mismatch",
                f"Line {line_number} has {len(fields)} fields, header has {len(header)}; row skipped.",
            )
            continue
        table.rows.append(Row.from_fields(header, fields, line_number))
    return table


def _skip(table: ParsedTable, line_number: int, line: str, issue_type: str, message: str) -> None:
    logger.warning(message)
    table.skipped_rows += 1
    table.issues.append(IssueRecord(type=issue_type, line=line_number, message=message, raw_excerpt=line[:80]))


# --- Serialization ---

def escape_field(value: str) -> str:
    if any(c in value for c in (",", '"', "\n", "\r")):
        return '"' + value.replace('"', '""') + '"'
    return value


def workout_title(workout: Workout) -> str:
    """Session title; falls back to notes, then to a date-based title ('Tuesday, Feb 4 Workout')."""
    if workout.title:
        return workout.title
    if workout.notes:
        return workout.notes
    return f"{workout.date:%A}, {workout.date:%b} {workout.date.day} Workout"


def _format_rpe(rpe: float | None) -> str:
    if rpe is None:
        return ""
    return str(int(rpe)) if float(rpe).is_integer() else str(rpe)


def workout_rows(workout: Workout) -> list[list[str]]:
    """Flatten one lifting workout into wire rows (unescaped). Other workout types yield nothing."""
    if workout.workout_type != "lifting":
        return []
    title = workout_title(workout)
    start_time = format_export_date(workout.date)
    end_time = format_export_date(workout.date + timedelta(seconds=workout.duration))
    description = workout.notes or ""
    rows: list[list[str]] = []
    for workout_exercise in sorted(workout.exercises, key=lambda e: e.order):
        for set_index, s in enumerate(workout_exercise.sets):
            rows.append([
                title,
                start_time,
                end_time,
                description,
                workout_exercise.exercise.name,
                workout_exercise.superset_id or "",
                s.notes or "",
                str(set_index),
                s.set_type or "",
                format_weight(s.weight) if s.weight > 0 else "",
                str(s.reps),
                "",  # distance_km: not used for lifting
                "",  # duration_seconds: not used for sets
                _format_rpe(s.rpe),
            ])
    return rows


def serialize_workouts(workouts: list[Workout]) -> str:
    """Header plus one line per set, newest workout first."""
    lines = [",".join(WIRE_COLUMNS)]
    for workout in sorted(workouts, key=lambda w: w.date, reverse=True):
        for row in workout_rows(workout):
            lines.append(",".join(escape_field(v) for v in row))
    return "\n".join(lines) + "\n"
