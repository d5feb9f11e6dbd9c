"""Import workflow: parse export CSV, repair outlier weights, resolve exercises, assemble workouts.

import_csv_text / import_csv_file return workouts without storing them; import_csv_impl persists
them and runs PR detection.
"""

from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import Callable

from loguru import logger

from .assemble import WorkoutAssembler
from .csv_format import parse_csv_text, serialize_workouts
from .errors import FileAccessError, WorkoutImportError
from .models import ExportCsvInput, ImportCsvInput, ImportCsvOutput, ImportResult
from .normalize import DateLocale
from .outliers import correct_outliers
from .records import PRDetector
from .resolver import ExerciseResolver
from .storage import ExerciseCatalog, Storage


def import_csv_text(
    content: str,
    catalog: ExerciseCatalog,
    locales: list[DateLocale] | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> ImportResult:
    """Raises EmptyFileError / InvalidHeaderError; everything row-local ends up in ImportResult.issues."""
    table = parse_csv_text(content)
    corrected = correct_outliers(table.rows)
    assembler = WorkoutAssembler(ExerciseResolver(catalog), locales=locales, clock=clock)
    assembled = assembler.assemble(corrected.rows)

    result = ImportResult(
        workouts=assembled.workouts,
        fixed_outliers=corrected.corrected,
        total_rows=table.total_rows,
        skipped_rows=table.skipped_rows,
        issues=table.issues + assembled.issues,
    )
    logger.info(
        f"Imported {len(result.workouts)} workouts from {result.total_rows} rows "
        f"({result.skipped_rows} skipped, {result.fixed_outliers} weights corrected)"
    )
    return result


def import_csv_impl(
    payload: ImportCsvInput,
    storage: Storage,
    locales: list[DateLocale] | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> ImportCsvOutput:
    """Import, persist workouts and detect records oldest first. Fatal import errors become status=error."""
    storage.seed_catalog()
    try:
        result = import_csv_text(payload.content, storage, locales=locales, clock=clock)
    except WorkoutImportError as e:
        logger.warning(f"Import of {payload.filename or 'payload'} failed: {e}")
        return ImportCsvOutput(status="error", message=str(e))

    detector = PRDetector(storage)
    new_records = []
    for workout in sorted(result.workouts, key=lambda w: w.date):
        storage.save_workout(workout)
        new_records.extend(detector.detect(workout))

    return ImportCsvOutput(
        status="ok",
        workouts_imported=len(result.workouts),
        workout_ids=[w.id for w in result.workouts],
        fixed_outliers=result.fixed_outliers,
        total_rows=result.total_rows,
        skipped_rows=result.skipped_rows,
        new_records=new_records,
        issues=result.issues,
    )


def export_csv_impl(payload: ExportCsvInput, storage: Storage) -> str:
    """Stored workouts as export CSV; `range` bounds are whole days, inclusive."""
    if payload.range:
        start = datetime.combine(date.fromisoformat(payload.range.start), time.min)
        end = datetime.combine(date.fromisoformat(payload.range.end), time.max)
        workouts = storage.fetch_workouts_by_date_range(start, end)
    else:
        workouts = storage.fetch_workouts()
    return serialize_workouts(workouts)


def read_export_file(path: str | Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise FileAccessError(f"Failed to read file: {e}") from e


def import_csv_file(
    path: str | Path,
    catalog: ExerciseCatalog,
    locales: list[DateLocale] | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> ImportResult:
    return import_csv_text(read_export_file(path), catalog, locales=locales, clock=clock)
