"""Repair weights typed with an extra trailing zero (440 instead of 44) before workouts are built.

Only the divide-by-ten pattern is corrected, and only when the exercise has
enough samples to say what a normal weight looks like. Decimal shifts, transposed digits and
genuine heavy singles are left alone.
"""

from __future__ import annotations

from collections import defaultdict

from loguru import logger
from pydantic import BaseModel, Field

from .models import Row

MIN_SAMPLES = 3
OUTLIER_FACTOR = 5.0
CORRECTION_DIVISOR = 10.0
ACCEPT_LOW = 0.3   # corrected weight must be > median * ACCEPT_LOW
ACCEPT_HIGH = 3.0  # ... and < median * ACCEPT_HIGH


class CorrectionResult(BaseModel):
    rows: list[Row] = Field(default_factory=list)
    corrected: int = 0


def exercise_medians(rows: list[Row], min_samples: int = MIN_SAMPLES) -> dict[str, float]:
    """Upper median of positive weights per raw exercise_title, for exercises with enough samples."""
    weights: dict[str, list[float]] = defaultdict(list)
    for row in rows:
        exercise = row.text("exercise_title")
        weight = row.weight
        if exercise is None or weight is None or weight <= 0:
            continue
        weights[exercise].append(weight)
    medians: dict[str, float] = {}
    for exercise, values in weights.items():
        if len(values) < min_samples:
            continue
        ordered = sorted(values)
        medians[exercise] = ordered[len(ordered) // 2]
    return medians


def corrected_weight(weight: float, median: float) -> float | None:
    """Return weight / 10 if weight is a likely extra-zero typo for this median, else None."""
    if weight <= median * OUTLIER_FACTOR:
        return None
    candidate = weight / CORRECTION_DIVISOR
    if median * ACCEPT_LOW < candidate < median * ACCEPT_HIGH:
        return candidate
    return None


def correct_outliers(rows: list[Row], min_samples: int = MIN_SAMPLES) -> CorrectionResult:
    """Return new rows with implausible weights divided by ten. Reps and all other fields are untouched."""
    medians = exercise_medians(rows, min_samples)
    out: list[Row] = []
    fixed = 0
    for row in rows:
        exercise = row.text("exercise_title")
        weight = row.weight
        median = medians.get(exercise) if exercise is not None else None
        if median is None or weight is None or weight <= 0:
            out.append(row)
            continue
        candidate = corrected_weight(weight, median)
        if candidate is None:
            out.append(row)
            continue
        logger.info(
            f"Fixed outlier on line {row.line_number}: {exercise} {weight}kg -> {candidate}kg (median: {median}kg)"
        )
        out.append(row.with_weight(candidate))
        fixed += 1
    if fixed:
        logger.info(f"Fixed {fixed} outlier weights automatically")
    return CorrectionResult(rows=out, corrected=fixed)
