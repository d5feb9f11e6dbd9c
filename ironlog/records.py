"""Personal-record detection over assembled workouts: Brzycki e1rm, best set per exercise, idempotent recompute."""

from __future__ import annotations

from loguru import logger

from .models import (
    PersonalRecord,
    PersonalRecordsInput,
    PersonalRecordsOutput,
    RecalculatePrsInput,
    RecalculatePrsOutput,
    Workout,
    WorkoutExercise,
    WorkoutSet,
)
from .storage import RecordStore, Storage

# Brzycki is undefined at 37 reps (division by zero) and meaningless beyond.
BRZYCKI_REP_LIMIT = 37


def e1rm_brzycki(weight: float, reps: int) -> float | None:
    """Estimated one-rep max: weight * 36 / (37 - reps). None when the set cannot produce an estimate."""
    if weight <= 0 or reps <= 0 or reps >= BRZYCKI_REP_LIMIT:
        return None
    return weight * 36.0 / (BRZYCKI_REP_LIMIT - reps)


def best_set(workout_exercise: WorkoutExercise) -> tuple[WorkoutSet, float] | None:
    """Completed set with the highest estimate; the earliest wins ties."""
    best: tuple[WorkoutSet, float] | None = None
    for s in workout_exercise.sets:
        if not s.is_pr_candidate:
            continue
        estimate = s.estimated_one_rep_max
        if best is None or estimate > best[1]:
            best = (s, estimate)
    return best


def current_by_exercise(records: list[PersonalRecord]) -> dict[str, PersonalRecord]:
    """Highest record per exercise id; superseded records are ignored."""
    current: dict[str, PersonalRecord] = {}
    for pr in records:
        existing = current.get(pr.exercise_id)
        if existing is None or pr.estimated_one_rep_max > existing.estimated_one_rep_max:
            current[pr.exercise_id] = pr
    return current


class PRDetector:
    """Derives PersonalRecords from workouts against a RecordStore. Store errors propagate unchanged."""

    def __init__(self, records: RecordStore):
        self.records = records

    def current_record(self, exercise_id: str) -> PersonalRecord | None:
        return current_by_exercise(self.records.fetch_all_personal_records()).get(exercise_id)

    def current_records(self, limit: int | None = None) -> list[PersonalRecord]:
        """One current record per exercise, highest estimate first."""
        current = sorted(
            current_by_exercise(self.records.fetch_all_personal_records()).values(),
            key=lambda pr: (-pr.estimated_one_rep_max, pr.exercise_name.lower()),
        )
        return current if limit is None else current[: max(0, limit)]

    def detect(self, workout: Workout) -> list[PersonalRecord]:
        """Save and return a new record for every exercise whose best set beats its current record."""
        if workout.workout_type != "lifting":
            return []
        current = current_by_exercise(self.records.fetch_all_personal_records())
        new_records: list[PersonalRecord] = []
        for workout_exercise in workout.exercises:
            found = best_set(workout_exercise)
            if found is None:
                continue
            s, estimate = found
            exercise = workout_exercise.exercise
            existing = current.get(exercise.id)
            if existing is not None and estimate <= existing.estimated_one_rep_max:
                logger.debug(
                    f"Not a new PR for {exercise.name}: {estimate:.1f}kg (current {existing.estimated_one_rep_max:.1f}kg)"
                )
                continue
            pr = PersonalRecord(
                exercise_id=exercise.id,
                exercise_name=exercise.name,
                estimated_one_rep_max=estimate,
                actual_weight=s.weight,
                reps=s.reps,
                date=workout.date,
                workout_id=workout.id,
            )
            self.records.save_personal_record(pr)
            current[exercise.id] = pr
            new_records.append(pr)
            logger.info(f"New PR: {exercise.name} {estimate:.1f}kg ({s.reps} x {s.weight}kg)")
        return new_records

    def recalculate(self, workout: Workout) -> list[PersonalRecord]:
        """Drop records attributed to this workout, then detect again (after an edit)."""
        self.records.delete_personal_records(workout.id)
        return self.detect(workout)

    def recalculate_all(self, workouts: list[Workout]) -> list[PersonalRecord]:
        """
        Delete every stored record and replay workouts oldest first.
        The input is sorted by date (stable) so the result does not depend on caller order.
        """
        for pr in self.records.fetch_all_personal_records():
            self.records.delete_personal_record(pr)
        ordered = sorted(workouts, key=lambda w: w.date)
        if [w.id for w in ordered] != [w.id for w in workouts]:
            logger.debug("recalculate_all received workouts out of date order; replaying chronologically")
        new_records: list[PersonalRecord] = []
        for workout in ordered:
            new_records.extend(self.detect(workout))
        return new_records


def recalculate_prs_impl(payload: RecalculatePrsInput, storage: Storage) -> RecalculatePrsOutput:
    detector = PRDetector(storage)
    if payload.workout_id:
        workout = storage.fetch_workout(payload.workout_id)
        if workout is None:
            return RecalculatePrsOutput(status="error", message=f"workout not found: {payload.workout_id}")
        return RecalculatePrsOutput(status="ok", new_records=detector.recalculate(workout))
    return RecalculatePrsOutput(status="ok", new_records=detector.recalculate_all(storage.fetch_workouts()))


def personal_records_impl(payload: PersonalRecordsInput, records: RecordStore) -> PersonalRecordsOutput:
    limit = payload.limit if payload.limit is not None else 20
    current = PRDetector(records).current_records(limit=max(0, min(limit, 100)))
    return PersonalRecordsOutput(count=len(current), records=current)
