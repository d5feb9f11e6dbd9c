"""Brzycki estimate and personal-record detection."""

from datetime import datetime

import pytest

from conftest import MemoryRecords, entry
from ironlog.models import Workout, WorkoutExercise, WorkoutSet
from ironlog.records import PRDetector, best_set, e1rm_brzycki

BENCH = entry("Bench Press")
SQUAT = entry("Squat", muscles=["quads"])


def _workout(day: int, *exercises: tuple, workout_type: str = "lifting") -> Workout:
    """exercises: (entry, [(weight, reps), ...])"""
    return Workout(
        date=datetime(2025, 2, day, 18, 0),
        workout_type=workout_type,
        exercises=[
            WorkoutExercise(exercise=ex, order=i, sets=[WorkoutSet(weight=w, reps=r) for w, r in sets])
            for i, (ex, sets) in enumerate(exercises)
        ],
    )


def test_brzycki_values() -> None:
    assert e1rm_brzycki(100, 1) == pytest.approx(100.0)
    assert e1rm_brzycki(85, 5) == pytest.approx(95.625)
    assert e1rm_brzycki(100, 36) == pytest.approx(3600.0)


@pytest.mark.parametrize("weight,reps", [(100, 37), (100, 40), (0, 5), (-10, 5), (100, 0)])
def test_brzycki_undefined(weight: float, reps: int) -> None:
    assert e1rm_brzycki(weight, reps) is None


def test_set_candidate_properties() -> None:
    assert WorkoutSet(weight=100, reps=5).is_pr_candidate
    assert not WorkoutSet(weight=0, reps=12).is_pr_candidate
    assert not WorkoutSet(weight=100, reps=5, is_completed=False).is_pr_candidate
    assert WorkoutSet(weight=85, reps=5).estimated_one_rep_max == pytest.approx(95.625)


def test_corrected_bench_session_picks_85_for_5(records: MemoryRecords) -> None:
    workout = _workout(4, (BENCH, [(80, 5), (82, 5), (85, 5), (80, 5)]))
    new = PRDetector(records).detect(workout)
    assert len(new) == 1
    pr = new[0]
    assert (pr.actual_weight, pr.reps) == (85, 5)
    assert pr.estimated_one_rep_max == pytest.approx(95.625)
    assert pr.exercise_id == BENCH.id
    assert pr.workout_id == workout.id
    assert pr.date == workout.date
    assert records.records == [pr]


def test_best_set_ties_go_to_first_set() -> None:
    first = WorkoutSet(weight=100, reps=1)
    second = WorkoutSet(weight=100, reps=1)
    found = best_set(WorkoutExercise(exercise=BENCH, order=0, sets=[first, second]))
    assert found is not None
    assert found[0] is first


def test_best_set_ignores_uncompleted_and_bodyweight() -> None:
    ex = WorkoutExercise(
        exercise=BENCH,
        order=0,
        sets=[WorkoutSet(weight=200, reps=1, is_completed=False), WorkoutSet(weight=0, reps=20)],
    )
    assert best_set(ex) is None


def test_record_only_when_strictly_greater(records: MemoryRecords) -> None:
    detector = PRDetector(records)
    assert len(detector.detect(_workout(4, (BENCH, [(100, 5)])))) == 1
    assert detector.detect(_workout(5, (BENCH, [(100, 5)]))) == []
    assert detector.detect(_workout(6, (BENCH, [(90, 5)]))) == []
    better = detector.detect(_workout(7, (BENCH, [(102.5, 5)])))
    assert [pr.actual_weight for pr in better] == [102.5]
    assert detector.current_record(BENCH.id).actual_weight == 102.5


def test_one_record_per_exercise(records: MemoryRecords) -> None:
    new = PRDetector(records).detect(_workout(4, (BENCH, [(80, 5)]), (SQUAT, [(120, 5)])))
    assert sorted(pr.exercise_name for pr in new) == ["Bench Press", "Squat"]


def test_non_lifting_workout_yields_nothing(records: MemoryRecords) -> None:
    workout = _workout(4, (BENCH, [(100, 5)]), workout_type="cardio")
    assert PRDetector(records).detect(workout) == []
    assert records.records == []


def test_recalculate_does_not_duplicate(records: MemoryRecords) -> None:
    detector = PRDetector(records)
    workout = _workout(4, (BENCH, [(100, 5)]))
    detector.detect(workout)
    again = detector.recalculate(workout)
    assert len(again) == 1
    assert len(records.records) == 1


def test_recalculate_after_edit_lowers_record(records: MemoryRecords) -> None:
    detector = PRDetector(records)
    workout = _workout(4, (BENCH, [(100, 5)]))
    detector.detect(workout)
    workout.exercises[0].sets[0].weight = 90
    detector.recalculate(workout)
    assert [pr.actual_weight for pr in records.records] == [90]


def test_recalculate_all_is_chronological_and_order_independent(records: MemoryRecords) -> None:
    w1 = _workout(1, (BENCH, [(80, 5)]))
    w2 = _workout(2, (BENCH, [(90, 5)]))
    w3 = _workout(3, (BENCH, [(85, 5)]))
    detector = PRDetector(records)

    in_order = detector.recalculate_all([w1, w2, w3])
    assert [pr.actual_weight for pr in in_order] == [80, 90]

    shuffled = detector.recalculate_all([w3, w1, w2])
    assert [pr.actual_weight for pr in shuffled] == [80, 90]
    assert len(records.records) == 2
    estimates = [pr.estimated_one_rep_max for pr in records.records]
    assert estimates == sorted(estimates)


def test_current_records_sorted_and_limited(records: MemoryRecords) -> None:
    detector = PRDetector(records)
    detector.recalculate_all([
        _workout(1, (BENCH, [(80, 5)]), (SQUAT, [(120, 5)])),
        _workout(2, (BENCH, [(90, 5)])),
    ])
    current = detector.current_records()
    assert [(pr.exercise_name, pr.actual_weight) for pr in current] == [("Squat", 120), ("Bench Press", 90)]
    assert [pr.exercise_name for pr in detector.current_records(limit=1)] == ["Squat"]
    assert detector.current_record("ex_missing") is None
