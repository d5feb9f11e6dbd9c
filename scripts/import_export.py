#!/usr/bin/env python3
"""
Import workout export CSV files into a local ironlog database and print what happened.
(no MCP server needed). Usage: python scripts/import_export.py FILE [FILE ...]
"""
from __future__ import annotations

import sys
from pathlib import Path

# Project root = parent of scripts/
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ironlog.config import configure_logging
from ironlog.errors import WorkoutImportError
from ironlog.ingest import import_csv_file
from ironlog.records import PRDetector
from ironlog.storage import Storage

DEFAULT_DB = ROOT / "ironlog_script.db"


def main() -> None:
    paths = [Path(p) for p in sys.argv[1:]]
    if not paths:
        print(__doc__.strip())
        sys.exit(1)

    configure_logging("WARNING")
    storage = Storage(DEFAULT_DB)
    storage.seed_catalog()
    detector = PRDetector(storage)

    for path in paths:
        print(f"\n{'='*60}")
        print(f"FILE: {path.name}")
        print("=" * 60)

        try:
            result = import_csv_file(path, storage)
        except WorkoutImportError as e:
            print(f"Status: error ({e})")
            continue

        new_records = []
        for workout in sorted(result.workouts, key=lambda w: w.date):
            storage.save_workout(workout)
            new_records.extend(detector.detect(workout))

        print("Status: ok")
        print(f"Rows: total={result.total_rows}  skipped={result.skipped_rows}  outliers fixed={result.fixed_outliers}")
        print(f"Workouts: {len(result.workouts)}")
        for workout in result.workouts[:3]:
            print(f"  {workout.date:%Y-%m-%d %H:%M}  {workout.title}  exercises={len(workout.exercises)}")
            for ex in workout.exercises[:3]:
                sets_str = ", ".join(f"{s.weight:g}x{s.reps}" for s in ex.sets[:5])
                print(f"    {ex.exercise.name}: {sets_str}")
        if result.issues:
            print("Issues:")
            for i in result.issues:
                print(f"  - [{i.severity}] {i.type}: {i.message}")
        if new_records:
            print("New PRs:")
            for pr in new_records:
                print(f"  {pr.exercise_name}: {pr.estimated_one_rep_max:.1f}kg ({pr.reps} x {pr.actual_weight:g}kg)")
        print()

    storage.close()
    print(f"DB saved to {DEFAULT_DB}")


if __name__ == "__main__":
    main()
