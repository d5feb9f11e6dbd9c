"""Resolve free-text exercise names from imports to catalog entries; synthesize custom entries when nothing fits."""

from __future__ import annotations

import re

from loguru import logger

from .models import MAX_EXERCISE_NAME_LENGTH, Equipment, ExerciseCatalogEntry, ExerciseCategory, MuscleGroup
from .normalize import contains_phrase, normalize_exercise_name
from .storage import ExerciseCatalog


class ExerciseResolver:
    """
    Maps an exported exercise name to a catalog entry. Never fails.
    Precedence: exact (case-insensitive) → normalized → containment → new custom entry.
    """

    def __init__(self, catalog: ExerciseCatalog):
        self.catalog = catalog

    def resolve(self, name: str) -> ExerciseCatalogEntry:
        # over-long names are matched and stored by their first MAX_EXERCISE_NAME_LENGTH characters
        key = (name or "").strip()[:MAX_EXERCISE_NAME_LENGTH].rstrip()
        entries = self.catalog.fetch_all_exercises()

        # 1) Exact, case-insensitive
        key_lower = key.lower()
        for entry in entries:
            if entry.name.lower() == key_lower:
                return entry

        # 2) Normalized: qualifiers like "(Barbell)" removed
        normalized = normalize_exercise_name(key)
        for entry in entries:
            if normalize_exercise_name(entry.name) == normalized:
                return entry

        # 3) Containment: "Bench Press (Bar) - Incline" -> "Bench Press"; most specific name wins
        match = find_contained_entry(normalized, entries)
        if match is not None:
            return match

        # 4) Custom entry, persisted so the next import hits rule 1
        entry = synthesize_entry(key or "Unknown Exercise")
        self.catalog.save_exercise(entry)
        logger.debug(
            f"Created custom exercise '{entry.name}' ({entry.category}, {entry.equipment}, {', '.join(entry.muscle_groups)})"
        )
        return entry


def find_contained_entry(normalized: str, entries: list[ExerciseCatalogEntry]) -> ExerciseCatalogEntry | None:
    best: ExerciseCatalogEntry | None = None
    best_len = 0
    for entry in entries:
        entry_norm = normalize_exercise_name(entry.name)
        if len(entry_norm) > best_len and contains_phrase(normalized, entry_norm):
            best = entry
            best_len = len(entry_norm)
    return best


def synthesize_entry(name: str) -> ExerciseCatalogEntry:
    return ExerciseCatalogEntry(
        name=name,
        category=infer_category(name),
        muscle_groups=infer_muscle_groups(name),
        equipment=infer_equipment(name),
        is_custom=True,
    )


# --- Name analysis (keyword heuristics over the lowercased name) ---

def _words(name: str) -> set[str]:
    return set(re.findall(r"\w+", name.lower()))


def _has(name: str, *phrases: str) -> bool:
    lower = name.lower()
    return any(p in lower for p in phrases)


def _has_word(name: str, *words: str) -> bool:
    return bool(_words(name) & set(words))


def _is_bodyweight(name: str) -> bool:
    return _has(name, "bodyweight", "pull up", "pull-up", "pullup", "push up", "push-up", "pushup", "chin up", "barfiks") or _has_word(name, "dip", "dips")


def infer_category(name: str) -> ExerciseCategory:
    if _has(name, "barbell", "bar)", "squat", "deadlift", "bench"):
        return "barbell"
    if _has(name, "dumbbell", "dambıl") or _has_word(name, "db"):
        return "dumbbell"
    if _is_bodyweight(name):
        return "bodyweight"
    if _has(name, "machine", "leg press", "smith"):
        return "machine"
    if _has(name, "cable", "lat pulldown", "pushdown"):
        return "cable"
    if _has(name, "clean", "snatch", "jerk", "koparma"):
        return "weightlifting"
    return "barbell"


def infer_equipment(name: str) -> Equipment:
    if _has(name, "barbell", "bar)"):
        return "barbell"
    if _has(name, "dumbbell", "dambıl") or _has_word(name, "db"):
        return "dumbbell"
    if _has(name, "machine", "smith"):
        return "machine"
    if _has(name, "cable"):
        return "cable"
    if _has(name, "kettlebell") or _has_word(name, "kb"):
        return "kettlebell"
    if _has(name, "band"):
        return "band"
    if _is_bodyweight(name):
        return "none"
    return "barbell"


_MUSCLE_KEYWORDS: list[tuple[MuscleGroup, tuple[str, ...]]] = [
    ("chest", ("bench", "chest", "fly", "flye", "pec")),
    ("back", ("row", "pull", "pulldown", "deadlift", "barfiks", "chin up")),
    ("shoulders", ("shoulder", "overhead", "military", "push press", "z press", "lateral raise", "face pull")),
    ("traps", ("shrug", "trap")),
    ("quads", ("squat", "leg", "lunge", "step up")),
    ("hamstrings", ("deadlift", "romanian", "hamstring", "leg curl", "good morning")),
    ("glutes", ("glute", "hip thrust")),
    ("calves", ("calf", "calves")),
    ("biceps", ("curl", "bicep")),
    ("triceps", ("tricep", "extension", "skull crusher", "pushdown")),
    ("core", ("core", "plank", "crunch", "sit up")),
    ("full_body", ("clean", "snatch", "koparma", "thruster", "burpee")),
]


def infer_muscle_groups(name: str) -> list[MuscleGroup]:
    """Muscle groups hinted by the name, in a fixed order; full_body when nothing matches."""
    groups: list[MuscleGroup] = [g for g, keywords in _MUSCLE_KEYWORDS if _has(name, *keywords)]
    if _has_word(name, "dip", "dips") and "chest" not in groups:
        groups.insert(0, "chest")
    if _has_word(name, "dip", "dips") and "triceps" not in groups:
        groups.append("triceps")
    if _has_word(name, "ab", "abs") and "core" not in groups:
        groups.append("core")
    # leg curls and extensions are not arm work
    if _has(name, "leg curl", "leg extension"):
        groups = [g for g in groups if g not in ("biceps", "triceps")]
    return groups or ["full_body"]
