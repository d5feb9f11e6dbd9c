"""MCP server: ironlog.import_csv, ironlog.export_csv, ironlog.recalculate_prs, ironlog.personal_records."""

from __future__ import annotations

import json

from fastmcp import FastMCP

from .config import configure_logging, get_settings
from .ingest import export_csv_impl, import_csv_impl
from .models import (
    ExportCsvInput,
    ImportCsvInput,
    PersonalRecordsInput,
    RecalculatePrsInput,
)
from .records import personal_records_impl, recalculate_prs_impl
from .storage import Storage

_settings = get_settings()
_storage = Storage(_settings.db_path)

mcp = FastMCP(name="ironlog")


@mcp.tool(name="ironlog.import_csv")
def ironlog_import_csv(payload: dict) -> dict:
    """
    Import a workout-log CSV export (title,start_time,end_time,exercise_title,set_index,weight_kg,reps,...).
    Stores the workouts, replays PR detection oldest first, and returns counts, new records and row issues.
    """
    inp = ImportCsvInput.model_validate(payload)
    result = import_csv_impl(inp, storage=_storage, locales=_settings.date_locales)
    return result.model_dump(mode="json")


@mcp.tool(name="ironlog.export_csv")
def ironlog_export_csv(payload: dict) -> str:
    """
    Export stored lifting workouts in the same CSV format the importer accepts (newest first).
    Optional `range`: { start, end } (YYYY-MM-DD, inclusive).
    """
    inp = ExportCsvInput.model_validate(payload or {})
    return export_csv_impl(inp, storage=_storage)


@mcp.tool(name="ironlog.recalculate_prs")
def ironlog_recalculate_prs(payload: dict) -> dict:
    """
    Rebuild all personal records from stored workouts (oldest first). Pass `workout_id` to only
    recompute the records of one edited workout.
    """
    inp = RecalculatePrsInput.model_validate(payload or {})
    return recalculate_prs_impl(inp, storage=_storage).model_dump(mode="json")


@mcp.tool(name="ironlog.personal_records")
def ironlog_personal_records(payload: dict) -> dict:
    """Current personal record per exercise, highest estimated one-rep max first. Optional limit (default 20, max 100)."""
    inp = PersonalRecordsInput.model_validate(payload or {})
    return personal_records_impl(inp, records=_storage).model_dump(mode="json")


@mcp.resource("workout://{workout_id}", mime_type="application/json")
def resource_workout(workout_id: str) -> str:
    """Read-only: stored workout JSON."""
    workout = _storage.fetch_workout(workout_id)
    if workout is None:
        return json.dumps({"error": "workout not found", "workout_id": workout_id})
    return workout.model_dump_json(indent=2)


def run() -> None:
    """Run the MCP server with stdio transport (default)."""
    configure_logging()
    mcp.run()


if __name__ == "__main__":
    run()
