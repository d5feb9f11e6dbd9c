"""Errors that abort a whole import. Row-local problems are reported as IssueRecords instead."""

from __future__ import annotations


class WorkoutImportError(Exception):
    """Base for fatal import errors; str(err) is suitable to show the user."""

    message = "The workout file could not be imported."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class FileAccessError(WorkoutImportError):
    message = "Could not access the file. Please try again."


class EmptyFileError(WorkoutImportError):
    message = "The CSV file is empty."


class InvalidHeaderError(WorkoutImportError):
    message = "Invalid CSV format. Expected standard workout export format."


class MissingRequiredColumnsError(InvalidHeaderError):
    def __init__(self, missing: list[str]):
        self.missing = sorted(missing)
        super().__init__(
            f"Invalid CSV format. Missing required columns: {', '.join(self.missing)}."
        )
