"""Error taxonomy for schedule import.

Every error carries a short user-facing message; front ends show it and keep going.
"""

PASTE_HINT = "Try pasting your schedule text instead."


class ScheduleImportError(Exception):
    """Base class for recoverable import/review failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedInputError(ScheduleImportError):
    pass


class ExtractionError(ScheduleImportError):
    def __init__(self, message: str = "Failed to extract text from PDF."):
        if PASTE_HINT not in message:
            message = f"{message} {PASTE_HINT}"
        super().__init__(message)


class DocumentReadError(ExtractionError):
    pass


class NoClassesFoundError(ScheduleImportError):
    def __init__(self, message: str = 'No classes found. Make sure to include course codes like "BUAD 123".'):
        super().__init__(message)


class CommitError(ScheduleImportError):
    pass


class ReviewStateError(ScheduleImportError):
    pass
