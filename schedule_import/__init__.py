"""Import class schedules (PDF or pasted text) into reviewed, calendar-ready class records."""

from .errors import (
    CommitError,
    DocumentReadError,
    ExtractionError,
    NoClassesFoundError,
    ReviewStateError,
    ScheduleImportError,
    UnsupportedInputError,
)
from .importer import import_document, import_file, import_text
from .models import ParsedClass, PositionedTextFragment, ReconstructedDocument
from .parser import parse_schedule_text
from .review import ReviewSession, ReviewState

__version__ = "0.1.0"
