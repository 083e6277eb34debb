"""
Human review between parsing and commit.

States: IDLE -> REVIEWING (candidates loaded) -> EDITING one candidate <-> REVIEWING
        -> COMMITTING (confirm) -> IDLE on success; back to REVIEWING if the commit fails.
cancel() returns to IDLE from anywhere and drops the candidates.
"""

from dataclasses import fields
from datetime import date
from enum import Enum

from .errors import CommitError, NoClassesFoundError, ReviewStateError, ScheduleImportError
from .logging_config import get_logger
from .models import ParsedClass
from .normalize import (
    DAY_NAMES,
    assign_color,
    canonical_days,
    coerce_time,
    finalize_class,
    infer_semester,
    normalize_course_code,
    semester_options,
    split_location,
)
from .parser import decode_days

logger = get_logger(__name__)

EDITABLE_FIELDS = {f.name for f in fields(ParsedClass)} - {"id"}


class ReviewState(Enum):
    IDLE = "idle"
    REVIEWING = "reviewing"
    EDITING = "editing"
    COMMITTING = "committing"


def confirm_label(count: int) -> str:
    return f"Add {count} Class{'es' if count != 1 else ''}"


class ReviewSession:
    def __init__(self, today: date | None = None):
        self.today = today
        self.state = ReviewState.IDLE
        self.candidates: list[ParsedClass] = []
        self.editing_index: int | None = None

    # -- loading / leaving -------------------------------------------------

    def load(self, candidates: list[ParsedClass]) -> None:
        self._require(ReviewState.IDLE)
        if not candidates:
            raise NoClassesFoundError()
        self.candidates = list(candidates)
        for cls in self.candidates:
            # colors are fixed once shown; only fill in the missing ones
            if not cls.color:
                cls.color = assign_color()
        self.editing_index = None
        self.state = ReviewState.REVIEWING
        logger.debug("review started with %d candidate(s)", len(self.candidates))

    def cancel(self) -> None:
        logger.debug("review cancelled, %d candidate(s) discarded", len(self.candidates))
        self.candidates = []
        self.editing_index = None
        self.state = ReviewState.IDLE

    # -- per-candidate editing ---------------------------------------------

    def begin_edit(self, index: int) -> ParsedClass:
        self._require(ReviewState.REVIEWING)
        cls = self._get(index)
        self.editing_index = index
        self.state = ReviewState.EDITING
        return cls

    def finish_edit(self) -> ParsedClass:
        self._require(ReviewState.EDITING)
        cls = self.candidates[self.editing_index]
        cls.days = canonical_days(cls.days)
        cls.course_code = normalize_course_code(cls.course_code)
        self.editing_index = None
        self.state = ReviewState.REVIEWING
        return cls

    @property
    def editing(self) -> ParsedClass | None:
        if self.editing_index is None:
            return None
        return self.candidates[self.editing_index]

    def set_field(self, name: str, value) -> None:
        self._require(ReviewState.EDITING)
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown field: {name}")
        cls = self.candidates[self.editing_index]
        if name == "course_code":
            value = normalize_course_code(str(value))
            if not value:
                raise ValueError("Course code cannot be empty")
        elif name in ("start_time", "end_time"):
            value = coerce_time(value)
        elif name == "days":
            # "TTh" as typed, or an iterable of day tokens
            value = decode_days(value) if isinstance(value, str) else canonical_days(value)
        elif name == "credits":
            value = None if value in (None, "") else float(value)
            if value is not None and value < 0:
                raise ValueError("Credits cannot be negative")
        elif name == "semester":
            options = semester_options(self.today)
            if value not in options and value != cls.semester:
                raise ValueError(f"Semester must be one of: {', '.join(options)}")
        elif value is None:
            value = ""
        if name == "location":
            # building/room follow the edited location
            building, room = split_location(value)
            cls.building, cls.room = (building if room else ""), room
        setattr(cls, name, value)

    def toggle_day(self, day: str) -> list[str]:
        self._require(ReviewState.EDITING)
        if day not in DAY_NAMES:
            raise ValueError(f"Unknown day: {day!r}")
        cls = self.candidates[self.editing_index]
        if day in cls.days:
            cls.days = [d for d in cls.days if d != day]
        else:
            cls.days = canonical_days(cls.days + [day])
        return cls.days

    # -- working set ---------------------------------------------------------

    def delete(self, index: int) -> ParsedClass:
        self._require(ReviewState.REVIEWING, ReviewState.EDITING)
        removed = self.candidates.pop(self._index(index))
        if self.editing_index is not None:
            if self.editing_index == index:
                self.editing_index = None
                self.state = ReviewState.REVIEWING
            elif self.editing_index > index:
                self.editing_index -= 1
        return removed

    def add_candidate(self, course_code: str, **values) -> ParsedClass:
        self._require(ReviewState.REVIEWING)
        code = normalize_course_code(course_code)
        if not code:
            raise ValueError("Course code cannot be empty")
        cls = ParsedClass(
            course_code=code,
            semester=infer_semester(self.today),
            color=assign_color(),
        )
        self.candidates.append(cls)
        self.editing_index = len(self.candidates) - 1
        self.state = ReviewState.EDITING
        try:
            for name, value in values.items():
                self.set_field(name, value)
        except (ValueError, TypeError):
            self.candidates.pop()
            self.editing_index = None
            self.state = ReviewState.REVIEWING
            raise
        self.finish_edit()
        return cls

    @property
    def can_confirm(self) -> bool:
        return self.state in (ReviewState.REVIEWING, ReviewState.EDITING) and bool(self.candidates)

    @property
    def confirm_label(self) -> str:
        return confirm_label(len(self.candidates))

    def confirm(self, sync) -> list[ParsedClass]:
        """Hand the finalized set to `sync`. On failure the set is kept for another try."""
        if self.state == ReviewState.EDITING:
            self.finish_edit()
        self._require(ReviewState.REVIEWING)
        if not self.candidates:
            raise ReviewStateError("Nothing to add.")
        final = [finalize_class(c) for c in self.candidates]
        self.state = ReviewState.COMMITTING
        try:
            sync(final)
        except Exception as exc:
            self.state = ReviewState.REVIEWING
            logger.warning("commit failed: %s", exc)
            if isinstance(exc, ScheduleImportError):
                raise CommitError(exc.message) from exc
            raise CommitError(f"Failed to save classes: {exc}") from exc
        logger.info("committed %d class(es)", len(final))
        self.candidates = []
        self.editing_index = None
        self.state = ReviewState.IDLE
        return final

    # -- helpers -----------------------------------------------------------

    def _require(self, *states: ReviewState) -> None:
        if self.state not in states:
            expected = " or ".join(s.value for s in states)
            raise ReviewStateError(f"Review is {self.state.value}, expected {expected}.")

    def _index(self, index: int) -> int:
        if not 0 <= index < len(self.candidates):
            raise IndexError(f"No class at position {index}")
        return index

    def _get(self, index: int) -> ParsedClass:
        return self.candidates[self._index(index)]
