"""
Data models for schedule import.

- PositionedTextFragment: one text run on a PDF page (input to the layout reconstructor).
- ReconstructedDocument: one page's fragments in row-major reading order.
- RawClassEntry: the strings the parser pulled out of one course block.
- ParsedClass: a candidate (or committed) class record.
"""

import uuid
from dataclasses import dataclass, field
from datetime import time

from .config import COLUMN_SEPARATOR

WEEKDAYS = ["M", "T", "W", "Th", "F"]


def new_class_id() -> str:
    return f"class_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class PositionedTextFragment:
    text: str
    x: float
    y: float  # PDF space: grows toward the top of the page


@dataclass
class ReconstructedDocument:
    rows: list[list[str]] = field(default_factory=list)

    def to_text(self, separator: str = COLUMN_SEPARATOR) -> str:
        return "\n".join(separator.join(row) for row in self.rows)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class RawClassEntry:
    course_code: str
    course_name: str = ""
    days: list[str] = field(default_factory=list)  # as written, not yet canonical
    start_text: str = ""
    end_text: str = ""
    location_text: str = ""
    instructor: str = ""
    credits_text: str = ""
    semester_text: str = ""
    lines: list[str] = field(default_factory=list)


@dataclass
class ParsedClass:
    course_code: str
    course_name: str = ""
    instructor: str = ""
    days: list[str] = field(default_factory=list)
    start_time: time | None = None
    end_time: time | None = None
    location: str = ""
    building: str = ""
    room: str = ""
    credits: float | None = None
    semester: str = ""
    color: str = ""
    notes: str = ""
    id: str = field(default_factory=new_class_id)

    def problems(self) -> list[str]:
        """Issues a reviewer should fix before committing. Empty when the record looks sane."""
        issues = []
        if not self.course_code.strip():
            issues.append("missing course code")
        if not self.course_name.strip():
            issues.append("missing course name")
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            issues.append("start time is not before end time")
        if self.start_time and not self.end_time:
            issues.append("missing end time")
        if self.credits is not None and self.credits < 0:
            issues.append("credits cannot be negative")
        return issues

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "course_code": self.course_code,
            "course_name": self.course_name,
            "instructor": self.instructor,
            "days": list(self.days),
            "start_time": self.start_time.strftime("%H:%M") if self.start_time else "",
            "end_time": self.end_time.strftime("%H:%M") if self.end_time else "",
            "location": self.location,
            "building": self.building,
            "room": self.room,
            "credits": self.credits,
            "semester": self.semester,
            "color": self.color,
            "notes": self.notes,
        }
