"""
Canonicalize parsed class fields: day order, clock times, semester label, display color, location.
"""

import random
import re
from dataclasses import replace
from datetime import date, datetime, time

from .config import CLASS_COLORS
from .models import WEEKDAYS, ParsedClass, RawClassEntry

DAY_NAMES = {
    "M": "Monday",
    "T": "Tuesday",
    "W": "Wednesday",
    "Th": "Thursday",
    "F": "Friday",
}
SEASONS = ["Spring", "Summer", "Fall"]

_CLOCK_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*([AaPp])?\.?\s*(?:[Mm]\.?)?$")
SEMESTER_RE = re.compile(r"\b(Spring|Summer|Fall)\s*'?(\d{4})?\b", re.IGNORECASE)


def canonical_days(days) -> list[str]:
    out = set()
    for d in days:
        if d not in DAY_NAMES:
            raise ValueError(f"Unknown day: {d!r}")
        out.add(d)
    return [d for d in WEEKDAYS if d in out]


def format_days_display(days: list[str]) -> str:
    return "".join(canonical_days(days))


def day_name(abbrev: str) -> str:
    return DAY_NAMES.get(abbrev, abbrev)


def parse_clock(text: str) -> time | None:
    """Parse '9:30AM', '9:30 p.m.', '13:05' or '9' into a time; None when it is not a clock time."""
    s = (text or "").strip()
    m = _CLOCK_RE.match(s)
    if not m:
        return None
    hours = int(m.group(1))
    minutes = int(m.group(2) or 0)
    meridiem = (m.group(3) or "").upper()
    if minutes > 59:
        return None
    if meridiem:
        if not 1 <= hours <= 12:
            return None
        if meridiem == "P" and hours != 12:
            hours += 12
        elif meridiem == "A" and hours == 12:
            hours = 0
    elif hours > 23:
        return None
    return time(hours, minutes)


def has_meridiem(text: str) -> bool:
    return bool(re.search(r"[AaPp]\.?\s*[Mm]\.?\s*$", (text or "").strip()))


def parse_time_range(start_text: str, end_text: str) -> tuple[time | None, time | None]:
    start = parse_clock(start_text) if start_text else None
    end = parse_clock(end_text) if end_text else None
    # "9:30 - 10:45AM": the start borrows the end's meridiem unless that puts it after the end
    if start_text and end_text and not has_meridiem(start_text) and has_meridiem(end_text):
        suffix = re.search(r"([AaPp])\.?\s*[Mm]\.?\s*$", end_text.strip()).group(1)
        borrowed = parse_clock(f"{start_text.strip()}{suffix}M")
        if borrowed is not None and end is not None:
            if borrowed < end:
                start = borrowed
            else:
                other = "A" if suffix.upper() == "P" else "P"
                flipped = parse_clock(f"{start_text.strip()}{other}M")
                start = flipped if flipped is not None and flipped < end else borrowed
    return start, end


def format_time_display(value: time | None) -> str:
    if value is None:
        return ""
    hours = value.hour % 12 or 12
    period = "PM" if value.hour >= 12 else "AM"
    return f"{hours}:{value.minute:02d} {period}"


def infer_semester(today: date | None = None) -> str:
    """Best-guess current term: Jan-May Spring, Jun-Aug Summer, Sep-Dec Fall."""
    today = today or date.today()
    if today.month <= 5:
        season = "Spring"
    elif today.month <= 8:
        season = "Summer"
    else:
        season = "Fall"
    return f"{season} {today.year}"


def semester_options(today: date | None = None, before: int = 1, after: int = 3) -> list[str]:
    current = infer_semester(today)
    season, year = current.split(" ")
    idx = int(year) * len(SEASONS) + SEASONS.index(season)
    return [
        f"{SEASONS[i % len(SEASONS)]} {i // len(SEASONS)}"
        for i in range(idx - before, idx + after + 1)
    ]


def resolve_semester(text: str, today: date | None = None) -> str:
    m = SEMESTER_RE.search(text or "")
    if not m:
        return infer_semester(today)
    year = m.group(2) or str((today or date.today()).year)
    return f"{m.group(1).capitalize()} {year}"


def assign_color(rng: random.Random | None = None, palette: list[str] | None = None) -> str:
    return (rng or random).choice(palette or CLASS_COLORS)


def split_location(location: str) -> tuple[str, str]:
    """'HAL 101' -> ('HAL', '101'); anything without a trailing room number stays whole."""
    cleaned = " ".join((location or "").split())
    m = re.match(r"^([A-Za-z][A-Za-z\s.&'-]*?)\s*(\d+[A-Za-z]?)$", cleaned)
    if m:
        return m.group(1).strip(), m.group(2)
    return cleaned, ""


def join_location(building: str, room: str, location: str = "") -> str:
    building, room = (building or "").strip(), (room or "").strip()
    if building and room:
        return f"{building} {room}"
    return (location or "").strip() or building or room


def normalize_course_code(code: str) -> str:
    return " ".join((code or "").upper().split())


def parse_credits(text: str) -> float | None:
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if value >= 0 else None


def normalize_entry(raw: RawClassEntry, today: date | None = None, rng: random.Random | None = None) -> ParsedClass:
    start, end = parse_time_range(raw.start_text, raw.end_text)
    building, room = split_location(raw.location_text)
    return ParsedClass(
        course_code=normalize_course_code(raw.course_code),
        course_name=" ".join(raw.course_name.split()),
        instructor=" ".join(raw.instructor.split()),
        days=canonical_days(raw.days),
        start_time=start,
        end_time=end,
        location=" ".join(raw.location_text.split()),
        building=building if room else "",
        room=room,
        credits=parse_credits(raw.credits_text),
        semester=resolve_semester(raw.semester_text, today),
        color=assign_color(rng),
    )


def finalize_class(cls: ParsedClass) -> ParsedClass:
    """Canonical copy of an edited class, ready to commit. The color is kept as is."""
    return replace(
        cls,
        course_code=normalize_course_code(cls.course_code),
        course_name=cls.course_name.strip(),
        instructor=cls.instructor.strip(),
        days=canonical_days(cls.days),
        location=join_location(cls.building, cls.room, cls.location),
        notes=cls.notes.strip(),
        color=cls.color or assign_color(),
    )


def coerce_time(value) -> time | None:
    """Accept a time, '' / None, or text in any format parse_clock understands."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, datetime):
        return value.time()
    text = str(value).strip()
    if not text:
        return None
    parsed = parse_clock(text)
    if parsed is None:
        raise ValueError(f"Not a clock time: {value!r}")
    return parsed
