"""
Calendar sync for confirmed classes: write an .ics file with one event per class meeting.

- Weeks run from the Monday of the first teaching week for `weeks` weeks.
- Times are floating local times by default so calendar apps show exactly what the schedule says.
- A class without days or times cannot be placed on a calendar and is skipped with a warning.
- A class whose start is not before its end fails the whole batch; nothing is written.
"""

import re
from datetime import date, datetime, timedelta, timezone

from ics import Calendar, Event

from .config import CALENDAR_TZ, CALENDAR_TZ_MODE, TERM_WEEKS
from .errors import CommitError
from .logging_config import get_logger
from .models import ParsedClass

logger = get_logger(__name__)

DAY_TO_IDX = {"M": 0, "T": 1, "W": 2, "Th": 3, "F": 4}


def to_domain(name: str) -> str:
    s = (name or "").strip().lower().replace("@", "-")
    s = re.sub(r"[^a-z0-9.-]+", "-", s)
    s = re.sub(r"-+", "-", s).strip("-")
    return s or "schedule.local"


def describe(cls: ParsedClass) -> str:
    # Single line; some importers choke on raw newlines in DESCRIPTION
    parts = []
    if cls.instructor:
        parts.append(f"Instructor: {cls.instructor}")
    if cls.credits is not None:
        parts.append(f"Credits: {cls.credits:g}")
    if cls.semester:
        parts.append(cls.semester)
    if cls.notes:
        parts.append(" ".join(cls.notes.split()))
    return " | ".join(parts)


def check_schedulable(classes: list[ParsedClass]) -> list[ParsedClass]:
    bad = [c.course_code for c in classes if c.start_time and c.end_time and c.start_time >= c.end_time]
    if bad:
        raise CommitError(f"Fix the start/end times for: {', '.join(bad)}.")
    ready = []
    for cls in classes:
        if not cls.days or not cls.start_time or not cls.end_time:
            logger.warning("%s has no meeting days/times; not added to the calendar", cls.course_code)
            continue
        ready.append(cls)
    if classes and not ready:
        raise CommitError("None of the classes have meeting days and times yet.")
    return ready


def fix_ics_content(text: str, tz: str, tz_mode: str, cal_name: str | None, cal_desc: str | None) -> str:
    """Add calendar headers and a DTSTAMP per event, apply the time zone mode and use CRLF."""
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    present = {ln.split(":", 1)[0] for ln in lines if ":" in ln}
    headers = []
    for key, value in (
        ("CALSCALE", "GREGORIAN"),
        ("METHOD", "PUBLISH"),
        ("X-WR-CALNAME", cal_name),
        ("X-WR-CALDESC", cal_desc),
        ("X-WR-TIMEZONE", tz),
    ):
        if value and key not in present:
            headers.append(f"{key}:{value}")

    anchor = "VERSION:" if any(ln.startswith("VERSION:") for ln in lines) else "BEGIN:VCALENDAR"
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    out: list[str] = []
    event: list[str] | None = None
    for ln in lines:
        if not ln:
            continue
        if ln == "BEGIN:VEVENT":
            event = [ln]
            continue
        if event is None:
            out.append(ln)
            if headers and ln.startswith(anchor):
                out.extend(headers)
                headers = []
            continue
        if ln.startswith(("DTSTART", "DTEND")):
            key_params, val = ln.split(":", 1)
            key = key_params.split(";", 1)[0]
            val = val.rstrip("Z")
            if tz_mode == "tzid":
                ln = f"{key};TZID={tz}:{val}"
            else:
                # floating (and utc, which keeps the wall-clock digits) drop TZID and the Z suffix
                ln = f"{key}:{val}"
        if ln == "END:VEVENT":
            if not any(x.startswith("DTSTAMP:") for x in event):
                event.insert(1, f"DTSTAMP:{stamp}")
            out.extend(event + [ln])
            event = None
            continue
        event.append(ln)
    return "\r\n".join(out) + "\r\n"


def build_ics(
    classes: list[ParsedClass],
    first_monday: date,
    output_path: str,
    weeks: int = TERM_WEEKS,
    tz: str = CALENDAR_TZ,
    tz_mode: str = CALENDAR_TZ_MODE,
    cal_name: str | None = None,
    cal_desc: str | None = None,
    uid_domain: str | None = None,
) -> int:
    """Write the calendar and return the number of events."""
    tz_mode = (tz_mode or "floating").lower()
    if tz_mode not in ("floating", "tzid", "utc"):
        tz_mode = "floating"
    ready = check_schedulable(classes)

    cal = Calendar()
    uid_dom = uid_domain or to_domain(cal_name or "class-schedule")
    uid_counter = 1
    for cls in ready:
        title = f"{cls.course_code} {cls.course_name}".strip()
        for w in range(weeks):
            for day in cls.days:
                class_date = first_monday + timedelta(days=DAY_TO_IDX[day], weeks=w)
                ev = Event()
                ev.name = title
                ev.begin = datetime.combine(class_date, cls.start_time)
                ev.end = datetime.combine(class_date, cls.end_time)
                ev.location = cls.location or "TBA"
                ev.description = describe(cls)
                ev.uid = f"class-{uid_counter:04d}@{uid_dom}"
                uid_counter += 1
                cal.events.add(ev)

    content = fix_ics_content("".join(cal.serialize_iter()), tz, tz_mode, cal_name, cal_desc)
    try:
        with open(output_path, "wb") as f:
            f.write(content.encode("utf-8"))
    except OSError as exc:
        raise CommitError(f"Could not write {output_path}: {exc}") from exc
    logger.info("calendar exported: %s (events: %d)", output_path, len(cal.events))
    return len(cal.events)


class IcsCalendarSync:
    """Commit target for ReviewSession.confirm: writes the confirmed classes to an .ics file."""

    def __init__(self, output_path: str, first_monday: date, weeks: int = TERM_WEEKS, **options):
        self.output_path = output_path
        self.first_monday = first_monday
        self.weeks = weeks
        self.options = options
        self.last_event_count = 0

    def __call__(self, classes: list[ParsedClass]) -> None:
        self.last_event_count = build_ics(classes, self.first_monday, self.output_path, self.weeks, **self.options)
