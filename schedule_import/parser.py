"""
Schedule text → candidate classes.

- Input: free text, one line per row (pasted, read from a .txt, or rebuilt from a PDF page with
  tab-separated columns).
- A line starting with a course code ("BUAD 123", "MATH201") opens a block; the block runs until the
  next course code. Each field has its own rule below and the rules run over the block in order,
  blanking what they matched so later rules do not reuse it.
- Blocks are never merged: two blocks with the same course code give two candidates.
"""

import random
import re
from datetime import date

from .config import COLUMN_SEPARATOR
from .errors import NoClassesFoundError
from .logging_config import get_logger
from .models import ParsedClass, RawClassEntry
from .normalize import SEMESTER_RE, canonical_days, normalize_entry

logger = get_logger(__name__)

COURSE_CODE_RE = re.compile(r"^\s*([A-Z]{2,4})[ \t]*(\d{2,4})(?![A-Za-z0-9])(?!:\d)(?!\.\d)")

DAY_RUN = r"(?:Th|TH|M|T|W|F|R)+"
DAY_TOKEN_RE = re.compile(rf"(?<![A-Za-z0-9]){DAY_RUN}(?:[ ,/]+{DAY_RUN})*(?![A-Za-z0-9])")

_MERIDIEM = r"(?:\s*[AaPp]\.?[Mm]\.?(?![A-Za-z]))"
CLOCK = rf"(?:\d{{1,2}}:\d{{2}}{_MERIDIEM}?|\d{{1,2}}{_MERIDIEM})"
TIME_RANGE_RE = re.compile(rf"(?<![\d:])({CLOCK})\s*(?:-|–|—|\bto\b)\s*({CLOCK})")
SINGLE_TIME_RE = re.compile(rf"(?<![\d:])({CLOCK})")
DAYS_BEFORE_TIME_RE = re.compile(rf"(?<![A-Za-z0-9]){DAY_RUN}(?:[ ,/]+{DAY_RUN})*\s+(?={CLOCK})")

_NAME_WORD = rf"(?!{DAY_RUN}\b)(?![A-Z]{{2,5}}[ \t]?\d)[A-Z][A-Za-z'\-]*\.?"
INSTRUCTOR_RE = re.compile(rf"(?:\b(?:Dr|DR|Prof|PROF)\.|\bProfessor\b)[ ]*{_NAME_WORD}(?:[ ]+{_NAME_WORD}){{0,3}}")

LABELLED_LOCATION_RE = re.compile(r"\b(?:Location|Room|Rm|Bldg|Building)\s*[:：]\s*([^\t\n|;]+)", re.IGNORECASE)
BUILDING_ROOM_RE = re.compile(r"(?<![A-Za-z0-9])([A-Z]{2,5}[ \t]?\d{1,4}[A-Z]?)(?![A-Za-z0-9:])")

CREDITS_RE = re.compile(
    r"(?<![\d.])(\d{1,2}(?:\.\d+)?)\s*(?:credits?|credit\s+hours?|cr\.?|units?|hrs?|hours?)(?![A-Za-z])"
    r"|\b(?:credits?|units?)\s*[:：]\s*(\d{1,2}(?:\.\d+)?)",
    re.IGNORECASE,
)


def _blank(text: str, m: re.Match) -> str:
    return text[: m.start()] + " " * (m.end() - m.start()) + text[m.end():]


def match_course_code(line: str) -> re.Match | None:
    m = COURSE_CODE_RE.match(line or "")
    # "FALL 2025" is a term heading, not a course
    if m and SEMESTER_RE.fullmatch(m.group(0).strip()):
        return None
    return m


def split_day_run(token: str) -> list[str]:
    """Split a day run into day tokens in the order written ("TTh" -> ["T", "Th"])."""
    s = re.sub(r"[\s,/]+", "", token or "")
    out: list[str] = []
    i = 0
    while i < len(s):
        if s[i:i + 2] in ("Th", "TH"):
            out.append("Th")
            i += 2
            continue
        ch = s[i]
        if ch == "R":
            out.append("Th")
        elif ch in "MTWF":
            out.append(ch)
        else:
            raise ValueError(f"Not a day pattern: {token!r}")
        i += 1
    return out


def decode_days(token: str) -> list[str]:
    return canonical_days(split_day_run(token))


def find_day_token(text: str) -> tuple[list[str], str]:
    m = DAY_TOKEN_RE.search(text or "")
    if not m:
        return [], text
    return split_day_run(m.group(0)), _blank(text, m)


def find_time_range(text: str) -> tuple[str, str, str]:
    """Return (start_text, end_text, rest). A lone time is the start."""
    m = TIME_RANGE_RE.search(text or "")
    if m:
        return m.group(1).strip(), m.group(2).strip(), _blank(text, m)
    m = SINGLE_TIME_RE.search(text or "")
    if m:
        return m.group(1).strip(), "", _blank(text, m)
    return "", "", text


def find_instructor(text: str) -> tuple[str, str]:
    m = INSTRUCTOR_RE.search(text or "")
    if not m:
        return "", text
    return m.group(0).strip(), _blank(text, m)


def find_location(text: str) -> tuple[str, str]:
    m = LABELLED_LOCATION_RE.search(text or "")
    if m:
        return " ".join(m.group(1).split()), _blank(text, m)
    m = BUILDING_ROOM_RE.search(text or "")
    if m:
        return " ".join(m.group(1).split()), _blank(text, m)
    return "", text


def find_credits(text: str) -> tuple[str, str]:
    m = CREDITS_RE.search(text or "")
    if not m:
        return "", text
    return (m.group(1) or m.group(2)), _blank(text, m)


def find_semester(text: str) -> str:
    m = SEMESTER_RE.search(text or "")
    if not m:
        return ""
    season = m.group(1).capitalize()
    return f"{season} {m.group(2)}" if m.group(2) else season


def extract_course_name(rest: str) -> tuple[str, str]:
    """Split the text after a course code into (course name, remainder of the line)."""
    s = re.sub(r"^\s*[-–—:|]?\s*", "", rest or "")
    cut = len(s)
    for sep in (COLUMN_SEPARATOR, " | "):
        idx = s.find(sep)
        if idx != -1:
            cut = min(cut, idx)
    for rx in (DAYS_BEFORE_TIME_RE, TIME_RANGE_RE, SINGLE_TIME_RE, INSTRUCTOR_RE, CREDITS_RE):
        m = rx.search(s)
        if m:
            cut = min(cut, m.start())
    name = s[:cut].strip(" -–—:|,\t")
    return name, s[cut:]


def _looks_like_title(line: str) -> bool:
    if len(line) <= 5 or not re.match(r"[A-Za-z]", line):
        return False
    rest = line
    for rule in (find_instructor, find_day_token, find_location, find_credits):
        rest = rule(rest)[-1]
    rest = find_time_range(rest)[-1]
    return rest.strip() == line.strip()


def _block_wants_location(block_lines: list[str]) -> bool:
    # Only a block that already has a meeting pattern and no room yet absorbs a bare code-shaped line
    m = match_course_code(block_lines[0])
    tail = extract_course_name(block_lines[0][m.end():])[1] if m else ""
    body = "\n".join([tail] + block_lines[1:])
    body = find_instructor(body)[1]
    start, _, body = find_time_range(body)
    days, body = find_day_token(body)
    if not (start or days):
        return False
    return not find_location(body)[0]


def _split_blocks(lines: list[str]) -> list[list[str]]:
    blocks: list[list[str]] = []
    cur: list[str] | None = None
    for ln in lines:
        m = match_course_code(ln)
        if m:
            bare = ln.strip() == m.group(0).strip()
            if cur is not None and bare and _block_wants_location(cur):
                cur.append(ln)
                continue
            cur = [ln]
            blocks.append(cur)
        elif cur is not None:
            cur.append(ln)
        # text before the first course code has no anchor and is dropped
    return blocks


def parse_block(block_lines: list[str], doc_semester: str = "") -> RawClassEntry | None:
    anchor = block_lines[0]
    m = match_course_code(anchor)
    if not m:
        return None
    code = f"{m.group(1)} {m.group(2)}" if re.search(r"\s", m.group(0).strip()) else f"{m.group(1)}{m.group(2)}"
    name, tail = extract_course_name(anchor[m.end():])
    scope = block_lines[1:]
    if not name:
        for ln in scope:
            if _looks_like_title(ln):
                name = ln.strip()
                scope = [x for x in scope if x is not ln]
                break

    body = "\n".join([tail] + scope)
    semester = find_semester(body) or doc_semester
    body = SEMESTER_RE.sub(lambda mm: " " * len(mm.group(0)), body)
    instructor, body = find_instructor(body)
    start_text, end_text, body = find_time_range(body)
    days, body = find_day_token(body)
    credits, body = find_credits(body)
    location, body = find_location(body)
    return RawClassEntry(
        course_code=code,
        course_name=name,
        days=days,
        start_text=start_text,
        end_text=end_text,
        location_text=location,
        instructor=instructor,
        credits_text=credits,
        semester_text=semester,
        lines=list(block_lines),
    )


def extract_entries(text: str) -> list[RawClassEntry]:
    lines = [ln.strip() for ln in (text or "").splitlines() if ln.strip()]
    doc_semester = find_semester(text or "")
    entries = []
    for block in _split_blocks(lines):
        entry = parse_block(block, doc_semester)
        if entry and entry.course_code.strip():
            entries.append(entry)
    logger.debug("extracted %d class blocks from %d lines", len(entries), len(lines))
    return entries


def parse_schedule_text(text: str, today: date | None = None, rng: random.Random | None = None) -> list[ParsedClass]:
    """Parse schedule text into normalized candidates; raises NoClassesFoundError when nothing matched."""
    classes = [normalize_entry(e, today=today, rng=rng) for e in extract_entries(text)]
    if not classes:
        raise NoClassesFoundError()
    return classes
