"""
Schedule file or pasted text → reviewed class list → ICS calendar.

- Input: a PDF/TXT path (CLI arg or prompt). Leave it blank to paste the schedule text instead.
- Review: list the parsed classes, edit fields, toggle days, delete or add classes, then confirm.
- Output: an .ics file next to the input (or schedule.ics for pasted text) with weekly events.
"""

import argparse
import logging
import os
import sys
from datetime import datetime

from . import config
from .calendar_export import IcsCalendarSync
from .errors import CommitError, ExtractionError, NoClassesFoundError, ScheduleImportError
from .importer import import_file, import_text
from .logging_config import setup_logging
from .normalize import day_name, format_days_display, format_time_display
from .review import ReviewSession, ReviewState

FIELD_ALIASES = {
    "code": "course_code",
    "name": "course_name",
    "start": "start_time",
    "end": "end_time",
    "prof": "instructor",
    "professor": "instructor",
}

HELP = """Commands:
  e N            edit class N          d N        delete class N
  a CODE         add a class           y          add the listed classes
  q              cancel (nothing is saved)
While editing:
  FIELD = VALUE  e.g. name = Calculus II, start = 1:00PM, location = SCI 205
  day D          toggle a day (M, T, W, Th, F)
  done           finish editing"""


def summarize_classes(classes, editing_index: int | None = None) -> str:
    lines = []
    for i, c in enumerate(classes, start=1):
        days = format_days_display(c.days) or "-"
        span = ""
        if c.start_time:
            span = f" {format_time_display(c.start_time)}"
            if c.end_time:
                span += f" - {format_time_display(c.end_time)}"
        mark = "*" if editing_index == i - 1 else " "
        line = f"{mark}{i:02d}. [{days}]{span} :: {c.course_code} {c.course_name or 'Untitled Class'}"
        if c.location:
            line += f" @ {c.location}"
        if c.instructor:
            line += f" | {c.instructor}"
        line += f" ({c.semester}, {c.color})"
        problems = c.problems()
        if problems:
            line += f"  !! {'; '.join(problems)}"
        lines.append(line)
    return "\n".join(lines)


def read_pasted_text(prompt=None) -> str:
    prompt = prompt or input
    print("Paste your schedule, then enter a line with just END (or Ctrl-D):")
    lines = []
    while True:
        try:
            ln = prompt("")
        except EOFError:
            break
        if ln.strip() == "END":
            break
        lines.append(ln)
    return "\n".join(lines)


def _apply_edit(session: ReviewSession, cmd: str) -> None:
    if cmd.startswith("day "):
        day = cmd[4:].strip()
        days = session.toggle_day(day)
        print(f"{day_name(day)} {'on' if day in days else 'off'}")
        return
    if "=" not in cmd:
        raise ValueError("Use FIELD = VALUE, 'day D' or 'done'.")
    key, value = (x.strip() for x in cmd.split("=", 1))
    field = FIELD_ALIASES.get(key.lower(), key.lower())
    session.set_field(field, value)


def review_loop(session: ReviewSession, sync, prompt=None):
    """Drive a loaded ReviewSession from the terminal. Returns the committed classes, or None if cancelled."""
    prompt = prompt or input
    print(HELP)
    while session.state != ReviewState.IDLE:
        print(summarize_classes(session.candidates, session.editing_index))
        if not session.candidates:
            print("No classes to confirm.")
        try:
            cmd = prompt("edit> " if session.state == ReviewState.EDITING else f"[{session.confirm_label} = y] > ").strip()
        except EOFError:
            session.cancel()
            return None
        try:
            if session.state == ReviewState.EDITING and cmd not in ("q", "done") and not cmd.startswith("d "):
                _apply_edit(session, cmd)
            elif cmd == "done":
                session.finish_edit()
            elif cmd.startswith("e "):
                session.begin_edit(int(cmd[2:]) - 1)
            elif cmd.startswith("d "):
                session.delete(int(cmd[2:]) - 1)
            elif cmd.startswith("a "):
                session.add_candidate(cmd[2:].strip())
            elif cmd == "y":
                if not session.can_confirm:
                    print("Nothing to add.")
                    continue
                return session.confirm(sync)
            elif cmd == "q":
                session.cancel()
                return None
            elif cmd:
                print(HELP)
        except CommitError as e:
            print(f"Error: {e.message} Your classes are still here; fix them and try again.")
        except (ScheduleImportError, ValueError, IndexError) as e:
            print(f"Error: {getattr(e, 'message', e)}")
    return None


def main(argv=None) -> None:
    ap = argparse.ArgumentParser(description="Import a class schedule (PDF/TXT or pasted text) into an .ics calendar.")
    ap.add_argument("source", nargs="?", help="PDF or TXT schedule; omit to be prompted")
    ap.add_argument("--paste", action="store_true", help="paste schedule text instead of reading a file")
    ap.add_argument("--monday", help="Monday of the first week of classes (YYYY-MM-DD)")
    ap.add_argument("--weeks", type=int, default=config.TERM_WEEKS, help="number of teaching weeks")
    ap.add_argument("--output", help="where to write the .ics file")
    ap.add_argument("--debug", action="store_true", help="verbose logging")
    args = ap.parse_args(argv)

    debug = args.debug or config.DEBUG
    setup_logging(logging.DEBUG if debug else logging.WARNING)

    source = args.source
    if not source and not args.paste:
        source = input("Enter the schedule file path (PDF or TXT; leave blank to paste text): ").strip()

    classes = None
    if source:
        if not os.path.exists(source):
            print("File not found. Please run again and provide a valid path.")
            sys.exit(1)
        try:
            classes = import_file(source)
        except (ExtractionError, NoClassesFoundError) as e:
            # recoverable: offer the paste path
            print(f"Error: {e.message}")
            if input("Paste the schedule text now? [y/N]: ").strip().lower() != "y":
                sys.exit(1)
        except ScheduleImportError as e:
            print(f"Error: {e.message}")
            sys.exit(1)
    if classes is None:
        try:
            classes = import_text(read_pasted_text())
        except ScheduleImportError as e:
            print(f"Error: {e.message}")
            sys.exit(1)

    print(f"Detected {len(classes)} class(es).")
    if debug:
        print("-- Class summary --")
        for c in classes:
            print(f"{c.id}: {c.to_dict()}")

    monday_str = args.monday or input("Enter the Monday of the first week of classes (YYYY-MM-DD): ").strip()
    try:
        first_monday = datetime.strptime(monday_str, "%Y-%m-%d").date()
    except ValueError:
        print("Invalid date format. Please use YYYY-MM-DD.")
        sys.exit(1)

    if args.output:
        ics_output = args.output
    elif source:
        stem = os.path.splitext(os.path.basename(source))[0]
        ics_output = os.path.join(os.path.dirname(os.path.abspath(source)), f"{stem.replace(' ', '_')}.ics")
    else:
        ics_output = os.path.abspath("schedule.ics")

    session = ReviewSession()
    session.load(classes)
    sync = IcsCalendarSync(
        ics_output,
        first_monday,
        weeks=args.weeks,
        cal_name=classes[0].semester,
        cal_desc=f"Class schedule starting Monday {monday_str}",
    )
    committed = review_loop(session, sync)
    if committed is None:
        print("Cancelled; nothing was saved.")
        return
    print(f"Calendar exported: {ics_output} (classes: {len(committed)}, events: {sync.last_event_count})")


if __name__ == "__main__":
    main()
