import sys
from pathlib import Path

# Local imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from schedule_import import importer, parser  # noqa: E402
from schedule_import.errors import ScheduleImportError  # noqa: E402
from schedule_import.normalize import format_days_display, format_time_display  # noqa: E402
from schedule_import.sources import load_document  # noqa: E402


def main(path: str):
    print(f"Source: {path}")
    try:
        doc = load_document(path)
        text = importer.document_text(doc)
    except ScheduleImportError as e:
        print(f"Error: {e.message}")
        return
    print(f"Kind: {doc.kind} | characters: {len(text)}")
    print("-- Reconstructed text --")
    for i, line in enumerate(text.splitlines(), 1):
        print(f"{i:03d}: {line.replace(chr(9), ' | ')}")

    entries = parser.extract_entries(text)
    print(f"-- Blocks ({len(entries)}) --")
    for i, e in enumerate(entries, 1):
        print(f"[{i:02d}] {' / '.join(e.lines)}")
        print(f"     code={e.course_code!r} name={e.course_name!r} days={e.days} "
              f"time={e.start_text!r}-{e.end_text!r} loc={e.location_text!r} instr={e.instructor!r} "
              f"credits={e.credits_text!r} term={e.semester_text!r}")

    if not entries:
        return
    print("-- Normalized --")
    for c in parser.parse_schedule_text(text):
        span = f"{format_time_display(c.start_time)}-{format_time_display(c.end_time)}"
        flags = "; ".join(c.problems())
        print(f"- {c.course_code} | {c.course_name} | {format_days_display(c.days)} {span} | {c.location} | "
              f"{c.instructor} | {c.semester} | {c.color}{'  !! ' + flags if flags else ''}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python tools/debug_extract.py <path-to-pdf-or-txt>")
        sys.exit(1)
    main(sys.argv[1])
