"""Document sources: an uploaded file (PDF or TXT) or pasted text."""

import os
from dataclasses import dataclass

from .errors import DocumentReadError, UnsupportedInputError

PDF_SUFFIXES = (".pdf",)
TEXT_SUFFIXES = (".txt", ".text")


@dataclass
class ScheduleDocument:
    kind: str  # "pdf" or "text"
    data: bytes | str
    name: str = ""


def detect_kind(name: str, head: bytes = b"") -> str | None:
    lower = (name or "").lower()
    if lower.endswith(PDF_SUFFIXES) or head.startswith(b"%PDF-"):
        return "pdf"
    if lower.endswith(TEXT_SUFFIXES):
        return "text"
    return None


def decode_text(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def load_document(path: str) -> ScheduleDocument:
    name = os.path.basename(path or "")
    # Reject by extension before touching the file when we can
    lower = name.lower()
    if lower and "." in lower and not lower.endswith(PDF_SUFFIXES + TEXT_SUFFIXES):
        raise UnsupportedInputError("Unsupported file type. Please upload a PDF or TXT file.")
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as exc:
        raise DocumentReadError(f"Could not read {name or path}.") from exc
    kind = detect_kind(name, raw[:5])
    if kind is None:
        raise UnsupportedInputError("Unsupported file type. Please upload a PDF or TXT file.")
    if kind == "pdf":
        return ScheduleDocument("pdf", raw, name)
    return ScheduleDocument("text", decode_text(raw), name)


def document_from_text(text: str) -> ScheduleDocument:
    return ScheduleDocument("text", text or "", "pasted text")
