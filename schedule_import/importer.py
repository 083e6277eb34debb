"""
Glue between a document source and the review step:
file or pasted text -> (layout reconstruction for PDFs) -> parser -> normalized candidates.
"""

import random
from datetime import date

from .config import ROW_Y_TOLERANCE
from .errors import NoClassesFoundError
from .layout import extract_pdf_text
from .logging_config import get_logger
from .models import ParsedClass
from .parser import parse_schedule_text
from .sources import ScheduleDocument, document_from_text, load_document

logger = get_logger(__name__)


def document_text(doc: ScheduleDocument, tolerance: float = ROW_Y_TOLERANCE) -> str:
    if doc.kind == "pdf":
        text = extract_pdf_text(doc.data, tolerance)
        logger.debug("reconstructed %d characters from %s", len(text), doc.name)
        return text
    return doc.data


def import_document(doc: ScheduleDocument, today: date | None = None, rng: random.Random | None = None) -> list[ParsedClass]:
    text = document_text(doc)
    if not text.strip():
        if doc.kind == "pdf":
            raise NoClassesFoundError("No text found in the PDF. Try pasting your schedule text instead.")
        raise NoClassesFoundError("Please paste your schedule text.")
    try:
        classes = parse_schedule_text(text, today=today, rng=rng)
    except NoClassesFoundError:
        logger.info("no classes recognised in %s", doc.name or doc.kind)
        if doc.kind == "pdf":
            raise NoClassesFoundError("No classes found in the file. Try pasting your schedule text instead.")
        raise
    logger.info("parsed %d class(es) from %s", len(classes), doc.name or doc.kind)
    return classes


def import_file(path: str, today: date | None = None, rng: random.Random | None = None) -> list[ParsedClass]:
    return import_document(load_document(path), today=today, rng=rng)


def import_text(text: str, today: date | None = None, rng: random.Random | None = None) -> list[ParsedClass]:
    return import_document(document_from_text(text), today=today, rng=rng)
