"""
Rebuild row/column reading order from positioned PDF text.

pdf pages carry words with coordinates rather than lines; schedule exports are tables,
so we cluster words by vertical position into rows, order each row left-to-right and
emit tab-separated rows that the entry parser can read like pasted text.
"""

import importlib
import io

from .config import COLUMN_SEPARATOR, ROW_Y_TOLERANCE
from .errors import ExtractionError
from .logging_config import get_logger
from .models import PositionedTextFragment, ReconstructedDocument

logger = get_logger(__name__)

# Loaded on first use and kept for the rest of the process
_PDF_BACKEND = None


def get_pdf_backend():
    global _PDF_BACKEND
    if _PDF_BACKEND is None:
        try:
            _PDF_BACKEND = importlib.import_module("pdfplumber")
        except ImportError as exc:
            raise ExtractionError("PDF support is not available.") from exc
        logger.debug("pdfplumber loaded")
    return _PDF_BACKEND


def reconstruct_rows(fragments, tolerance: float = ROW_Y_TOLERANCE) -> ReconstructedDocument:
    items = [
        PositionedTextFragment(f.text.strip(), float(f.x), float(f.y))
        for f in fragments
        if (f.text or "").strip()
    ]
    if not items:
        return ReconstructedDocument()
    # Top of page first (PDF y grows upward), then left to right
    items.sort(key=lambda f: (-f.y, f.x))

    rows: list[list[PositionedTextFragment]] = []
    current: list[PositionedTextFragment] = []
    anchor_y = items[0].y
    for frag in items:
        if abs(frag.y - anchor_y) > tolerance:
            rows.append(current)
            current = []
            anchor_y = frag.y
        current.append(frag)
    rows.append(current)

    # Same-row fragments can differ slightly in y, so re-order by x inside each row
    return ReconstructedDocument([[f.text for f in sorted(row, key=lambda f: f.x)] for row in rows])


def page_fragments(page) -> list[PositionedTextFragment]:
    """Positioned fragments for one pdfplumber page.

    pdfplumber measures `top`/`bottom` from the top edge, so flip to PDF space using the page height.
    """
    height = float(page.height)
    words = page.extract_words(keep_blank_chars=True) or []
    return [
        PositionedTextFragment(w.get("text", ""), float(w["x0"]), height - float(w["bottom"]))
        for w in words
    ]


def extract_pdf_text(data: bytes, tolerance: float = ROW_Y_TOLERANCE) -> str:
    pdfplumber = get_pdf_backend()
    page_texts: list[str] = []
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for i, page in enumerate(pdf.pages, start=1):
                doc = reconstruct_rows(page_fragments(page), tolerance)
                if not doc.rows:
                    logger.debug("page %d has no text, skipping", i)
                    continue
                logger.debug("page %d: %d rows", i, len(doc))
                page_texts.append(doc.to_text(COLUMN_SEPARATOR))
    except Exception as exc:
        logger.warning("PDF extraction failed: %s", exc)
        raise ExtractionError("Failed to extract text from PDF.") from exc
    return "\n".join(page_texts)
