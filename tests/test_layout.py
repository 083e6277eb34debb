import pytest

from schedule_import import layout
from schedule_import.errors import PASTE_HINT, ExtractionError
from schedule_import.layout import extract_pdf_text, page_fragments, reconstruct_rows
from schedule_import.models import PositionedTextFragment as Frag

from .conftest import FakePage, word


def test_rows_top_to_bottom_left_to_right():
    frags = [
        Frag("MWF", 10, 680),
        Frag("Business Fundamentals", 100, 700),
        Frag("BUAD 123", 10, 700.8),
        Frag("9:30AM - 10:45AM", 100, 679),
    ]
    doc = reconstruct_rows(frags)
    assert doc.rows == [["BUAD 123", "Business Fundamentals"], ["MWF", "9:30AM - 10:45AM"]]
    assert doc.to_text() == "BUAD 123\tBusiness Fundamentals\nMWF\t9:30AM - 10:45AM"


def test_blank_fragments_are_dropped_and_text_trimmed():
    doc = reconstruct_rows([Frag("  ", 5, 500), Frag(" HAL 101 ", 50, 500), Frag("", 90, 400)])
    assert doc.rows == [["HAL 101"]]


def test_no_fragments_gives_no_rows():
    doc = reconstruct_rows([])
    assert doc.rows == []
    assert doc.to_text() == ""


def test_single_fragment_is_its_own_row():
    assert reconstruct_rows([Frag("MATH201", 3, 3)]).rows == [["MATH201"]]


def test_gap_larger_than_tolerance_starts_new_row():
    frags = [Frag("a", 0, 100), Frag("b", 10, 94)]
    assert reconstruct_rows(frags, tolerance=5).rows == [["a"], ["b"]]
    assert reconstruct_rows(frags, tolerance=8).rows == [["a", "b"]]


def test_reconstruction_is_idempotent_on_row_major_input():
    frags = [
        Frag("CS 101", 10, 700), Frag("Intro", 90, 701), Frag("MW", 200, 699),
        Frag("CS 102", 10, 650), Frag("Data", 90, 650),
        Frag("HAL 1", 10, 600),
    ]
    first = reconstruct_rows(frags)
    ordered = [
        Frag(t, f.x, f.y)
        for row in first.rows
        for t in row
        for f in frags
        if f.text == t
    ]
    assert reconstruct_rows(ordered).rows == first.rows
    assert reconstruct_rows(list(reversed(frags))).rows == first.rows


def test_page_fragments_flip_to_pdf_space():
    page = FakePage([word("HAL 101", 12.5, 100)], height=800)
    assert page_fragments(page) == [Frag("HAL 101", 12.5, 700.0)]


def test_extract_pdf_text_joins_pages_and_skips_empty(fake_pdf):
    fake_pdf([
        FakePage([
            word("BUAD 123", 10, 100),
            word("Business Fundamentals", 80, 101),
            word("MWF", 10, 120),
            word("9:30AM - 10:45AM", 80, 120),
        ]),
        FakePage([]),
        FakePage([word("   ", 10, 50)]),
        FakePage([word("MATH201", 10, 60)]),
    ])
    text = extract_pdf_text(b"%PDF-1.7")
    assert text == "BUAD 123\tBusiness Fundamentals\nMWF\t9:30AM - 10:45AM\nMATH201"


def test_unreadable_pdf_raises_extraction_error(fake_pdf):
    fake_pdf(error=ValueError("broken xref"))
    with pytest.raises(ExtractionError) as exc:
        extract_pdf_text(b"garbage")
    assert PASTE_HINT in exc.value.message


def test_backend_is_loaded_once(monkeypatch):
    calls = []
    sentinel = object()

    def fake_import(name):
        calls.append(name)
        return sentinel

    monkeypatch.setattr(layout, "_PDF_BACKEND", None)
    monkeypatch.setattr(layout.importlib, "import_module", fake_import)
    assert layout.get_pdf_backend() is sentinel
    assert layout.get_pdf_backend() is sentinel
    assert calls == ["pdfplumber"]


def test_missing_backend_is_recoverable(monkeypatch):
    def fail(name):
        raise ImportError(name)

    monkeypatch.setattr(layout, "_PDF_BACKEND", None)
    monkeypatch.setattr(layout.importlib, "import_module", fail)
    with pytest.raises(ExtractionError):
        layout.get_pdf_backend()
