import pytest

from schedule_import.errors import (
    PASTE_HINT,
    DocumentReadError,
    ExtractionError,
    UnsupportedInputError,
)
from schedule_import.sources import decode_text, detect_kind, document_from_text, load_document


def test_pdf_by_extension(tmp_path):
    path = tmp_path / "schedule.PDF"
    path.write_bytes(b"%PDF-1.4 fake")
    doc = load_document(str(path))
    assert doc.kind == "pdf"
    assert doc.data == b"%PDF-1.4 fake"
    assert doc.name == "schedule.PDF"


def test_text_file_is_decoded(tmp_path):
    path = tmp_path / "schedule.txt"
    path.write_bytes("\ufeffBUAD 123 - Café".encode("utf-8"))
    doc = load_document(str(path))
    assert doc.kind == "text"
    assert doc.data == "BUAD 123 - Café"


def test_pdf_sniffed_without_extension(tmp_path):
    path = tmp_path / "download"
    path.write_bytes(b"%PDF-1.7\n...")
    assert load_document(str(path)).kind == "pdf"


def test_unknown_file_without_extension(tmp_path):
    path = tmp_path / "download"
    path.write_bytes(b"hello")
    with pytest.raises(UnsupportedInputError):
        load_document(str(path))


def test_unsupported_extension_is_rejected_before_reading(tmp_path):
    with pytest.raises(UnsupportedInputError):
        load_document(str(tmp_path / "missing.docx"))


def test_unreadable_file(tmp_path):
    with pytest.raises(DocumentReadError) as exc:
        load_document(str(tmp_path / "missing.txt"))
    assert isinstance(exc.value, ExtractionError)
    assert PASTE_HINT in exc.value.message


def test_detect_kind():
    assert detect_kind("a.pdf") == "pdf"
    assert detect_kind("a.TXT") == "text"
    assert detect_kind("a.bin", b"%PDF-") == "pdf"
    assert detect_kind("a.bin", b"PK") is None


def test_decode_falls_back_to_latin1():
    assert decode_text("Café".encode("latin-1")) == "Café"


def test_pasted_text_document():
    doc = document_from_text("MATH201")
    assert (doc.kind, doc.data) == ("text", "MATH201")
    assert document_from_text(None).data == ""
