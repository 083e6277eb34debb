from datetime import time

import pytest

from schedule_import import import_file, import_text
from schedule_import.errors import ExtractionError, NoClassesFoundError

from .conftest import SAMPLE_SCHEDULE, TODAY, FakePage, word


def test_import_pasted_text():
    classes = import_text(SAMPLE_SCHEDULE, today=TODAY)
    assert [c.course_code for c in classes] == ["BUAD 123", "MATH 201"]


def test_import_empty_paste():
    with pytest.raises(NoClassesFoundError) as exc:
        import_text("  \n ")
    assert "paste" in exc.value.message.lower()


def test_import_text_without_classes():
    with pytest.raises(NoClassesFoundError) as exc:
        import_text("just some notes")
    assert "BUAD 123" in exc.value.message


def test_import_text_file(tmp_path):
    path = tmp_path / "fall.txt"
    path.write_text(SAMPLE_SCHEDULE, encoding="utf-8")
    classes = import_file(str(path), today=TODAY)
    assert len(classes) == 2


def test_import_pdf_through_layout(tmp_path, fake_pdf):
    fake_pdf([
        FakePage([
            word("BUAD 123", 10, 100),
            word("Business Fundamentals", 80, 100),
            word("MWF", 220, 101),
            word("9:30AM - 10:45AM", 260, 100),
            word("HAL 101", 380, 99),
        ]),
    ])
    path = tmp_path / "schedule.pdf"
    path.write_bytes(b"%PDF-1.7")
    (cls,) = import_file(str(path), today=TODAY)
    assert cls.course_name == "Business Fundamentals"
    assert cls.days == ["M", "W", "F"]
    assert (cls.start_time, cls.end_time) == (time(9, 30), time(10, 45))
    assert cls.location == "HAL 101"


def test_pdf_without_classes_suggests_pasting(tmp_path, fake_pdf):
    fake_pdf([FakePage([word("Unofficial transcript", 10, 100)])])
    path = tmp_path / "schedule.pdf"
    path.write_bytes(b"%PDF-1.7")
    with pytest.raises(NoClassesFoundError) as exc:
        import_file(str(path))
    assert "pasting" in exc.value.message


def test_pdf_without_text(tmp_path, fake_pdf):
    fake_pdf([FakePage([])])
    path = tmp_path / "scan.pdf"
    path.write_bytes(b"%PDF-1.7")
    with pytest.raises(NoClassesFoundError) as exc:
        import_file(str(path))
    assert "No text found" in exc.value.message


def test_broken_pdf(tmp_path, fake_pdf):
    fake_pdf(error=OSError("bad header"))
    path = tmp_path / "schedule.pdf"
    path.write_bytes(b"%PDF-1.7")
    with pytest.raises(ExtractionError):
        import_file(str(path))
