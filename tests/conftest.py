import random
from datetime import date

import pytest

from schedule_import import layout

SAMPLE_SCHEDULE = """BUAD 123 - Business Fundamentals
MWF 9:30AM - 10:45AM
HAL 101
Prof. Smith

MATH 201 - Calculus II
TTh 1:00PM - 2:15PM
SCI 205
"""

TODAY = date(2026, 10, 19)


class FakePage:
    def __init__(self, words, height=792.0):
        self.words = words
        self.height = height

    def extract_words(self, **kwargs):
        return list(self.words)


class FakePdf:
    def __init__(self, pages):
        self.pages = pages

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakePdfplumber:
    """Stands in for the pdfplumber module: open() returns the configured pages."""

    def __init__(self, pages=None, error=None):
        self._pages = pages or []
        self._error = error
        self.opened = 0

    def open(self, stream):
        self.opened += 1
        if self._error:
            raise self._error
        return FakePdf(self._pages)


def word(text, x0, bottom):
    return {"text": text, "x0": x0, "bottom": bottom}


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def rng():
    return random.Random(7)


@pytest.fixture
def fake_pdf(monkeypatch):
    def install(pages=None, error=None):
        backend = FakePdfplumber(pages, error)
        monkeypatch.setattr(layout, "_PDF_BACKEND", backend)
        return backend
    return install
