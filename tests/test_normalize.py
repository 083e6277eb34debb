import random
from datetime import date, time

import pytest

from schedule_import.config import CLASS_COLORS
from schedule_import.models import ParsedClass, RawClassEntry
from schedule_import.normalize import (
    assign_color,
    canonical_days,
    coerce_time,
    day_name,
    finalize_class,
    format_days_display,
    format_time_display,
    infer_semester,
    join_location,
    normalize_entry,
    parse_clock,
    resolve_semester,
    semester_options,
    split_location,
)


def test_canonical_days_sorts_and_dedupes():
    assert canonical_days(["F", "M", "W", "M"]) == ["M", "W", "F"]
    assert canonical_days(["Th", "T"]) == ["T", "Th"]
    assert format_days_display(["Th", "T"]) == "TTh"
    assert day_name("Th") == "Thursday"
    with pytest.raises(ValueError):
        canonical_days(["Sa"])


@pytest.mark.parametrize(
    "text, expected",
    [
        ("9:30AM", time(9, 30)),
        ("9:30 pm", time(21, 30)),
        ("12:00PM", time(12, 0)),
        ("12:15 a.m.", time(0, 15)),
        ("13:05", time(13, 5)),
        ("2pm", time(14, 0)),
        ("25:00", None),
        ("13:00PM", None),
        ("9:75", None),
        ("noon", None),
    ],
)
def test_parse_clock(text, expected):
    assert parse_clock(text) == expected


def test_format_time_display():
    assert format_time_display(time(9, 30)) == "9:30 AM"
    assert format_time_display(time(0, 5)) == "12:05 AM"
    assert format_time_display(time(13, 0)) == "1:00 PM"
    assert format_time_display(None) == ""


def test_infer_semester_by_month():
    assert infer_semester(date(2026, 3, 1)) == "Spring 2026"
    assert infer_semester(date(2026, 7, 1)) == "Summer 2026"
    assert infer_semester(date(2026, 10, 19)) == "Fall 2026"


def test_semester_options_span_the_year_boundary():
    assert semester_options(date(2026, 10, 19)) == [
        "Summer 2026",
        "Fall 2026",
        "Spring 2027",
        "Summer 2027",
        "Fall 2027",
    ]


def test_resolve_semester():
    today = date(2026, 1, 5)
    assert resolve_semester("fall", today) == "Fall 2026"
    assert resolve_semester("Spring 2027", today) == "Spring 2027"
    assert resolve_semester("", today) == "Spring 2026"


def test_assign_color_is_deterministic_with_seeded_rng():
    a = [assign_color(random.Random(3)) for _ in range(3)]
    assert len(set(a)) == 1
    assert a[0] in CLASS_COLORS
    assert assign_color(random.Random(3), ["#000000"]) == "#000000"


def test_split_and_join_location():
    assert split_location("HAL 101") == ("HAL", "101")
    assert split_location("Science  Hall 205B") == ("Science Hall", "205B")
    assert split_location("Online") == ("Online", "")
    assert join_location("HAL", "101") == "HAL 101"
    assert join_location("", "", "Online") == "Online"
    assert join_location("HAL", "") == "HAL"


def test_normalize_entry(rng):
    raw = RawClassEntry(
        course_code="buad  123",
        course_name=" Business   Fundamentals ",
        days=["W", "M"],
        start_text="9:30",
        end_text="10:45AM",
        location_text="HAL 101",
        credits_text="3",
        semester_text="Fall",
    )
    cls = normalize_entry(raw, today=date(2026, 10, 19), rng=rng)
    assert cls.course_code == "BUAD 123"
    assert cls.course_name == "Business Fundamentals"
    assert cls.days == ["M", "W"]
    assert (cls.start_time, cls.end_time) == (time(9, 30), time(10, 45))
    assert (cls.building, cls.room) == ("HAL", "101")
    assert cls.credits == 3.0
    assert cls.semester == "Fall 2026"
    assert cls.color in CLASS_COLORS
    assert cls.id.startswith("class_")


def test_finalize_keeps_color_and_rebuilds_location():
    cls = ParsedClass(
        course_code="cs 101",
        days=["F", "M"],
        location="old",
        building="ENG",
        room="12",
        color="#123456",
    )
    final = finalize_class(cls)
    assert final.course_code == "CS 101"
    assert final.days == ["M", "F"]
    assert final.location == "ENG 12"
    assert final.color == "#123456"
    assert final.id == cls.id
    assert cls.location == "old"


def test_coerce_time():
    assert coerce_time("1:15 PM") == time(13, 15)
    assert coerce_time("") is None
    assert coerce_time(time(8, 0)) == time(8, 0)
    with pytest.raises(ValueError):
        coerce_time("later")
