"""Tests for the memo data structure."""

from datetime import date, time, timedelta, timezone

import pytest

from memo import Memo, format_time, parse_date, parse_time


def test_equality_is_by_value():
    a = Memo(date=date(2024, 3, 15), time=time(9, 0), content="dentist")
    b = Memo(date=date(2024, 3, 15), time=time(9, 0), content="dentist")
    assert a == b
    assert a != Memo(date=date(2024, 3, 15), time=None, content="dentist")
    assert a != Memo(date=date(2024, 3, 16), time=time(9, 0), content="dentist")


def test_preview_truncates_long_content():
    memo = Memo(date=date(2024, 3, 15), time=None, content="team dinner")
    assert memo.preview() == "team ..."
    assert memo.preview(limit=20) == "team dinner"


def test_preview_keeps_short_content():
    assert Memo(date=date(2024, 3, 15), time=None, content="gym").preview() == "gym"
    assert Memo(date=date(2024, 3, 15), time=None, content="12345").preview() == "12345"


def test_to_dict():
    d = Memo(date=date(2024, 3, 15), time=time(12, 30), content="lunch").to_dict()
    assert d == {"date": "2024-03-15", "time": "12:30", "content": "lunch"}


def test_to_dict_without_time():
    d = Memo(date=date(2024, 3, 15), time=None, content="lunch").to_dict()
    assert d["time"] is None


def test_from_dict():
    memo = Memo.from_dict({"date": "2024-03-15", "time": "08:05", "content": "run"})
    assert memo == Memo(date=date(2024, 3, 15), time=time(8, 5), content="run")


def test_from_dict_defaults():
    memo = Memo.from_dict({"date": "2024-03-15"})
    assert memo.time is None
    assert memo.content == ""


def test_to_dict_from_dict_roundtrip():
    memo = Memo(date=date(2024, 12, 31), time=time(23, 59, 30), content="countdown")
    assert Memo.from_dict(memo.to_dict()) == memo


def test_format_time():
    assert format_time(time(7, 5)) == "07:05"
    assert format_time(time(7, 5, 9)) == "07:05:09"


def test_parse_time_accepts_local_times():
    assert parse_time("08:05") == time(8, 5)
    assert parse_time("23:59:30") == time(23, 59, 30)
    assert parse_time(time(9, 0)) == time(9, 0)


@pytest.mark.parametrize("value", ["12:30+08:00", "12:30Z", "12:30:00.5", "1230", "9:00", "25:00", ""])
def test_parse_time_rejects_other_forms(value):
    with pytest.raises(ValueError):
        parse_time(value)


def test_parse_time_rejects_aware_and_fractional_objects():
    with pytest.raises(ValueError):
        parse_time(time(12, 30, tzinfo=timezone(timedelta(hours=8))))
    with pytest.raises(ValueError):
        parse_time(time(12, 30, 0, 500))


@pytest.mark.parametrize("value", ["20240315", "2024-3-15", "2024-W11-5", "2024-02-30"])
def test_parse_date_rejects_other_forms(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_from_dict_rejects_offset_time():
    with pytest.raises(ValueError):
        Memo.from_dict({"date": "2024-03-15", "time": "08:05+01:00", "content": "run"})
