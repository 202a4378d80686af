# tests/test_time_helpers.py
from datetime import datetime, timedelta, timezone

from app.helpers.time import as_utc, days_since, format_br_date, local_day_bounds, treatment_day

START = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_treatment_day_is_one_at_start():
    assert treatment_day(START, START) == 1


def test_treatment_day_rounds_partial_days_up():
    assert treatment_day(START, START + timedelta(hours=1)) == 1
    assert treatment_day(START, START + timedelta(days=1, minutes=1)) == 2
    assert treatment_day(START, START + timedelta(days=3) - timedelta(minutes=5)) == 3


def test_treatment_day_never_below_one():
    assert treatment_day(START, START - timedelta(days=2)) == 1


def test_days_since_floors():
    assert days_since(START, START + timedelta(days=2, hours=23)) == 2
    assert days_since(START, START - timedelta(days=1)) == 0


def test_naive_datetimes_are_read_as_utc():
    naive = datetime(2024, 3, 1, 12, 0)
    assert as_utc(naive) == START
    assert treatment_day(naive, START + timedelta(hours=5)) == 1


def test_format_br_date_uses_ward_calendar():
    # 01:00 UTC is still the previous evening in São Paulo
    assert format_br_date(datetime(2024, 3, 2, 1, 0, tzinfo=timezone.utc)) == "01/03/2024"
    assert format_br_date(None) == ""


def test_local_day_bounds_span_one_day():
    start, end = local_day_bounds(START)
    assert end - start == timedelta(days=1)
    assert start <= START < end
