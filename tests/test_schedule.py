from datetime import datetime

import pytest

from zbkit.schedule import first_week, next_wake_time, should_fire
from zbkit.timers import Timer

MONDAY = datetime(2022, 6, 13, 10, 0, 0)


def make_timer(month=-1, day=0, week=0, hour=-1, minute=-1, en=True):
    t = Timer()
    t.month = month
    t.day = day
    t.week = week
    t.hour = hour
    t.minute = minute
    t.en = en
    return t


def test_source_case_weekly_saturday():
    t = make_timer(month=-1, week=6, hour=16, minute=30)
    result = next_wake_time(t, MONDAY)
    assert result > MONDAY
    assert result == datetime(2022, 6, 18, 16, 30, 0)


def test_weekly_after_passed_stays_on_weekday():
    t = make_timer(month=-1, week=6, hour=16, minute=30)
    now = datetime(2022, 6, 18, 17, 0, 0)
    result = next_wake_time(t, now)
    assert result > now
    assert result.isoweekday() == 6
    assert (result.hour, result.minute) == (16, 30)


def test_daily():
    t = make_timer(month=-1, day=-1, hour=8, minute=0)
    assert next_wake_time(t, MONDAY) == datetime(2022, 6, 14, 8, 0, 0)


def test_every_minute():
    t = make_timer(month=-1, day=-1, hour=-1, minute=-1)
    now = datetime(2022, 6, 13, 10, 0, 30)
    assert next_wake_time(t, now) == datetime(2022, 6, 13, 10, 1, 30)


def test_fixed_date():
    t = make_timer(month=12, day=25, hour=9, minute=0)
    assert next_wake_time(t, MONDAY) == datetime(2022, 12, 25, 9, 0, 0)


def test_overflowing_day_still_in_future():
    t = make_timer(month=-1, day=31, hour=9, minute=0)
    assert next_wake_time(t, MONDAY) > MONDAY


def test_first_week():
    assert first_week(MONDAY, 6) == datetime(2022, 6, 4, 10, 0, 0)
    assert first_week(MONDAY, 3) == datetime(2022, 6, 1, 10, 0, 0)


def test_first_week_invalid():
    with pytest.raises(ValueError):
        first_week(MONDAY, -1)


def test_should_fire_daily():
    t = make_timer(month=-1, day=-1, hour=8, minute=0)
    assert should_fire(t, datetime(2022, 6, 13, 8, 0))
    assert not should_fire(t, datetime(2022, 6, 13, 8, 1))
    assert not should_fire(t, datetime(2022, 6, 13, 9, 0))


def test_should_fire_disabled():
    t = make_timer(month=-1, day=-1, hour=8, minute=0, en=False)
    assert not should_fire(t, datetime(2022, 6, 13, 8, 0))


def test_should_fire_weekday():
    t = make_timer(month=-1, day=0, week=1, hour=10, minute=0)
    assert should_fire(t, MONDAY)
    assert not should_fire(t, datetime(2022, 6, 14, 10, 0))


def test_should_fire_month_and_day():
    t = make_timer(month=6, day=13, hour=-1, minute=-1)
    assert should_fire(t, MONDAY)
    assert not should_fire(t, datetime(2022, 7, 13, 10, 0))
    assert not should_fire(t, datetime(2022, 6, 14, 10, 0))