import pytest

from zbkit.timers import (
    Timer,
    chinese_char_to_int,
    chinese_num_to_int,
    filled_cron_timer,
    filled_timer,
)


@pytest.mark.parametrize("field", ["month", "day", "week", "hour", "minute"])
@pytest.mark.parametrize("value", [-1, 0, 1, 5])
def test_field_round_trip(field, value):
    t = Timer()
    setattr(t, field, value)
    assert getattr(t, field) == value


def test_fields_independent():
    t = Timer()
    t.month = 12
    t.day = 31
    t.week = 6
    t.hour = 23
    t.minute = 59
    t.en = True
    assert (t.month, t.day, t.week, t.hour, t.minute, t.en) == (12, 31, 6, 23, 59, True)
    t.en = False
    assert (t.month, t.day, t.week, t.hour, t.minute, t.en) == (12, 31, 6, 23, 59, False)
    t.day = -1
    assert (t.month, t.day, t.week, t.hour, t.minute) == (12, -1, 6, 23, 59)


def test_fresh_timer_is_disabled_and_zero():
    t = Timer()
    assert not t.en
    assert (t.month, t.day, t.week, t.hour, t.minute) == (0, 0, 0, 0, 0)


def test_source_case_filled_timer():
    t = filled_timer(["", "12", "-1", "12", "0", "", "test"], 0, 0, False)
    assert t.en
    assert t.alert == "test"
    assert t.url == ""
    assert t.timer_info() == "[0]12月0日1周12:0"


def test_chinese_filled_timer():
    t = filled_timer(
        ["", "十二", "二十五日", "八", "三十", "用http://example.com/a.png", "hi"],
        123,
        456,
        False,
    )
    assert t.en
    assert (t.month, t.day, t.hour, t.minute) == (12, 25, 8, 30)
    assert t.url == "http://example.com/a.png"
    assert t.alert == "hi"
    assert (t.self_id, t.grp_id) == (123, 456)


def test_every_week():
    t = filled_timer(["", "每", "每周", "9", "0", "", "x"], 1, 2, False)
    assert t.month == -1
    assert t.week == -1
    assert t.day == 0


@pytest.mark.parametrize("text,expected", [("周三", 3), ("周日", 0), ("周天", 0), ("周一", 1)])
def test_weekday_parsing(text, expected):
    t = filled_timer(["", "1", text, "9", "0", "", "x"], 1, 2, False)
    assert t.en
    assert t.week == expected


def test_invalid_month():
    t = filled_timer(["", "十三", "一日", "9", "0", "", "x"], 1, 2, False)
    assert t.alert == "月份非法！"
    assert not t.en


def test_invalid_day():
    t = filled_timer(["", "1", "32日", "9", "0", "", "x"], 1, 2, False)
    assert t.alert == "日期非法2！"


def test_invalid_hour_and_minute():
    assert filled_timer(["", "1", "1日", "25", "0", "", "x"], 1, 2, False).alert == "小时非法！"
    assert filled_timer(["", "1", "1日", "2", "60", "", "x"], 1, 2, False).alert == "分钟非法！"


def test_illegal_url():
    t = filled_timer(["", "1", "1日", "9", "0", "用ftp://example.com/a", "x"], 1, 2, False)
    assert t.url == "illegal"
    assert not t.en
    assert t.grp_id == 0


def test_match_date_only():
    t = filled_timer(["", "1", "1日", "9", "0"], 1, 2, True)
    assert not t.en
    assert t.alert == ""
    assert t.grp_id == 2


def test_cron_timer_info():
    t = filled_cron_timer("0 8 * * *", "wake", "", 10, 5)
    assert t.timer_info() == "[5]0 8 * * *"
    assert t.alert == "wake"


def test_timer_id_stable_and_distinct():
    a = filled_cron_timer("0 8 * * *", "a", "", 1, 5)
    b = filled_cron_timer("0 8 * * *", "b", "", 2, 5)
    c = filled_cron_timer("0 8 * * *", "a", "", 1, 6)
    assert a.timer_id() == b.timer_id()
    assert a.timer_id() != c.timer_id()
    assert 0 <= a.timer_id() < 2**32


@pytest.mark.parametrize(
    "text,expected",
    [
        ("五", 5),
        ("十", 10),
        ("十二", 12),
        ("二十", 20),
        ("三十", 30),
        ("每", -1),
        ("每二", -2),
        ("12", 12),
        ("-1", -1),
        ("日", 7),
    ],
)
def test_chinese_num_to_int(text, expected):
    assert chinese_num_to_int(text) == expected


def test_chinese_num_empty():
    with pytest.raises(ValueError):
        chinese_num_to_int("")


@pytest.mark.parametrize("c,expected", [("零", 0), ("九", 9), ("十", 10), ("天", 7), ("x", 0)])
def test_chinese_char_to_int(c, expected):
    assert chinese_char_to_int(c) == expected