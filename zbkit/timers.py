"""Group reminder timers and parsing of their Chinese date descriptions."""

from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass

log = logging.getLogger(__name__)

_EN_BIT = 0x800000
_ALL_BITS = 0xFFFFFF
_DIGITS = "零一二三四五六七八九十"
_ATOI = re.compile(r"[+-]?[0-9]+")


class _BitField:
    """A signed slot inside ``Timer.emdwhm``; all ones in the slot reads as -1."""

    def __init__(self, shift: int, width: int) -> None:
        self.shift = shift
        self.ones = (1 << width) - 1
        self.mask = self.ones << shift

    def __set_name__(self, owner, name: str) -> None:
        self.name = name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        value = (obj.emdwhm & self.mask) >> self.shift
        return -1 if value == self.ones else value

    def __set__(self, obj, value: int) -> None:
        obj.emdwhm = ((value << self.shift) & self.mask) | (
            obj.emdwhm & (_ALL_BITS & ~self.mask)
        )


@dataclass
class Timer:
    """A reminder: either a cron expression or packed month/day/week/hour/minute.

    ``emdwhm`` packs 1 enable bit, 4 bits month, 5 bits day, 3 bits weekday
    (0 is Sunday), 5 bits hour and 6 bits minute; -1 in a slot means "every".
    """

    id: int = 0
    emdwhm: int = 0
    self_id: int = 0
    grp_id: int = 0
    alert: str = ""
    cron: str = ""
    url: str = ""

    month = _BitField(19, 4)
    day = _BitField(14, 5)
    week = _BitField(11, 3)
    hour = _BitField(6, 5)
    minute = _BitField(0, 6)

    @property
    def en(self) -> bool:
        """Whether the timer is enabled."""
        return self.emdwhm & _EN_BIT != 0

    @en.setter
    def en(self, value: bool) -> None:
        if value:
            self.emdwhm |= _EN_BIT
        else:
            self.emdwhm &= 0x7FFFFF

    def timer_info(self) -> str:
        """Normalised description used to derive the timer's identity."""
        if self.cron:
            return f"[{self.grp_id}]{self.cron}"
        return (
            f"[{self.grp_id}]{self.month}月{self.day}日{self.week}周"
            f"{self.hour}:{self.minute}"
        )

    def timer_id(self) -> int:
        """First four bytes of the MD5 of :meth:`timer_info`, little endian."""
        digest = hashlib.md5(self.timer_info().encode("utf-8")).digest()
        return int.from_bytes(digest[:4], "little")


def filled_cron_timer(croncmd: str, alert: str, img: str, botqq: int, gid: int) -> Timer:
    """Build a cron-driven timer."""
    return Timer(self_id=botqq, grp_id=gid, alert=alert, cron=croncmd, url=img)


def filled_timer(date_strs, botqq: int, grp: int, match_date_only: bool) -> Timer:
    """Build a timer from regex groups (month, day/week, hour, minute, url, alert).

    On invalid input the returned timer is disabled and ``alert`` holds the reason.
    """
    month_str, day_week, hour_str, minute_str = date_strs[1:5]
    t = Timer()

    mon = chinese_num_to_int(month_str)
    if (mon != -1 and mon <= 0) or mon > 12:
        t.alert = "月份非法！"
        return t
    t.month = mon

    if len(day_week) == 4:  # e.g. 二十五日: drop the middle 十
        d = chinese_num_to_int(day_week[0] + day_week[2])
        if (d != -1 and d <= 0) or d > 31:
            t.alert = "日期非法1！"
            return t
        t.day = d
    elif day_week[-1] == "日":
        d = chinese_num_to_int(day_week[:-1])
        if (d != -1 and d <= 0) or d > 31:
            t.alert = "日期非法2！"
            return t
        t.day = d
    elif day_week[0] == "每":
        t.week = -1
    else:
        w = chinese_num_to_int(day_week[1:])
        if w == 7:
            w = 0
        if w < 0 or w > 6:
            t.alert = "星期非法！"
            return t
        t.week = w

    if len(hour_str) == 3:
        hour_str = hour_str[0] + hour_str[2]
    h = chinese_num_to_int(hour_str)
    if h < -1 or h > 23:
        t.alert = "小时非法！"
        return t
    t.hour = h

    if len(minute_str) == 3:
        minute_str = minute_str[0] + minute_str[2]
    mn = chinese_num_to_int(minute_str)
    if mn < -1 or mn > 59:
        t.alert = "分钟非法！"
        return t
    t.minute = mn

    if not match_date_only:
        url_str = date_strs[5]
        if url_str:
            t.url = url_str[1:]  # strip the leading 用
            log.debug("[群管]%s", t.url)
            if not t.url.startswith("http"):
                t.url = "illegal"
                log.debug("[群管]url非法！")
                return t
        t.alert = date_strs[6]
        t.en = True
    t.self_id = botqq
    t.grp_id = grp
    return t


def chinese_num_to_int(text: str) -> int:
    """Convert up to two Chinese numerals (or arabic digits) to an int.

    "每" alone means -1 and "每二" means -2, and so on.
    """
    if not text:
        raise ValueError("empty number")
    if text[0].isdecimal():
        return int(text) if _ATOI.fullmatch(text) else 0
    if text[0] == "每":
        return -chinese_char_to_int(text[1]) if len(text) == 2 else -1
    if len(text) == 1:
        return chinese_char_to_int(text[0])
    ten = chinese_char_to_int(text[0])
    if ten != 10:
        ten *= 10
    ones = chinese_char_to_int(text[1])
    if ones == 10:
        ones = 0
    return ten + ones


def chinese_char_to_int(c: str) -> int:
    """Map a single Chinese numeral to 0..10; 日 and 天 (Sunday) map to 7."""
    if c in ("日", "天"):
        return 7
    index = _DIGITS.find(c)
    return index if index >= 0 else 0