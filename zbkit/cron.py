"""A small five-field cron expression parser and scheduler."""

from __future__ import annotations

import re
from datetime import datetime, timedelta

_DESCRIPTORS = {
    "@yearly": "0 0 1 1 *",
    "@annually": "0 0 1 1 *",
    "@monthly": "0 0 1 * *",
    "@weekly": "0 0 * * 0",
    "@daily": "0 0 * * *",
    "@midnight": "0 0 * * *",
    "@hourly": "0 * * * *",
}

_MONTHS = {
    name: number
    for number, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}
_WEEKDAYS = {
    name: number
    for number, name in enumerate(("sun", "mon", "tue", "wed", "thu", "fri", "sat"))
}

_FIELDS = (
    ("minute", 0, 59, {}),
    ("hour", 0, 23, {}),
    ("day of month", 1, 31, {}),
    ("month", 1, 12, _MONTHS),
    ("day of week", 0, 6, _WEEKDAYS),
)

_NUMBER = re.compile(r"[0-9]+")
_SEARCH_YEARS = 5


class CronError(ValueError):
    """Raised for a malformed cron expression or an unsatisfiable schedule."""


def _value(text: str, field: str, names: dict[str, int]) -> int:
    lowered = text.lower()
    if lowered in names:
        return names[lowered]
    if not _NUMBER.fullmatch(text):
        raise CronError(f"failed to parse {field} value {text!r}")
    return int(text)


def _parse_field(text: str, field: str, low: int, high: int, names: dict[str, int]):
    """Return the set of allowed values and whether the field is an unstepped wildcard."""
    values: set[int] = set()
    star = False
    for part in text.split(","):
        if not part:
            raise CronError(f"empty element in {field} field {text!r}")
        rng, slash, step_text = part.partition("/")
        if rng in ("*", "?"):
            start, end = low, high
        else:
            first, dash, last = rng.partition("-")
            start = _value(first, field, names)
            end = _value(last, field, names) if dash else start
            if slash and not dash:
                end = high
        step = 1
        if slash:
            if not _NUMBER.fullmatch(step_text):
                raise CronError(f"failed to parse step {step_text!r} in {field} field")
            step = int(step_text)
            if step < 1:
                raise CronError(f"step of {field} field must be positive")
        if rng in ("*", "?") and step == 1:
            star = True
        if start < low or end > high:
            raise CronError(f"{field} value out of range {low}-{high}: {part!r}")
        if start > end:
            raise CronError(f"beginning of range is after end in {field} field: {part!r}")
        values.update(range(start, end + 1, step))
    return frozenset(values), star


class CronSchedule:
    """A parsed schedule of the form ``minute hour day-of-month month day-of-week``."""

    def __init__(self, expr: str) -> None:
        self.expr = expr
        spec = _DESCRIPTORS.get(expr.strip().lower(), expr)
        parts = spec.split()
        if len(parts) != len(_FIELDS):
            raise CronError(f"expected {len(_FIELDS)} fields, found {len(parts)}: {expr!r}")
        parsed = [
            _parse_field(text, field, low, high, names)
            for text, (field, low, high, names) in zip(parts, _FIELDS)
        ]
        (self._minutes, _), (self._hours, _), (self._days, self._dom_star), (
            self._months,
            _,
        ), (self._weekdays, self._dow_star) = parsed

    def __repr__(self) -> str:
        return f"CronSchedule({self.expr!r})"

    def _day_matches(self, moment: datetime) -> bool:
        dom_ok = moment.day in self._days
        dow_ok = moment.isoweekday() % 7 in self._weekdays
        if self._dom_star or self._dow_star:
            return dom_ok and dow_ok
        return dom_ok or dow_ok

    def matches(self, moment: datetime) -> bool:
        """Whether the schedule fires in the minute containing ``moment``."""
        return (
            moment.minute in self._minutes
            and moment.hour in self._hours
            and moment.month in self._months
            and self._day_matches(moment)
        )

    def next_after(self, moment: datetime) -> datetime:
        """The first whole minute strictly after ``moment`` at which the schedule fires."""
        t = moment.replace(second=0, microsecond=0) + timedelta(minutes=1)
        limit = t.year + _SEARCH_YEARS
        while t.year <= limit:
            if t.month not in self._months:
                year, month = (t.year + 1, 1) if t.month == 12 else (t.year, t.month + 1)
                t = t.replace(year=year, month=month, day=1, hour=0, minute=0)
                continue
            if not self._day_matches(t):
                t = t.replace(hour=0, minute=0) + timedelta(days=1)
                continue
            if t.hour not in self._hours:
                t = t.replace(minute=0) + timedelta(hours=1)
                continue
            if t.minute not in self._minutes:
                t += timedelta(minutes=1)
                continue
            return t
        raise CronError(f"no time matches {self.expr!r}")