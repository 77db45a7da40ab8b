"""Per-group galleries of wives, one drawn for each member every day."""

from __future__ import annotations

import hashlib
import random
from datetime import date
from pathlib import Path

ADD_PREFIX = "添加wife"
REMOVE_PREFIX = "删除wife"
SWITCH_SUFFIX = "所有人均可添加wife"

_ALLOW_WORDS = frozenset({"设置", "授予", "让"})
_DENY_WORDS = frozenset({"取消", "撤销", "不让"})
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    sign = "-" if n < 0 else ""
    n = abs(n)
    digits = []
    while n:
        n, r = divmod(n, 36)
        digits.append(_BASE36[r])
    return sign + "".join(reversed(digits))


def daily_index(name: str, today: date, count: int) -> int:
    """An index below ``count`` fixed for this name on this day."""
    if count <= 0:
        raise ValueError("count must be positive")
    key = f"{name}{today.year}{today.month}{today.day}".encode("utf-8")
    seed = int.from_bytes(hashlib.md5(key).digest()[:8], "little", signed=True)
    return random.Random(seed).randrange(count)


def clean_name(text: str, prefix: str) -> str:
    """The wife's name after ``prefix``, without spaces or path separators."""
    text = text.replace(" ", "")
    index = text.rfind(prefix)
    if index >= 0:
        text = text[index + len(prefix) :]
    return text.replace("/", "").replace("\\", "")


def everyone_switch(text: str) -> bool | None:
    """Whether a switch command allows everyone to add wives; None if unrecognised."""
    text = text.replace(" ", "")
    index = text.rfind(SWITCH_SUFFIX)
    word = text[:index] if index >= 0 else text
    if word in _ALLOW_WORDS:
        return True
    if word in _DENY_WORDS:
        return False
    return None


class WifeGallery:
    """Wife pictures stored in one folder per group under ``base``."""

    def __init__(self, base) -> None:
        self.base = Path(base)

    def _folder(self, gid: int) -> Path:
        return self.base / _base36(gid)

    def wives(self, gid: int) -> list[str]:
        """Names of the group's wives in name order."""
        folder = self._folder(gid)
        if not folder.is_dir():
            return []
        return sorted(p.name for p in folder.iterdir())

    def draw(self, gid: int, name: str, today: date | None = None) -> tuple[str, Path]:
        """Today's wife for member ``name``; raises LookupError if the group has none."""
        wives = self.wives(gid)
        if not wives:
            raise LookupError("一个wife也没有哦~")
        if len(wives) == 1:
            chosen = wives[0]
        else:
            chosen = wives[daily_index(name, today or date.today(), len(wives))]
        return chosen, self._folder(gid) / chosen

    def add(self, gid: int, name: str, data: bytes) -> Path:
        """Save a wife picture under ``name``."""
        name = name.replace("/", "").replace("\\", "")
        if not name:
            raise ValueError("没有找到wife的名字！")
        folder = self._folder(gid)
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / name
        path.write_bytes(data)
        return path

    def remove(self, gid: int, name: str) -> None:
        """Delete a wife; raises FileNotFoundError if there is no such wife."""
        name = name.replace("/", "").replace("\\", "")
        if not name:
            raise ValueError("没有找到wife的名字！")
        (self._folder(gid) / name).unlink()