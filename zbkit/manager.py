"""Group manager helpers: bans, welcome templates, switches and join checks."""

from __future__ import annotations

import random
import re
from typing import Mapping, Sequence

MAX_BAN_MINUTES = 43199  # a ban may last just under one month

VERIFY_ENABLE = 0x1
VERIFY_DISABLE = 0x7FFF_FFFF_FFFF_FFFE
GIST_ENABLE = 0x10
GIST_DISABLE = 0x7FFF_FFFF_FFFF_FFFD

_ENABLE_WORDS = frozenset({"开启", "打开", "启用"})
_DISABLE_WORDS = frozenset({"关闭", "关掉", "禁用"})

_ADMIN_UNITS = {"分钟": 1, "小时": 60, "天": 60 * 24}
_SELF_UNITS = {
    **dict.fromkeys(("分钟", "min", "mins", "m"), 1),
    **dict.fromkeys(("小时", "hour", "hours", "h"), 60),
    **dict.fromkeys(("天", "day", "days", "d"), 60 * 24),
}

_ANSWER_KEY = "答案：".encode("utf-8")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_LUCKY_POOL = 10


def ban_seconds(amount: int, unit: str, self_ban: bool) -> int:
    """Ban length in seconds for ``amount`` of ``unit``; unknown units mean minutes.

    A self-imposed ban also understands English unit names. The result never
    exceeds one month.
    """
    units = _SELF_UNITS if self_ban else _ADMIN_UNITS
    minutes = int(amount) * units.get(unit, 1)
    if minutes >= 43200:
        minutes = MAX_BAN_MINUTES
    return minutes * 60


def welcome_to_cq(template: str, uid: int, nickname: str, gid: int, group_name: str) -> str:
    """Expand ``{at}``, ``{nickname}``, ``{avatar}``, ``{uid}``, ``{gid}`` and ``{groupname}``."""
    uid_text = str(uid)
    replacements = (
        ("{at}", f"[CQ:at,qq={uid_text}]"),
        ("{nickname}", nickname),
        ("{avatar}", f"[CQ:image,file=http://q4.qlogo.cn/g?b=qq&nk={uid_text}&s=640]"),
        ("{uid}", uid_text),
        ("{gid}", str(gid)),
        ("{groupname}", group_name),
    )
    text = template
    for placeholder, value in replacements:
        text = text.replace(placeholder, value)
    return text


def unescape_brackets(content: str) -> str:
    """Turn escaped square brackets back into CQ code brackets."""
    return content.replace("&#91;", "[").replace("&#93;", "]")


def apply_switch(data: int, option: str, enable_mask: int, disable_mask: int) -> int:
    """Apply an on/off word to a flag word; raises ValueError for other words."""
    if option in _ENABLE_WORDS:
        return data | enable_mask
    if option in _DISABLE_WORDS:
        return data & disable_mask
    raise ValueError(f"unknown option {option!r}")


def parse_join_answer(comment: str) -> tuple[str, str]:
    """Split the ``user/gisthash`` answer out of a join request comment.

    Raises ValueError with the refusal reason when the answer is malformed.
    """
    raw = comment.encode("utf-8")
    start = raw.find(_ANSWER_KEY) + len(_ANSWER_KEY)
    answer = raw[start:].decode("utf-8", errors="replace")
    divider = answer.find("/")
    if divider <= 0:
        raise ValueError("格式错误!")
    return answer[:divider], answer[divider + 1 :]


def pick_lucky_member(members: Sequence[Mapping], rng: random.Random | None = None) -> Mapping:
    """Pick one of the ten members who spoke most recently."""
    if not members:
        raise ValueError("no members to choose from")
    rng = rng or random.Random()
    ordered = sorted(members, key=lambda m: int(m.get("last_sent_time", 0)))
    pool = ordered[-_LUCKY_POOL:]
    return pool[rng.randrange(len(pool))]


def make_quiz(rng: random.Random | None = None) -> tuple[int, int, int]:
    """Two addends below 100 and their sum for the join verification quiz."""
    rng = rng or random.Random()
    a = rng.randrange(100)
    b = rng.randrange(100)
    return a, b, a + b


def check_quiz_answer(text: str, expected: int) -> bool | None:
    """True for the right sum, False for a wrong number, None if not a number."""
    stripped = text.replace(" ", "")
    if not _INTEGER.fullmatch(stripped):
        return None
    return int(stripped) == expected