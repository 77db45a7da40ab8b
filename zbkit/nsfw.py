"""Describing how safe a picture is from its classifier scores."""

from __future__ import annotations

from dataclasses import dataclass

HSO_IMAGE = "https://gchat.qpic.cn/gchatpic_new//--4234EDEC5F147A4C319A41149D7E0EA9/0"
THRESHOLD = 0.3


@dataclass(frozen=True)
class Scores:
    """Classifier probabilities for the five picture categories."""

    drawings: float = 0.0
    hentai: float = 0.0
    neutral: float = 0.0
    porn: float = 0.0
    sexy: float = 0.0


def _flags(p: Scores) -> list[str]:
    flags = []
    if p.hentai > THRESHOLD:
        flags.append(" hentai")
    if p.porn > THRESHOLD:
        flags.append(" porn")
    if p.sexy > THRESHOLD:
        flags.append(" hso")
    return flags


def judge(p: Scores) -> str:
    """A verdict for a picture someone asked to have rated."""
    if p.neutral > THRESHOLD:
        return "普通哦"
    if p.drawings > THRESHOLD or p.neutral < THRESHOLD:
        kind = "二次元"
    else:
        kind = "三次元"
    return kind + "".join(_flags(p))


def auto_judge(p: Scores) -> str | None:
    """A verdict for an unprompted picture, or None when it deserves no comment."""
    if p.neutral > THRESHOLD:
        return None
    kind = "二次元" if p.drawings > THRESHOLD else "三次元"
    flags = _flags(p)
    if not flags:
        return None
    return kind + "".join(flags)