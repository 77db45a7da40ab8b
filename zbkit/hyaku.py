"""The hundred poems of the Ogura Hyakunin Isshu."""

from __future__ import annotations

import csv
from dataclasses import astuple, dataclass
from pathlib import Path

BED = "https://gitcode.net/u011570312/OguraHyakuninIsshu/-/raw/master/"
CSV_URL = BED + "小倉百人一首.csv"
POEM_COUNT = 100

_LABELS = ("番号", "歌人", "上の句", "下の句", "上の句ひらがな", "下の句ひらがな")
_MARKS = ("●", "◉", "○", "○", "◎", "◎")


@dataclass(frozen=True)
class Poem:
    """One poem: its number, poet, both halves and their kana readings."""

    number: str
    poet: str
    upper: str
    lower: str
    upper_kana: str
    lower_kana: str

    def __str__(self) -> str:
        return "".join(
            f"{mark}{label}：{value}\n"
            for mark, label, value in zip(_MARKS, _LABELS, astuple(self))
        )


def load_poems(path) -> list[Poem]:
    """Read the poem table, checking it has all 100 poems in order."""
    with Path(path).open(encoding="utf-8", newline="") as fh:
        records = list(csv.reader(fh))[1:]  # skip the title row
    if len(records) != POEM_COUNT:
        raise ValueError("invalid csvfile")
    poems = []
    for expected, record in enumerate(records, start=1):
        if len(record) != 6:
            raise ValueError("invalid csvfile")
        if int(record[0]) != expected:
            raise ValueError("invalid csvfile")
        poems.append(Poem(*record))
    return poems


def image_urls(number: int) -> tuple[str, str]:
    """The card picture and the poem picture of poem ``number`` (1 to 100)."""
    if not 1 <= number <= POEM_COUNT:
        raise ValueError("超出范围")
    return f"{BED}img/{number:03d}.jpg", f"{BED}img/{number:03d}.png"