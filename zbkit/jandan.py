"""Collecting random pictures from the jandan.net picture board."""

from __future__ import annotations

import re
import sqlite3
import threading

from lxml import html as lxml_html

API = "http://jandan.net/pic"

_CRC64_ISO_POLY = 0xD800000000000000
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _make_table() -> tuple[int, ...]:
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            crc = (crc >> 1) ^ _CRC64_ISO_POLY if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_TABLE = _make_table()
_NUMBER = re.compile(r"\d+")

_PAGE_XPATH = (
    "//*[@id='comments']/div[2]/div/span[@class='current-comment-page']/text()"
)
_PIC_XPATH = "//*[@class='view_img_link']"
_PREVIOUS_XPATH = (
    "//*[@id='comments']/div[@class='comments']/div[@class='cp-pagenavi']"
    "/a[@class='previous-comment-page']"
)


def picture_id(url: str) -> int:
    """CRC-64 (ISO polynomial) of the URL, as an unsigned 64-bit number."""
    crc = _MASK64
    for byte in url.encode("utf-8"):
        crc = _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK64


def _to_signed(value: int) -> int:
    return value - (1 << 64) if value >= 1 << 63 else value


class PictureStore:
    """SQLite table of picture URLs keyed by :func:`picture_id`."""

    def __init__(self, path) -> None:
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._lock = threading.Lock()
        with self._lock, self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS picture (id INTEGER PRIMARY KEY, url TEXT)"
            )

    def add(self, url: str) -> bool:
        """Store the URL; False if a picture with the same id is already stored."""
        pid = _to_signed(picture_id(url))
        with self._lock, self._conn:
            cur = self._conn.execute(
                "INSERT OR IGNORE INTO picture (id, url) VALUES (?, ?)", (pid, url)
            )
        return cur.rowcount == 1

    def contains(self, pid: int) -> bool:
        with self._lock:
            row = self._conn.execute(
                "SELECT 1 FROM picture WHERE id = ?", (_to_signed(pid),)
            ).fetchone()
        return row is not None

    def count(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM picture").fetchone()[0]

    def random_url(self) -> str:
        """A random stored URL; raises LookupError when the table is empty."""
        with self._lock:
            row = self._conn.execute(
                "SELECT url FROM picture ORDER BY RANDOM() LIMIT 1"
            ).fetchone()
        if row is None:
            raise LookupError("no pictures stored")
        return row[0]

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> PictureStore:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def _parse(page: str):
    return lxml_html.fromstring(page)


def extract_page_total(html: str) -> int:
    """The current page number shown on the board, i.e. how many pages there are."""
    texts = _parse(html).xpath(_PAGE_XPATH)
    if not texts:
        raise LookupError("page counter not found")
    match = _NUMBER.search(str(texts[0]))
    if match is None:
        raise ValueError(f"no number in page counter {str(texts[0])!r}")
    return int(match.group())


def extract_pic_links(html: str) -> list[str]:
    """Full URLs of every picture link on the page."""
    links = []
    for element in _parse(html).xpath(_PIC_XPATH):
        attrs = list(element.attrib.values())
        if attrs:
            links.append("https:" + attrs[0])
    return links


def extract_previous_page(html: str) -> str:
    """URL of the previous page; raises LookupError when there is none."""
    found = _parse(html).xpath(_PREVIOUS_XPATH)
    if not found:
        raise LookupError("previous page link not found")
    attrs = list(found[0].attrib.values())
    if len(attrs) < 2:
        raise LookupError("previous page link has no target")
    return "https:" + attrs[1]