"""Keyword search for pixiv illustrations through the pixivel API."""

from __future__ import annotations

import json
import re
from typing import Iterable, Mapping
from urllib.parse import quote_plus

import requests

API = "https://api.pixivel.moe/v2/pixiv/illust/search/"
REFERER = "https://pixivel.moe/"
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/94.0.4606.61 Safari/537.36"
)

_HREF = re.compile(r'<a href=".*">')


def print_tags(tags: Iterable[Mapping]) -> str:
    """Render tags as ``#name (translation)`` lines, each preceded by a newline."""
    parts = []
    for tag in tags:
        line = "\n#" + tag.get("name", "")
        translation = tag.get("translation", "")
        if translation:
            line += f" ({translation})"
        parts.append(line)
    return "".join(parts)


def clean_description(text: str) -> str:
    """Strip the HTML line breaks and links from an illustration description."""
    text = text.replace("<br />", "\n").replace("</a>", "")
    return _HREF.sub("", text)


def search_url(keyword: str) -> str:
    """URL of the first result page for ``keyword``."""
    return API + quote_plus(keyword, safe="") + "?page=0"


def parse_search(data) -> list[dict]:
    """The illustrations in a search response; raises RuntimeError on an API error."""
    result = json.loads(data)
    if result.get("error"):
        raise RuntimeError(result.get("message", ""))
    return list((result.get("data") or {}).get("illusts") or [])


def search(keyword: str) -> list[dict]:
    """Search pixivel for illustrations matching ``keyword``."""
    resp = requests.get(
        search_url(keyword),
        headers={"Referer": REFERER, "User-Agent": USER_AGENT},
        timeout=30,
    )
    resp.raise_for_status()
    return parse_search(resp.content)