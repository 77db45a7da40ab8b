"""Generating over-the-top "绝绝子" sentences from a verb and a noun."""

from __future__ import annotations

import json

import requests

API = "https://www.offjuan.com/api/juejuezi/text"
REFERER = "https://juejuezi.offjuan.com/"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
)
KEYWORD = "绝绝子"


def build_payload(verb: str, noun: str) -> str:
    """JSON request body for the generator."""
    return json.dumps({"verb": verb, "noun": noun}, ensure_ascii=False, separators=(",", ":"))


def strip_keyword(text: str) -> str:
    """The message with every occurrence of the keyword removed."""
    return text.replace(KEYWORD, "")


def request_text(verb: str, noun: str) -> str:
    """Ask the generator for a sentence; empty if the reply has no text."""
    resp = requests.post(
        API,
        data=build_payload(verb, noun).encode("utf-8"),
        headers={"Referer": REFERER, "User-Agent": USER_AGENT},
        timeout=30,
    )
    result = json.loads(resp.content)
    text = result.get("text") if isinstance(result, dict) else None
    if text is None:
        return ""
    return text if isinstance(text, str) else json.dumps(text, ensure_ascii=False)