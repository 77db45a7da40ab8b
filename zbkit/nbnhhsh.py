"""Guessing the meaning of pinyin-initial abbreviations."""

from __future__ import annotations

import json

import requests

API = "https://lab.magiconch.com/api/nbnhhsh/guess"


def parse_guess(data) -> list[str]:
    """Translations from a guess response, falling back to input suggestions."""
    result = json.loads(data)
    if not isinstance(result, list) or not result or not isinstance(result[0], dict):
        return []
    first = result[0]
    values = first["trans"] if "trans" in first else first.get("inputting")
    if not isinstance(values, list):
        return []
    return [v if isinstance(v, str) else json.dumps(v, ensure_ascii=False) for v in values]


def guess(text: str) -> list[str]:
    """Ask the guessing service what the abbreviation ``text`` stands for."""
    resp = requests.post(API, data={"text": text}, timeout=30)
    return parse_guess(resp.content)