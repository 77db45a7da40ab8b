"""Approving group join requests through a timestamp published in a GitHub gist.

The gist's file name is the MD5 of the group number in lower-case hex and its
content the current unix time; it is accepted within ten minutes.
"""

from __future__ import annotations

import hashlib
import logging
import re
import time
from typing import Callable

import requests

from .groupstore import GroupStore

log = logging.getLogger(__name__)

GIST_RAW = "https://gist.githubusercontent.com/{user}/{hash}/raw/{file}"
VALID_SECONDS = 600
_INTEGER = re.compile(r"[+-]?[0-9]+")


def gist_url(user: str, gist_hash: str, gid: int) -> str:
    """Raw URL of the verification file for the group."""
    name = hashlib.md5(str(gid).encode("ascii")).hexdigest()
    return GIST_RAW.format(user=user, hash=gist_hash, file=name)


def _http_get(url: str) -> bytes:
    resp = requests.get(url, timeout=30)
    resp.raise_for_status()
    return resp.content


def check_new_user(
    store: GroupStore,
    qq: int,
    gid: int,
    user: str,
    gist_hash: str,
    fetch: Callable[[str], bytes] | None = None,
    now: float | None = None,
) -> tuple[bool, str]:
    """Verify a join request; returns whether to approve and the refusal reason."""
    if store.has_github_user(user):
        return False, "该github用户已入群"
    if fetch is None:
        fetch = _http_get
    url = gist_url(user, gist_hash, gid)
    log.debug("[gist]visit url: %s", url)
    try:
        data = fetch(url)
    except (requests.RequestException, OSError) as err:
        return False, "无法连接到gist: " + str(err)
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else str(data)
    log.debug("[gist]get data: %s", text)
    if not _INTEGER.fullmatch(text):
        return False, "时间戳格式错误: " + text
    stamp = int(text)
    current = int(time.time() if now is None else now)
    if abs(current - stamp) < VALID_SECONDS:
        store.add_member(qq, user)
        return True, ""
    return False, "时间戳超时"