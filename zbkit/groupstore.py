"""Per-group welcome and farewell messages and verified GitHub members."""

from __future__ import annotations

import sqlite3
import threading


class GroupStore:
    """SQLite storage for the group manager."""

    def __init__(self, path) -> None:
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._lock = threading.Lock()
        with self._lock, self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS welcome (gid INTEGER PRIMARY KEY, msg TEXT)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS farewell (gid INTEGER PRIMARY KEY, msg TEXT)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS member (qq INTEGER PRIMARY KEY, ghun TEXT)"
            )

    def _set(self, table: str, gid: int, msg: str) -> None:
        with self._lock, self._conn:
            self._conn.execute(f"REPLACE INTO {table} (gid, msg) VALUES (?, ?)", (gid, msg))

    def _get(self, table: str, gid: int) -> str | None:
        with self._lock:
            row = self._conn.execute(
                f"SELECT msg FROM {table} WHERE gid = ?", (gid,)
            ).fetchone()
        return row[0] if row else None

    def set_welcome(self, gid: int, msg: str) -> None:
        self._set("welcome", gid, msg)

    def welcome(self, gid: int) -> str | None:
        """The group's welcome template, or None if none is set."""
        return self._get("welcome", gid)

    def set_farewell(self, gid: int, msg: str) -> None:
        self._set("farewell", gid, msg)

    def farewell(self, gid: int) -> str | None:
        """The group's farewell template, or None if none is set."""
        return self._get("farewell", gid)

    def has_github_user(self, ghun: str) -> bool:
        """Whether the GitHub user has already joined through verification."""
        with self._lock:
            row = self._conn.execute(
                "SELECT 1 FROM member WHERE ghun = ?", (ghun,)
            ).fetchone()
        return row is not None

    def add_member(self, qq: int, ghun: str) -> None:
        with self._lock, self._conn:
            self._conn.execute("REPLACE INTO member (qq, ghun) VALUES (?, ?)", (qq, ghun))

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> GroupStore:
        return self

    def __exit__(self, *exc) -> None:
        self.close()