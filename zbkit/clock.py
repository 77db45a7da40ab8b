"""Persistent group reminders driven by cron expressions or packed dates."""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime
from typing import Callable

from .cron import CronError, CronSchedule
from .schedule import next_wake_time, should_fire
from .timers import Timer

log = logging.getLogger(__name__)

Sender = Callable[[int, int, list], None]

_COLUMNS = "id, emdwhm, sid, gid, alert, cron, url"


def build_alert_message(timer: Timer) -> list[dict]:
    """Message segments for a reminder: @all, the alert text and an optional image."""
    message = [
        {"type": "at", "data": {"qq": "all"}},
        {"type": "text", "data": {"text": timer.alert}},
    ]
    if timer.url:
        message.append({"type": "image", "data": {"file": timer.url, "cache": "0"}})
    return message


class TimerStore:
    """SQLite table holding timers keyed by their id."""

    def __init__(self, path) -> None:
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._lock = threading.Lock()
        with self._lock, self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS timer ("
                "id INTEGER PRIMARY KEY, emdwhm INTEGER, sid INTEGER, gid INTEGER, "
                "alert TEXT, cron TEXT, url TEXT)"
            )

    def insert(self, timer: Timer) -> None:
        """Insert the timer, replacing any stored one with the same id."""
        with self._lock, self._conn:
            self._conn.execute(
                f"REPLACE INTO timer ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    timer.id,
                    timer.emdwhm,
                    timer.self_id,
                    timer.grp_id,
                    timer.alert,
                    timer.cron,
                    timer.url,
                ),
            )

    def delete(self, key: int) -> None:
        """Remove the timer with the given id."""
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM timer WHERE id = ?", (key,))

    def all(self) -> list[Timer]:
        """Every stored timer."""
        with self._lock:
            rows = self._conn.execute(f"SELECT {_COLUMNS} FROM timer").fetchall()
        return [Timer(*row) for row in rows]

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> TimerStore:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class Clock:
    """Keeps timers in memory and storage and sends their alerts when due.

    ``sender`` is called as ``sender(self_id, grp_id, message)``; a ``self_id``
    of 0 means any bot may send.
    """

    def __init__(self, store: TimerStore, sender: Sender) -> None:
        self._store = store
        self._sender = sender
        self._timers: dict[int, Timer] = {}
        self._workers: dict[int, threading.Event] = {}
        self._lock = threading.RLock()
        for timer in store.all():
            self.register_timer(timer, False)

    def register_timer(self, timer: Timer, save: bool) -> bool:
        """Register and start a timer; ``save`` assigns its id and stores it.

        Returns whether a worker now runs for the timer. A cron timer with a bad
        expression gets the error in ``alert`` and is not registered.
        """
        if save:
            key = timer.timer_id()
            timer.id = key
        else:
            key = timer.id
        old = self.get_timer(key)
        if old is not None and old is not timer:
            old.en = False
            self._stop_worker(key)
        log.info("[群管]注册计时器 %d", key)

        if timer.cron:
            try:
                schedule = CronSchedule(timer.cron)
            except CronError as err:
                timer.alert = str(err)
                return False
            if save:
                try:
                    self.add_timer_into_db(timer)
                except sqlite3.Error as err:
                    log.error("[群管]保存计时器失败: %s", err)
                    return False
            self.add_timer_into_map(timer)
            self._start_worker(key, self._run_cron, timer, schedule)
            return True

        if save:
            try:
                self.add_timer_into_db(timer)
            except sqlite3.Error as err:
                log.error("[群管]保存计时器失败: %s", err)
        self.add_timer_into_map(timer)
        if not timer.en:
            return False
        self._start_worker(key, self._run_date, timer)
        return True

    def cancel_timer(self, key: int) -> bool:
        """Stop and forget a timer; False if unknown or it could not be deleted."""
        timer = self.get_timer(key)
        if timer is None:
            return False
        if not timer.cron:
            timer.en = False
        self._stop_worker(key)
        with self._lock:
            self._timers.pop(key, None)
        try:
            self._store.delete(key)
        except sqlite3.Error as err:
            log.error("[群管]删除计时器失败: %s", err)
            return False
        return True

    def list_timers(self, grp_id: int) -> list[str]:
        """Human-readable schedule lines for every timer of a group."""
        with self._lock:
            timers = list(self._timers.values())
        lines = []
        for timer in timers:
            if timer.grp_id != grp_id:
                continue
            info = timer.timer_info()
            msg = info[info.index("]") + 1 :] + "\n"
            msg = msg.replace("-1", "每")
            msg = msg.replace("月0日0周", "月周天")
            msg = msg.replace("月0日", "月")
            msg = msg.replace("日0周", "日")
            lines.append(msg)
        return lines

    def get_timer(self, key: int) -> Timer | None:
        with self._lock:
            return self._timers.get(key)

    def add_timer_into_db(self, timer: Timer) -> None:
        self._store.insert(timer)

    def add_timer_into_map(self, timer: Timer) -> None:
        with self._lock:
            self._timers[timer.id] = timer

    def close(self) -> None:
        """Stop every worker; the store stays open."""
        with self._lock:
            workers = list(self._workers.values())
            self._workers.clear()
        for stop in workers:
            stop.set()

    def __enter__(self) -> Clock:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _start_worker(self, key: int, target, *args) -> None:
        stop = threading.Event()
        with self._lock:
            self._workers[key] = stop
        thread = threading.Thread(target=target, args=(*args, stop), daemon=True)
        thread.start()

    def _stop_worker(self, key: int) -> None:
        with self._lock:
            stop = self._workers.pop(key, None)
        if stop is not None:
            stop.set()

    def _send(self, timer: Timer) -> None:
        try:
            self._sender(timer.self_id, timer.grp_id, build_alert_message(timer))
        except Exception:
            log.exception("[群管]发送提醒失败")

    def _run_cron(self, timer: Timer, schedule: CronSchedule, stop: threading.Event) -> None:
        while not stop.is_set():
            now = datetime.now()
            try:
                nxt = schedule.next_after(now)
            except CronError as err:
                log.error("[群管]计时器%08x无法调度: %s", timer.id, err)
                return
            if stop.wait(max(0.0, (nxt - now).total_seconds())):
                return
            self._send(timer)

    def _run_date(self, timer: Timer, stop: threading.Event) -> None:
        while timer.en and not stop.is_set():
            now = datetime.now()
            wake = next_wake_time(timer, now)
            delay = max(0.0, (wake - now).total_seconds())
            log.info("[群管]计时器%08x将睡眠%ds", timer.id, int(delay))
            if stop.wait(delay):
                return
            if should_fire(timer, datetime.now()):
                self._send(timer)