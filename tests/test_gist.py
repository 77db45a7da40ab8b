import pytest

from zbkit.gist import check_new_user, gist_url
from zbkit.groupstore import GroupStore

NOW = 1_000_000


@pytest.fixture
def store(tmp_path):
    s = GroupStore(tmp_path / "g.db")
    yield s
    s.close()


def test_gist_url():
    assert gist_url("alice", "abc", 123) == (
        "https://gist.githubusercontent.com/alice/abc/raw/202cb962ac59075b964b07152d234b70"
    )


def test_accepts_recent_timestamp(store):
    seen = []

    def fetch(url):
        seen.append(url)
        return str(NOW - 10).encode()

    assert check_new_user(store, 7, 123, "alice", "abc", fetch, NOW) == (True, "")
    assert seen == [gist_url("alice", "abc", 123)]
    assert store.has_github_user("alice")


def test_rejects_old_timestamp(store):
    result = check_new_user(
        store, 7, 123, "alice", "abc", lambda url: str(NOW - 600).encode(), NOW
    )
    assert result == (False, "时间戳超时")
    assert not store.has_github_user("alice")


def test_future_timestamp_within_window(store):
    ok, _ = check_new_user(store, 7, 1, "bob", "h", lambda url: str(NOW + 599).encode(), NOW)
    assert ok


def test_rejects_bad_format(store):
    assert check_new_user(store, 7, 1, "bob", "h", lambda url: b"abc", NOW) == (
        False,
        "时间戳格式错误: abc",
    )


def test_rejects_known_user(store):
    store.add_member(1, "carol")
    called = []
    result = check_new_user(store, 2, 1, "carol", "h", lambda url: called.append(url), NOW)
    assert result == (False, "该github用户已入群")
    assert called == []


def test_fetch_failure(store):
    def fetch(url):
        raise OSError("boom")

    ok, reason = check_new_user(store, 2, 1, "dave", "h", fetch, NOW)
    assert not ok
    assert reason == "无法连接到gist: boom"