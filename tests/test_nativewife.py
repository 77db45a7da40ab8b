from datetime import date

import pytest

from zbkit.nativewife import (
    WifeGallery,
    clean_name,
    daily_index,
    everyone_switch,
)


def test_daily_index_stable_and_in_range():
    day = date(2022, 6, 13)
    first = daily_index("alice", day, 7)
    assert first == daily_index("alice", day, 7)
    assert 0 <= first < 7


def test_daily_index_rejects_empty():
    with pytest.raises(ValueError):
        daily_index("alice", date(2022, 6, 13), 0)


def test_daily_index_varies_over_days():
    results = {daily_index("bob", date(2022, 1, d), 50) for d in range(1, 29)}
    assert len(results) > 1


def test_clean_name():
    assert clean_name("添加wife 小 明/x\\y", "添加wife") == "小明xy"


def test_clean_name_remove_prefix():
    assert clean_name("删除wife 蕾姆", "删除wife") == "蕾姆"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("让所有人均可添加wife", True),
        ("授予 所有人均可添加wife", True),
        ("不让所有人均可添加wife", False),
        ("撤销所有人均可添加wife", False),
        ("随便所有人均可添加wife", None),
    ],
)
def test_everyone_switch(text, expected):
    assert everyone_switch(text) is expected


@pytest.fixture
def gallery(tmp_path):
    return WifeGallery(tmp_path)


def test_empty_gallery(gallery):
    assert gallery.wives(1) == []
    with pytest.raises(LookupError):
        gallery.draw(1, "alice")


def test_add_and_list(gallery):
    gallery.add(36, "b", b"2")
    path = gallery.add(36, "a", b"1")
    assert path.read_bytes() == b"1"
    assert path.parent.name == "10"
    assert gallery.wives(36) == ["a", "b"]


def test_draw_single(gallery):
    gallery.add(5, "only", b"x")
    name, path = gallery.draw(5, "alice", date(2022, 6, 13))
    assert name == "only"
    assert path.read_bytes() == b"x"


def test_draw_stable(gallery):
    for n in ("a", "b", "c", "d"):
        gallery.add(5, n, n.encode())
    day = date(2022, 6, 13)
    first = gallery.draw(5, "alice", day)
    assert first == gallery.draw(5, "alice", day)
    assert first[0] in gallery.wives(5)


def test_remove(gallery):
    gallery.add(5, "a", b"1")
    gallery.remove(5, "a")
    assert gallery.wives(5) == []
    with pytest.raises(FileNotFoundError):
        gallery.remove(5, "a")


def test_add_empty_name(gallery):
    with pytest.raises(ValueError):
        gallery.add(5, "//", b"1")