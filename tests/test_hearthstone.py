import pytest

from zbkit.hearthstone import (
    AJAX,
    PARAMS,
    card_image_url,
    deck_image_url,
    extract_hash,
    search_url,
)


def test_extract_hash():
    page = '<script>var a = 1; var hash = "abc123"; var b = "x";</script>'
    assert extract_hash(page) == "abc123"


def test_extract_hash_missing():
    with pytest.raises(ValueError):
        extract_hash("<html>nothing here</html>")


def test_search_url():
    url = search_url("abc", "火球术")
    assert url.startswith(AJAX + PARAMS)
    assert url.endswith("&hash=abc&search=火球术")


def test_deck_image_url():
    code = "AAE" + "x" * 70
    url = deck_image_url("h1", code)
    assert url.startswith(AJAX)
    assert f"mod=general_deck_image&deck_code={code}&deck_text=&hash=h1&search={code}" in url


def test_card_image_url():
    assert (
        card_image_url("CS2_029", "k1")
        == "https://res.fbigame.com/hs/v13/CS2_029.png?auth_key=k1"
    )