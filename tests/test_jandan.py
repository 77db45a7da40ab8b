import pytest

from zbkit.jandan import (
    PictureStore,
    extract_page_total,
    extract_pic_links,
    extract_previous_page,
    picture_id,
)

PAGE = """
<html><body>
<div id="comments">
  <div>header</div>
  <div><div><span class="current-comment-page">[123]</span></div></div>
  <div class="comments">
    <div class="cp-pagenavi">
      <a class="previous-comment-page" href="//jandan.net/pic/page-2">prev</a>
    </div>
  </div>
</div>
<a href="//img.example.com/a.jpg" class="view_img_link">[查看原图]</a>
<a href="//img.example.com/b.gif" class="view_img_link">[查看原图]</a>
</body></html>
"""


def test_picture_id_check_value():
    assert picture_id("123456789") == 0xB90956C775A41001


def test_picture_id_range_and_determinism():
    url = "https://img.example.com/a.jpg"
    assert picture_id(url) == picture_id(url)
    assert 0 <= picture_id(url) < 1 << 64
    assert picture_id(url) != picture_id(url + "x")


@pytest.fixture
def store(tmp_path):
    with PictureStore(tmp_path / "pics.db") as s:
        yield s


def test_store_add_and_contains(store):
    url = "https://img.example.com/a.jpg"
    assert store.add(url) is True
    assert store.contains(picture_id(url))
    assert not store.contains(picture_id("https://img.example.com/other.jpg"))
    assert store.count() == 1


def test_store_duplicate(store):
    url = "https://img.example.com/a.jpg"
    store.add(url)
    assert store.add(url) is False
    assert store.count() == 1


def test_store_random_url(store):
    urls = {"https://img.example.com/a.jpg", "https://img.example.com/b.jpg"}
    for u in urls:
        store.add(u)
    assert store.random_url() in urls


def test_store_empty_random_raises(store):
    with pytest.raises(LookupError):
        store.random_url()


def test_extract_page_total():
    assert extract_page_total(PAGE) == 123


def test_extract_page_total_missing():
    with pytest.raises(LookupError):
        extract_page_total("<html><body><p>x</p></body></html>")


def test_extract_pic_links():
    assert extract_pic_links(PAGE) == [
        "https://img.example.com/a.jpg",
        "https://img.example.com/b.gif",
    ]


def test_extract_previous_page():
    assert extract_previous_page(PAGE) == "https://jandan.net/pic/page-2"


def test_extract_previous_page_missing():
    with pytest.raises(LookupError):
        extract_previous_page("<html><body><div id='comments'></div></body></html>")