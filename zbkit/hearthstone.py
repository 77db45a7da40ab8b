"""URLs for searching Hearthstone cards and rendering deck codes."""

from __future__ import annotations

SITE = "https://hs.fbigame.com"
USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 6.0; Nexus 5 Build/MRA58N) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/86.0.4240.198 Mobile Safari/537.36"
)
AJAX = "https://hs.fbigame.com/ajax.php?"
PARAMS = (
    "mod=get_cards_list&"
    "mode=-1&"
    "extend=-1&"
    "mutil_extend=&"
    "hero=-1&"
    "rarity=-1&"
    "cost=-1&"
    "mutil_cost=&"
    "techlevel=-1&"
    "type=-1&"
    "collectible=-1&"
    "isbacon=-1&"
    "page=1&"
    "search_type=1&"
    "deckmode=normal"
)
CARD_IMAGES = "https://res.fbigame.com/hs/v13/"
MAX_CARDS = 5

_HASH_MARK = 'var hash = "'


def extract_hash(page: str) -> str:
    """The request hash embedded in the site's front page."""
    _, found, rest = page.partition(_HASH_MARK)
    if not found:
        raise ValueError("hash not found in page")
    return rest.split('"', 1)[0]


def search_url(page_hash: str, keyword: str) -> str:
    """Card search request for ``keyword``."""
    return AJAX + PARAMS + "&hash=" + page_hash + "&search=" + keyword


def deck_image_url(page_hash: str, code: str) -> str:
    """Request that renders the deck ``code`` as an image."""
    return (
        AJAX
        + PARAMS
        + "mod=general_deck_image&deck_code="
        + code
        + "&deck_text=&hash="
        + page_hash
        + "&search="
        + code
    )


def card_image_url(card_id: str, auth_key: str) -> str:
    """Picture of a single card."""
    return CARD_IMAGES + card_id + ".png?auth_key=" + auth_key