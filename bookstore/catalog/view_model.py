"""
Filter and sort projection of the catalogue.

``derive()`` is the only way the page gets its list: the store's items,
filtered by the search text and ordered by the selected sort key. It
never mutates its input.
"""

from __future__ import annotations

import unicodedata
from typing import Callable, Dict, List, Optional, Tuple

from .schemas import SORT_KEYS, CatalogItem


def _normalize(s: Optional[str]) -> str:
    """Normalize a string for case-insensitive comparison.

    Text is composed (NFC) first so that typed and stored accents match
    whatever form the browser or the seed file used.
    """
    return unicodedata.normalize("NFC", s or "").strip().casefold()


def collation_key(text: str) -> Tuple[str, str]:
    """Locale-aware sort key for product names.

    The primary key ignores case and diacritics ("Sách" sorts next to
    "Sach"); the casefolded text breaks ties so accented names follow
    their plain counterparts. ``đ`` has no Unicode decomposition and is
    folded to ``d`` by hand.
    """
    folded = unicodedata.normalize("NFD", _normalize(text).replace("đ", "d"))
    base = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return base, _normalize(text)


# sort key -> (item key function, descending)
_SORTS: Dict[str, Tuple[Callable[[CatalogItem], object], bool]] = {
    "name-asc": (lambda item: collation_key(item.name), False),
    "name-desc": (lambda item: collation_key(item.name), True),
    "price-asc": (lambda item: item.price, False),
    "price-desc": (lambda item: item.price, True),
}


def filter_items(items: List[CatalogItem], query: Optional[str]) -> List[CatalogItem]:
    nq = _normalize(query)
    if not nq:
        return list(items)
    return [item for item in items if nq in _normalize(item.name)]


def derive(
    items: List[CatalogItem],
    query: Optional[str] = "",
    sort_key: str = "none",
) -> List[CatalogItem]:
    """Return the display list for ``items``.

    Parameters
    ----------
    items : List[CatalogItem]
        The store's items, in store order.
    query : Optional[str]
        Search text. Trimmed and matched case-insensitively as a
        substring of the product name. Empty matches everything.
    sort_key : str
        One of ``SORT_KEYS``. ``"none"`` keeps the filtered order.

    Returns
    -------
    List[CatalogItem]
        A new list; ``items`` is left untouched.
    """
    if sort_key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_key!r}")

    result = filter_items(items, query)
    if sort_key == "none":
        return result

    key, descending = _SORTS[sort_key]
    return sorted(result, key=key, reverse=descending)
