"""
HTML rendering for the catalogue page.

The renderer has no state of its own. ``render()`` turns an already
derived list into product blocks and binds one delete action per
displayed item; the web layer looks actions up by item id instead of
reaching for a global callback. Templates live in ``templates/`` and
are rendered with Jinja2.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .schemas import CatalogItem
from .store import placeholder_image_url

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

NO_RESULTS_MESSAGE = "Không tìm thấy sản phẩm nào."
LOADING_MESSAGE = "Đang tải sản phẩm..."
LOAD_ERROR_MESSAGE = "Lỗi khi tải sản phẩm. Vui lòng thử lại."

SORT_LABELS = {
    "none": "Mặc định",
    "name-asc": "Tên: A → Z",
    "name-desc": "Tên: Z → A",
    "price-asc": "Giá: thấp → cao",
    "price-desc": "Giá: cao → thấp",
}


def format_price(price: float, suffix: str = "₫") -> str:
    """Format a price the way the vi-VN locale does.

    Thousands are grouped with ``.``, the decimal separator is ``,`` and
    at most three fraction digits are kept, e.g. ``120000`` becomes
    ``"120.000₫"`` and ``1234.5`` becomes ``"1.234,5₫"``.
    """
    text = f"{price:,.3f}".rstrip("0").rstrip(".")
    return text.translate(str.maketrans(",.", ".,")) + suffix


@dataclass
class RenderedList:
    """The list region of the page plus the delete actions bound to it."""

    html: Markup
    actions: Dict[int, Callable[..., Any]] = field(default_factory=dict)
    placeholder: Optional[str] = None


class CatalogRenderer:
    def __init__(self, template_dir: Path = TEMPLATE_DIR, currency_suffix: str = "₫") -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self.currency_suffix = currency_suffix

    def _card(self, item: CatalogItem) -> Dict[str, Any]:
        return {
            "id": item.id,
            "name": item.name,
            "description": item.description,
            "price_str": format_price(item.price, self.currency_suffix),
            "image_url": item.image_url or placeholder_image_url(item.name),
            "delete_url": f"/products/{item.id}/delete",
        }

    def _placeholder(self, kind: str, message: str) -> RenderedList:
        template = self.env.get_template("product_list.html")
        html = template.render(cards=[], placeholder=kind, message=message)
        return RenderedList(html=Markup(html), placeholder=kind)

    def render(self, items: List[CatalogItem], on_delete: Callable[..., Any]) -> RenderedList:
        if not items:
            return self._placeholder("empty", NO_RESULTS_MESSAGE)

        template = self.env.get_template("product_list.html")
        html = template.render(cards=[self._card(item) for item in items], placeholder=None)
        actions = {item.id: partial(on_delete, item.id) for item in items}
        return RenderedList(html=Markup(html), actions=actions)

    def render_loading(self) -> RenderedList:
        return self._placeholder("loading", LOADING_MESSAGE)

    def render_load_error(self) -> RenderedList:
        return self._placeholder("load-error", LOAD_ERROR_MESSAGE)

    def render_page(self, listing: RenderedList, panel: Any, query: str, sort_key: str) -> str:
        template = self.env.get_template("page.html")
        return template.render(
            listing=listing.html,
            panel=panel,
            query=query,
            sort_key=sort_key,
            sort_labels=SORT_LABELS,
        )

    def render_confirmation(self, item: CatalogItem, message: str) -> str:
        template = self.env.get_template("confirm_delete.html")
        return template.render(card=self._card(item), message=message)
