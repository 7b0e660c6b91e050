"""
Event handling for the catalogue page.

``CatalogController`` receives user events (search text, sort choice,
add-form toggle/cancel/submit, delete) and turns each into at most one
store mutation followed by a re-render. The latest rendering is kept in
``controller.view`` together with the delete actions of the items it
displays.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import ItemValidationError, SeedLoadError
from .renderer import CatalogRenderer, RenderedList
from .schemas import SORT_KEYS, CatalogItem
from .store import CatalogStore
from .view_model import derive

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

DELETE_CONFIRM_MESSAGE = 'Bạn có chắc muốn xóa sản phẩm "{name}"?'
FORM_FIELDS = ("name", "price", "description", "image_url")


def _decline(message: str) -> bool:
    logger.warning("No confirmation handler configured; declining: %s", message)
    return False


class AddFormPanel:
    """Two-state add-form panel: ``collapsed`` or ``expanded``."""

    COLLAPSED = "collapsed"
    EXPANDED = "expanded"

    def __init__(self) -> None:
        self.state = self.COLLAPSED
        self.values: Dict[str, str] = {}
        self.error = ""
        self.focus: Optional[str] = None
        self.reset()

    @property
    def expanded(self) -> bool:
        return self.state == self.EXPANDED

    def reset(self) -> None:
        self.values = {name: "" for name in FORM_FIELDS}

    def expand(self) -> None:
        self.state = self.EXPANDED
        self.error = ""
        self.focus = "name"

    def collapse(self) -> None:
        self.state = self.COLLAPSED
        self.reset()
        self.focus = None

    def toggle(self) -> None:
        if self.expanded:
            self.collapse()
        else:
            self.expand()

    def fill(self, form: Mapping[str, Any]) -> None:
        for name in FORM_FIELDS:
            value = form.get(name, "")
            self.values[name] = "" if value is None else str(value)

    def show_error(self, message: str) -> None:
        self.error = message


@dataclass
class RenderedView:
    html: str = ""
    actions: Dict[int, Callable[..., Any]] = field(default_factory=dict)


class CatalogController:
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"

    def __init__(
        self,
        store: CatalogStore,
        renderer: CatalogRenderer,
        confirm: Optional[Confirm] = None,
    ) -> None:
        self.store = store
        self.renderer = renderer
        self.confirm = confirm or _decline
        self.panel = AddFormPanel()
        self.query = ""
        self.sort_key = "none"
        self.status = self.LOADING
        self.started = False
        self.view = RenderedView()

    def start(self) -> RenderedView:
        """Initialize the store once, showing the loading placeholder meanwhile."""
        if self.started:
            return self.view
        self.started = True
        self.status = self.LOADING
        self.refresh()
        try:
            self.store.initialize()
            self.status = self.READY
        except SeedLoadError as exc:
            logger.error("Could not load initial products: %s", exc)
            self.status = self.FAILED
        return self.refresh()

    def _listing(self) -> RenderedList:
        if self.status == self.LOADING:
            return self.renderer.render_loading()
        items = self.store.list_items()
        if self.status == self.FAILED and not items:
            return self.renderer.render_load_error()
        return self.renderer.render(derive(items, self.query, self.sort_key), self.on_delete)

    def refresh(self) -> RenderedView:
        listing = self._listing()
        html = self.renderer.render_page(listing, self.panel, self.query, self.sort_key)
        self.view = RenderedView(html=html, actions=listing.actions)
        return self.view

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def on_search(self, text: Optional[str]) -> RenderedView:
        self.query = text or ""
        return self.refresh()

    def on_sort(self, key: Optional[str]) -> RenderedView:
        if key not in SORT_KEYS:
            logger.warning("Unknown sort key %r; using 'none'", key)
            key = "none"
        self.sort_key = key
        return self.refresh()

    def on_toggle_form(self) -> RenderedView:
        self.panel.toggle()
        return self.refresh()

    def on_cancel_form(self) -> RenderedView:
        self.panel.collapse()
        return self.refresh()

    def on_submit(self, form: Mapping[str, Any]) -> Optional[CatalogItem]:
        """Handle an add-form submission.

        Returns the stored item, or ``None`` when validation failed. In
        that case the message is shown in the panel, which stays open
        with the typed values.
        """
        self.panel.fill(form)
        try:
            item = self.store.add(self.panel.values)
        except ItemValidationError as exc:
            # The form may have been posted while the panel was collapsed.
            if not self.panel.expanded:
                self.panel.expand()
            self.panel.show_error(exc.message)
            self.refresh()
            return None
        self.panel.collapse()
        self.refresh()
        return item

    def confirmation_message(self, item: CatalogItem) -> str:
        return DELETE_CONFIRM_MESSAGE.format(name=item.name)

    def on_delete(self, item_id: int, confirm: Optional[Confirm] = None) -> bool:
        """Ask for confirmation, then remove ``item_id``.

        Returns ``True`` when the user confirmed. Ids that are no longer
        in the store are a no-op.
        """
        item = self.store.get(item_id)
        if item is None:
            logger.debug("Delete requested for unknown product %s", item_id)
            return False
        ask = confirm or self.confirm
        if not ask(self.confirmation_message(item)):
            logger.info("Deletion of product %d cancelled", item_id)
            return False
        self.store.remove(item_id)
        self.refresh()
        return True
