"""
Catalogue store.

``CatalogStore`` owns the authoritative list of ``CatalogItem`` objects
for the running application and keeps a copy of it in a durable slot
(see ``bookstore.storage``). On first use it seeds itself from a seed
source (see ``seed_service``). The whole list is serialised as one JSON
document under a single key, so every mutation rewrites the full value
and the last writer wins.

Ids come from a monotonic counter: the next id is one more than the
largest id seen during the session, so ids are never reused, even
after a deletion.
"""

from __future__ import annotations

import json
import logging
import math
import re
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote

from pydantic import ValidationError

from ..storage import DurableSlot
from .errors import INVALID_PRICE_MESSAGE, MISSING_FIELDS_MESSAGE, ItemValidationError, SeedLoadError
from .schemas import CatalogItem, CatalogItemInput
from .seed_service import SeedSource

logger = logging.getLogger(__name__)

DEFAULT_SLOT_KEY = "products"
PLACEHOLDER_IMAGE_URL = "https://placehold.co/400x250/eee/212529?text={text}"
# Plain ASCII decimal, optionally with an exponent. Rejects "1_000" and non-ASCII digits.
PRICE_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def placeholder_image_url(name: str) -> str:
    """Return the placeholder image URL for a product name.

    The name is percent-encoded the way ``encodeURIComponent`` does it,
    so the URLs match the ones stored by earlier versions of the page.
    """
    return PLACEHOLDER_IMAGE_URL.format(text=quote(name, safe="-_.!~*'()"))


def _parse_price(raw: Union[str, float, int]) -> float:
    if isinstance(raw, str):
        if not PRICE_PATTERN.fullmatch(raw):
            raise ItemValidationError(INVALID_PRICE_MESSAGE, field="price")
        value = float(raw)
    else:
        value = float(raw)
    if not math.isfinite(value) or value <= 0:
        raise ItemValidationError(INVALID_PRICE_MESSAGE, field="price")
    return value


class CatalogStore:
    """Authoritative product list plus its durable cache.

    Mutations run under a lock: FastAPI serves synchronous routes from a
    worker thread pool, and ``add``/``remove`` rewrite both the list and
    the slot.
    """

    def __init__(
        self,
        slot: DurableSlot,
        seed: SeedSource,
        key: str = DEFAULT_SLOT_KEY,
    ) -> None:
        self._slot = slot
        self._seed = seed
        self._key = key
        self._items: List[CatalogItem] = []
        self._last_id = 0
        self._lock = threading.RLock()
        self.initialized = False

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _read_cached_entries(self) -> List[Dict[str, Any]]:
        text = self._slot.get(self._key)
        if not text:
            return []
        try:
            data = json.loads(text)
        except ValueError as exc:
            logger.warning("Cached catalogue under %r is not valid JSON: %s", self._key, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Cached catalogue under %r is not a list; ignoring it", self._key)
            return []
        return [entry for entry in data if isinstance(entry, dict)]

    @staticmethod
    def _materialize(
        entries: Iterable[Mapping[str, Any]], last_id: int
    ) -> Tuple[List[CatalogItem], int]:
        """Convert raw entries into items, assigning ids where needed.

        Entries without an id, or whose id is already taken, get ids
        counting up from ``last_id``. Entries that cannot be converted are
        skipped. Returns the items and the largest id seen or assigned.
        """
        items: List[CatalogItem] = []
        seen: set = set()
        pending: List[Dict[str, Any]] = []
        for entry in entries:
            data = dict(entry)
            raw_id = data.get("id")
            if isinstance(raw_id, int) and not isinstance(raw_id, bool) and raw_id not in seen:
                seen.add(raw_id)
                last_id = max(last_id, raw_id)
            else:
                data.pop("id", None)
            pending.append(data)

        for data in pending:
            if "id" not in data:
                last_id += 1
                data["id"] = last_id
            try:
                items.append(CatalogItem.model_validate(data))
            except ValidationError as exc:
                logger.warning("Skipping invalid catalogue entry %r: %s", data.get("name"), exc)
        return items, last_id

    def _adopt(self, entries: Iterable[Mapping[str, Any]]) -> None:
        self._items, self._last_id = self._materialize(entries, self._last_id)

    def _next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def load(self) -> List[CatalogItem]:
        """Read the items held in the durable slot.

        Nothing is adopted and the id counter is left alone; entries
        without an id get provisional ones.
        """
        items, _ = self._materialize(self._read_cached_entries(), self._last_id)
        return items

    def persist(self, items: Optional[List[CatalogItem]] = None) -> None:
        """Write ``items`` (the current list by default) to the durable slot."""
        with self._lock:
            items = self._items if items is None else items
            payload = [item.model_dump(by_alias=True) for item in items]
            self._slot.set(self._key, json.dumps(payload, ensure_ascii=False))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def initialize(self) -> List[CatalogItem]:
        """Adopt the cached catalogue, or seed it when the cache is empty.

        Raises ``SeedLoadError`` when seeding fails. The store is left
        empty but initialized in that case.
        """
        with self._lock:
            cached = self._read_cached_entries()
            if cached:
                self._adopt(cached)
                if [entry.get("id") for entry in cached] != [item.id for item in self._items]:
                    self.persist()
                self.initialized = True
                logger.info("Loaded %d products from the durable slot", len(self._items))
                return self.list_items()

            try:
                entries = self._seed.fetch()
            except SeedLoadError:
                self._items = []
                self.initialized = True
                raise

            self._adopt(entries)
            self.persist()
            self.initialized = True
            logger.info("Seeded catalogue with %d products", len(self._items))
            return self.list_items()

    def add(self, data: Union[CatalogItemInput, Mapping[str, Any]]) -> CatalogItem:
        """Validate add-form input and prepend the new item.

        Raises ``ItemValidationError`` without touching the list when a
        required field is empty or the price is not a number above 0.
        """
        if not isinstance(data, CatalogItemInput):
            try:
                data = CatalogItemInput.model_validate(dict(data))
            except ValidationError as exc:
                raise ItemValidationError(MISSING_FIELDS_MESSAGE) from exc

        name = data.name.strip()
        raw_price = data.price.strip() if isinstance(data.price, str) else data.price
        description = data.description.strip()
        image_url = data.image_url.strip()

        if not name or raw_price == "" or not description:
            raise ItemValidationError(MISSING_FIELDS_MESSAGE)
        price = _parse_price(raw_price)

        with self._lock:
            item = CatalogItem(
                id=self._next_id(),
                name=name,
                price=price,
                description=description,
                image_url=image_url or placeholder_image_url(name),
            )
            self._items.insert(0, item)
            self.persist()
        logger.info("Added product %d (%s)", item.id, item.name)
        return item

    def remove(self, item_id: int) -> bool:
        """Remove the item with ``item_id``. Absent ids are a no-op."""
        with self._lock:
            remaining = [item for item in self._items if item.id != item_id]
            if len(remaining) == len(self._items):
                logger.debug("No product with id %s to remove", item_id)
                return False
            self._items = remaining
            self.persist()
        logger.info("Removed product %d", item_id)
        return True

    def get(self, item_id: int) -> Optional[CatalogItem]:
        with self._lock:
            return next((item for item in self._items if item.id == item_id), None)

    def list_items(self) -> List[CatalogItem]:
        with self._lock:
            return list(self._items)
