"""
Seed sources for the catalogue.

A seed source provides the default product list used when the durable
slot is empty. Three sources are available:

* ``HttpSeedSource`` — fetches a JSON array from a remote URL with
  ``requests``. Any network error, non-2xx status, undecodable body or
  non-list payload raises ``SeedLoadError``.

* ``FileSeedSource`` — reads a JSON array from a file such as the
  packaged ``data/products.json``.

* ``StaticSeedSource`` — serves a fixed in-memory list.

Entries are plain dicts with the wire fields ``name``, ``price``,
``desc`` and ``imgUrl``. They carry no ``id``; the store assigns one.
Fetches are never retried here: a failed seed leaves the catalogue
empty and the page shows a load error.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import requests

from .errors import SeedLoadError

logger = logging.getLogger(__name__)


class SeedSource(Protocol):
    def fetch(self) -> List[Dict[str, Any]]:
        ...


def _as_entry_list(data: Any, origin: str) -> List[Dict[str, Any]]:
    if not isinstance(data, list):
        raise SeedLoadError(f"Seed data from {origin} is not a JSON array")
    entries = [entry for entry in data if isinstance(entry, dict)]
    if len(entries) != len(data):
        logger.warning(
            "Ignoring %d non-object seed entries from %s", len(data) - len(entries), origin
        )
    return entries


class HttpSeedSource:
    """Fetch the seed list from a remote JSON endpoint."""

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def fetch(self) -> List[Dict[str, Any]]:
        logger.info("Fetching seed products from %s", self.url)
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            logger.error("Error fetching %s: %s", self.url, exc)
            raise SeedLoadError(f"Could not fetch seed products: {exc}") from exc
        except ValueError as exc:
            logger.error("Seed response from %s is not valid JSON: %s", self.url, exc)
            raise SeedLoadError("Seed response is not valid JSON") from exc
        return _as_entry_list(data, self.url)


class FileSeedSource:
    """Read the seed list from a JSON file each time it is fetched."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def fetch(self) -> List[Dict[str, Any]]:
        logger.info("Loading seed products from %s", self.path)
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            logger.error("Could not read seed file %s: %s", self.path, exc)
            raise SeedLoadError(f"Could not read seed file {self.path}: {exc}") from exc
        return _as_entry_list(raw, str(self.path))


class StaticSeedSource:
    def __init__(self, entries: List[Dict[str, Any]]) -> None:
        self._entries = [dict(entry) for entry in entries]

    def fetch(self) -> List[Dict[str, Any]]:
        # Copies, so the store may add ids without touching the source.
        return [dict(entry) for entry in self._entries]
