# bookstore/storage.py
"""
Durable key-value slots used as the catalogue cache.

A slot exposes ``get(key)`` and ``set(key, text)``. Values are opaque
text; the catalogue store writes its whole item list as one JSON
document under a single key, so every mutation rewrites the full value.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class DurableSlot(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, text: str) -> None:
        ...


class MemorySlot:
    """Slot kept in process memory. Lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, text: str) -> None:
        self._values[key] = text


class JsonFileSlot:
    """Slot backed by a JSON file on disk.

    The file contains a single object mapping keys to text values. When
    the file does not exist or cannot be parsed, every key reads as
    absent. Writes are synchronised with a ``threading.Lock`` because
    FastAPI runs synchronous routes in a worker thread pool.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        try:
            if not self.path.exists():
                return {}
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read slot file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Slot file %s does not hold a JSON object; ignoring it", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, text: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = text
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
            except OSError as exc:
                # The in-memory catalogue stays authoritative; the next write retries.
                logger.error("Failed to write slot file %s: %s", self.path, exc)
