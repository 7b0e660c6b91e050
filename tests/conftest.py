import pytest

from bookstore.catalog.controller import CatalogController
from bookstore.catalog.errors import SeedLoadError
from bookstore.catalog.renderer import CatalogRenderer
from bookstore.catalog.seed_service import StaticSeedSource
from bookstore.catalog.store import CatalogStore
from bookstore.storage import MemorySlot

SEED = [
    {"name": "Sách C: Tư duy phản biện", "price": "110000", "desc": "Phản biện", "imgUrl": ""},
    {"name": "Sách B: Kỹ năng học tập", "price": "95000", "desc": "Học tập", "imgUrl": ""},
    {"name": "Sách A: Lập trình", "price": "120000", "desc": "Lập trình", "imgUrl": "a.png"},
]


class FailingSeed:
    def fetch(self):
        raise SeedLoadError("boom")


@pytest.fixture
def slot():
    return MemorySlot()


@pytest.fixture
def store(slot):
    return CatalogStore(slot, StaticSeedSource(SEED))


@pytest.fixture
def ready_store(store):
    store.initialize()
    return store


@pytest.fixture
def controller(store):
    return CatalogController(store, CatalogRenderer())


@pytest.fixture
def failing_store(slot):
    return CatalogStore(slot, FailingSeed())


@pytest.fixture
def seed_entries():
    return [dict(entry) for entry in SEED]
