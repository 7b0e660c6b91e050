# bookstore/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .catalog import catalog_page_router, catalog_router
from .catalog.controller import CatalogController
from .catalog.renderer import CatalogRenderer
from .catalog.seed_service import FileSeedSource, HttpSeedSource, SeedSource
from .catalog.store import CatalogStore
from .config import Settings, load_settings
from .logger import setup_logging
from .storage import JsonFileSlot

logger = logging.getLogger(__name__)


def build_controller(settings: Optional[Settings] = None) -> CatalogController:
    """Wire the slot, seed source, store and renderer for one application."""
    settings = settings or load_settings()

    seed: SeedSource
    if settings.seed_url:
        seed = HttpSeedSource(settings.seed_url, timeout=settings.seed_timeout)
    else:
        seed = FileSeedSource(settings.seed_file)

    store = CatalogStore(JsonFileSlot(settings.storage_path), seed, key=settings.slot_key)
    renderer = CatalogRenderer(currency_suffix=settings.currency_suffix)
    return CatalogController(store, renderer)


def create_app(controller: Optional[CatalogController] = None) -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The seed fetch finishes before the first page is served.
        app.state.controller.start()
        logger.info("Catalogue ready (status=%s)", app.state.controller.status)
        yield

    app = FastAPI(
        title="Bookstore catalogue",
        description=(
            "Danh sách sản phẩm có tìm kiếm, sắp xếp, thêm và xóa, "
            "lưu đệm trên đĩa và khởi tạo từ nguồn JSON."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.controller = controller or build_controller()
    app.include_router(catalog_page_router)
    app.include_router(catalog_router)

    # 🔹 Quick liveness check
    @app.get("/health")
    def health_check():
        return {"status": "ok", "catalog": app.state.controller.status}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app, host="127.0.0.1", port=8000, factory=True)
