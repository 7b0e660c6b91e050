# bookstore/config.py
import os
from dataclasses import dataclass
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_SEED_FILE = PACKAGE_DIR / "data" / "products.json"


@dataclass(frozen=True)
class Settings:
    storage_path: Path
    slot_key: str = "products"
    seed_url: str = ""
    seed_file: Path = DEFAULT_SEED_FILE
    seed_timeout: float = 10.0
    currency_suffix: str = "₫"


def load_settings() -> Settings:
    """Read the catalogue settings from the environment."""
    try:
        timeout = float(os.getenv("CATALOG_SEED_TIMEOUT", "10"))
    except ValueError:
        timeout = 10.0

    return Settings(
        storage_path=Path(
            os.getenv("CATALOG_STORAGE_PATH", "./data/catalog_storage.json")
        ),
        slot_key=os.getenv("CATALOG_SLOT_KEY", "products").strip() or "products",
        seed_url=os.getenv("CATALOG_SEED_URL", "").strip(),
        seed_file=Path(os.getenv("CATALOG_SEED_FILE", str(DEFAULT_SEED_FILE))),
        seed_timeout=timeout,
        currency_suffix=os.getenv("CATALOG_CURRENCY_SUFFIX", "₫"),
    )
