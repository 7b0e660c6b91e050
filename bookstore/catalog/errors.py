from typing import Optional

MISSING_FIELDS_MESSAGE = "Vui lòng điền đầy đủ các trường bắt buộc."
INVALID_PRICE_MESSAGE = "Giá sản phẩm phải là một số lớn hơn 0."


class ItemValidationError(ValueError):
    """Add-form input rejected by the store. Nothing was mutated."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class SeedLoadError(RuntimeError):
    """The seed source could not provide an item list."""
