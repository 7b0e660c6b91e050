"""
Pydantic schema definitions for the catalog module.

``CatalogItem`` is the stored and displayed product. Its wire names
(``desc`` and ``imgUrl``) match the JSON served by the seed endpoint
and the document kept in the durable slot, while Python code uses
``description`` and ``image_url``. ``CatalogItemInput`` holds the raw
values typed into the add form; it is validated by the store, never
trusted as-is.
"""

from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Literal, get_args

SortKey = Literal["none", "name-asc", "name-desc", "price-asc", "price-desc"]
SORT_KEYS = get_args(SortKey)


class CatalogItem(BaseModel):
    """A single catalogue entry.

    ``price`` is always a number here. Text prices coming from the seed
    source or the cache are converted by pydantic when the item is
    built, so sorting and rendering never re-parse them.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    price: float
    description: str = Field(default="", alias="desc")
    image_url: str = Field(default="", alias="imgUrl")


class CatalogItemInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    # Text as typed in the form, or a number from the JSON API.
    price: Union[str, float] = ""
    description: str = Field(default="", alias="desc")
    image_url: str = Field(default="", alias="imgUrl")


class DebugStore(BaseModel):
    """Summary returned by ``/api/catalog/debug/store``."""

    status: str
    count: int
    sample: List[CatalogItem]
