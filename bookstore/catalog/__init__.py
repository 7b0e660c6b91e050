"""
Catalog package for the bookstore page.

The store owns the product list and its durable cache, the view model
derives the filtered and sorted list to display, the renderer turns it
into HTML and the controller wires user events to all three. The
routers expose the page and a small JSON API over the same store.
"""

from .router import page_router as catalog_page_router  # noqa: F401
from .router import router as catalog_router  # noqa: F401
