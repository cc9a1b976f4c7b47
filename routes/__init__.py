"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.products import router as products_router
from routes.categories import router as categories_router
from routes.imports import router as imports_router

__all__ = [
    "products_router",
    "categories_router",
    "imports_router",
]
