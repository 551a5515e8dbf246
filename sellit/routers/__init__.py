"""API routers package."""

from sellit.routers import auth, categories, products, test_utils

__all__ = [
    "auth",
    "categories",
    "products",
    "test_utils",
]
