"""SQLAlchemy models package."""

from sellit.models.category import Category
from sellit.models.product import Product, ProductLike
from sellit.models.user import User

__all__ = [
    "Category",
    "Product",
    "ProductLike",
    "User",
]
