"""Category model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from sellit.database import Base
from sellit.models.base import UUIDMixin


class Category(Base, UUIDMixin):
    """Listing category, unique on its normalized (trimmed, lowercased) name."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Category {self.name}>"
