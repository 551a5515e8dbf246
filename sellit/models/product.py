"""Product listing and favorite models."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from sellit.database import Base
from sellit.models.base import UUIDMixin


class Product(Base, UUIDMixin):
    """
    A listing offered for sale by exactly one seller.

    ``seller_id`` and ``category_id`` are plain references without database
    foreign keys; the services keep them consistent. Favorites live in
    ``product_likes``, so the favorite count is always derived from that table.
    """

    __tablename__ = "products"
    __table_args__ = (Index("ix_products_published_at", "published_at"),)

    seller_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(160), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    category_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), nullable=False, index=True)
    images: Mapped[list[dict]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        comment='[{"url": "https://...", "publicId": "..."}]',
    )
    published_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    def __repr__(self) -> str:
        return f"<Product {self.title!r} {self.price}>"


class ProductLike(Base):
    """Membership of a user in a product's favorite set."""

    __tablename__ = "product_likes"

    product_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True, index=True)
    liked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    def __repr__(self) -> str:
        return f"<ProductLike product={self.product_id} user={self.user_id}>"
