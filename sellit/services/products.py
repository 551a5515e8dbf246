"""Product listing service: CRUD, pagination and favorites."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from sellit.logger import get_logger
from sellit.models import Category, Product, ProductLike
from sellit.schemas.product import ProductWrite
from sellit.services.categories import get_categories_by_ids, resolve_category

logger = get_logger(__name__)

DEFAULT_PAGE_LIMIT = 9
MAX_PAGE_LIMIT = 50
# Keeps the row offset within a Postgres bigint
MAX_PAGE = (2**63 - 1) // MAX_PAGE_LIMIT


class ProductServiceError(Exception):
    """Base exception for product service errors."""


class ProductNotFoundError(ProductServiceError):
    """Product not found error."""


class ProductForbiddenError(ProductServiceError):
    """The caller is not allowed to perform this action on the product."""


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return max(1, math.ceil(total / self.limit))


def _parse_int(raw: str | int | None) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(raw.strip())
    except ValueError:
        return None


def parse_pagination(page: str | int | None = None, limit: str | int | None = None) -> Pagination:
    """Lenient page/limit parsing.

    Unparseable values fall back to defaults; numbers are clamped so limit is
    within [1, MAX_PAGE_LIMIT] and page within [1, MAX_PAGE].
    """
    parsed_limit = _parse_int(limit)
    if parsed_limit is None:
        parsed_limit = DEFAULT_PAGE_LIMIT
    parsed_page = _parse_int(page)
    if parsed_page is None:
        parsed_page = 1
    return Pagination(
        page=min(MAX_PAGE, max(1, parsed_page)),
        limit=min(MAX_PAGE_LIMIT, max(1, parsed_limit)),
    )


def _images_payload(data: ProductWrite) -> list[dict]:
    return [image.model_dump(by_alias=True) for image in data.images or []]


async def create_product(db: AsyncSession, seller_id: UUID, data: ProductWrite) -> tuple[Product, Category]:
    category = await resolve_category(db, category_id=data.category_id, category_name=data.category_name)
    product = Product(
        seller_id=seller_id,
        title=data.title,
        description=data.description,
        price=data.price,
        category_id=category.id,
        images=_images_payload(data),
        published_at=datetime.now(UTC),
    )
    db.add(product)
    await db.commit()
    await db.refresh(product)

    logger.info(
        "Product created",
        product_id=str(product.id),
        seller_id=str(seller_id),
        category=category.name,
    )
    return product, category


async def _paginate(
    db: AsyncSession, base_query: Select, pagination: Pagination
) -> tuple[list[Product], int]:
    count_query = select(func.count()).select_from(base_query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    query = (
        base_query.order_by(Product.published_at.desc(), Product.id.desc())
        .limit(pagination.limit)
        .offset(pagination.offset)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def list_products(
    db: AsyncSession,
    pagination: Pagination,
    *,
    seller_id: UUID | None = None,
    liked_by: UUID | None = None,
) -> tuple[list[Product], int]:
    """Newest-first page of listings, optionally narrowed to a seller or a user's favorites."""
    base_query = select(Product)
    if seller_id is not None:
        base_query = base_query.where(Product.seller_id == seller_id)
    if liked_by is not None:
        base_query = base_query.join(ProductLike, ProductLike.product_id == Product.id).where(
            ProductLike.user_id == liked_by
        )
    return await _paginate(db, base_query, pagination)


async def categories_for(db: AsyncSession, products: list[Product]) -> dict[UUID, Category]:
    """Batch-load the categories referenced by a page of products."""
    return await get_categories_by_ids(db, (product.category_id for product in products))


async def get_product(db: AsyncSession, product_id: UUID) -> Product:
    product = await db.get(Product, product_id)
    if product is None:
        raise ProductNotFoundError(f"Product {product_id} not found")
    return product


async def get_liked_users(db: AsyncSession, product_id: UUID) -> list[UUID]:
    result = await db.execute(
        select(ProductLike.user_id)
        .where(ProductLike.product_id == product_id)
        .order_by(ProductLike.liked_at, ProductLike.user_id)
    )
    return list(result.scalars().all())


def _ensure_owner(product: Product, requester_id: UUID, action: str) -> None:
    if product.seller_id != requester_id:
        raise ProductForbiddenError(f"Only the seller can {action} this product")


def _ensure_not_owner(product: Product, user_id: UUID) -> None:
    if product.seller_id == user_id:
        raise ProductForbiddenError("You cannot favorite your own product")


async def favorite_product(db: AsyncSession, product_id: UUID, user_id: UUID) -> list[UUID]:
    """Add the user to the product's favorites; adding twice changes nothing."""
    product = await get_product(db, product_id)
    _ensure_not_owner(product, user_id)

    stmt = (
        pg_insert(ProductLike)
        .values(product_id=product_id, user_id=user_id, liked_at=datetime.now(UTC))
        .on_conflict_do_nothing(index_elements=[ProductLike.product_id, ProductLike.user_id])
    )
    await db.execute(stmt)
    await db.commit()

    logger.info("Product favorited", product_id=str(product_id), user_id=str(user_id))
    return await get_liked_users(db, product_id)


async def unfavorite_product(db: AsyncSession, product_id: UUID, user_id: UUID) -> list[UUID]:
    """Remove the user from the product's favorites; a no-op for non-members."""
    product = await get_product(db, product_id)
    _ensure_not_owner(product, user_id)

    await db.execute(
        delete(ProductLike).where(ProductLike.product_id == product_id, ProductLike.user_id == user_id)
    )
    await db.commit()

    logger.info("Product unfavorited", product_id=str(product_id), user_id=str(user_id))
    return await get_liked_users(db, product_id)


async def update_product(
    db: AsyncSession, product_id: UUID, requester_id: UUID, data: ProductWrite
) -> tuple[Product, Category]:
    """Replace a listing's editable fields; seller and publish time never change."""
    product = await get_product(db, product_id)
    _ensure_owner(product, requester_id, "update")

    category = await resolve_category(db, category_id=data.category_id, category_name=data.category_name)
    product.title = data.title
    product.description = data.description
    product.price = data.price
    product.category_id = category.id
    product.images = _images_payload(data)

    await db.commit()
    await db.refresh(product)

    logger.info("Product updated", product_id=str(product.id), seller_id=str(requester_id))
    return product, category


async def delete_product(db: AsyncSession, product_id: UUID, requester_id: UUID) -> None:
    product = await get_product(db, product_id)
    _ensure_owner(product, requester_id, "delete")

    await db.delete(product)
    await db.commit()

    logger.info("Product deleted", product_id=str(product_id), seller_id=str(requester_id))
