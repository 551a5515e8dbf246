"""Category lookup, normalization and seeding."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from sellit.logger import get_logger
from sellit.models import Category

logger = get_logger(__name__)

DEFAULT_CATEGORY_NAMES = ("clothes", "shoes", "phones", "tablets", "laptops")


class CategoryServiceError(Exception):
    """Base exception for category errors."""


class CategoryNotFoundError(CategoryServiceError):
    """categoryId does not reference an existing category."""


class CategorySelectorError(CategoryServiceError):
    """Neither or both of categoryId and categoryName were supplied."""


def normalize_category_name(raw: str | None) -> str | None:
    if raw is None:
        return None
    name = raw.strip().lower()
    return name or None


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def get_categories_by_ids(db: AsyncSession, category_ids: Iterable[UUID]) -> dict[UUID, Category]:
    ids = set(category_ids)
    if not ids:
        return {}
    result = await db.execute(select(Category).where(Category.id.in_(ids)))
    return {category.id: category for category in result.scalars().all()}


async def upsert_category(db: AsyncSession, name: str) -> Category:
    """Return the category with this normalized name, creating it if absent.

    A single INSERT ... ON CONFLICT statement, so concurrent first uses of the
    same new name converge on one row.
    """
    stmt = (
        pg_insert(Category)
        .values(name=name)
        .on_conflict_do_update(index_elements=[Category.name], set_={"name": name})
        .returning(Category)
    )
    result = await db.execute(stmt, execution_options={"populate_existing": True})
    return result.scalar_one()


async def resolve_category(
    db: AsyncSession,
    *,
    category_id: UUID | None = None,
    category_name: str | None = None,
) -> Category:
    """Resolve a listing's category from exactly one selector."""
    name = normalize_category_name(category_name)
    if (category_id is None) == (name is None):
        raise CategorySelectorError("Provide exactly one of categoryId or categoryName")

    if category_id is not None:
        category = await db.get(Category, category_id)
        if category is None:
            raise CategoryNotFoundError("Category not found")
        return category

    return await upsert_category(db, name)


async def seed_default_categories(db: AsyncSession) -> None:
    """Idempotently ensure the default categories exist."""
    stmt = (
        pg_insert(Category)
        .values([{"name": name} for name in DEFAULT_CATEGORY_NAMES])
        .on_conflict_do_nothing(index_elements=[Category.name])
    )
    await db.execute(stmt)
    await db.commit()
    logger.info("Default categories seeded", count=len(DEFAULT_CATEGORY_NAMES))


async def reset_categories(db: AsyncSession) -> None:
    """Drop every non-default category and re-seed the defaults."""
    await db.execute(delete(Category).where(Category.name.not_in(DEFAULT_CATEGORY_NAMES)))
    await seed_default_categories(db)
