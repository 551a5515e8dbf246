"""Tests for category resolution and the categories router."""

import asyncio
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from sellit.models import Category
from sellit.services.categories import (
    DEFAULT_CATEGORY_NAMES,
    CategoryNotFoundError,
    CategorySelectorError,
    normalize_category_name,
    reset_categories,
    resolve_category,
    seed_default_categories,
)
from tests.factories import CategoryFactory


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("  Shoes ", "shoes"), ("PHONES", "phones"), ("   ", None), (None, None)],
)
def test_normalize_category_name(raw, expected):
    assert normalize_category_name(raw) == expected


@pytest.mark.asyncio
async def test_name_resolution_is_case_insensitive_upsert(db):
    first = await resolve_category(db, category_name="Shoes")
    await db.commit()
    second = await resolve_category(db, category_name="  shoes ")
    await db.commit()

    assert first.id == second.id
    assert second.name == "shoes"
    count = await db.scalar(select(func.count()).select_from(Category))
    assert count == 1


@pytest.mark.asyncio
async def test_concurrent_upserts_converge(clean_database):
    async def resolve():
        async with clean_database.session_maker() as session:
            category = await resolve_category(session, category_name="Bikes")
            await session.commit()
            return category.id

    ids = await asyncio.gather(*(resolve() for _ in range(5)))

    assert len(set(ids)) == 1


@pytest.mark.asyncio
async def test_resolution_by_id(db):
    category = await CategoryFactory.create_async(db, name="lamps")
    await db.commit()

    resolved = await resolve_category(db, category_id=category.id)
    assert resolved.name == "lamps"


@pytest.mark.asyncio
async def test_resolution_by_unknown_id(db):
    with pytest.raises(CategoryNotFoundError):
        await resolve_category(db, category_id=uuid4())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "selector",
    [{}, {"category_id": uuid4(), "category_name": "phones"}, {"category_name": "   "}],
)
async def test_exactly_one_selector(db, selector):
    with pytest.raises(CategorySelectorError):
        await resolve_category(db, **selector)


@pytest.mark.asyncio
async def test_seed_is_idempotent(db):
    await seed_default_categories(db)
    await seed_default_categories(db)

    names = (await db.execute(select(Category.name))).scalars().all()
    assert sorted(names) == sorted(DEFAULT_CATEGORY_NAMES)


@pytest.mark.asyncio
async def test_reset_keeps_only_defaults(db):
    await CategoryFactory.create_async(db, name="bikes")
    await db.commit()

    await reset_categories(db)

    names = (await db.execute(select(Category.name))).scalars().all()
    assert sorted(names) == sorted(DEFAULT_CATEGORY_NAMES)


@pytest.mark.asyncio
async def test_list_categories_sorted_by_name(client, db):
    for name in ("tablets", "bikes", "phones"):
        await CategoryFactory.create_async(db, name=name)
    await db.commit()

    response = await client.get("/api/categories")

    assert response.status_code == 200
    categories = response.json()["categories"]
    assert [c["name"] for c in categories] == ["bikes", "phones", "tablets"]
    assert set(categories[0]) == {"id", "name"}
