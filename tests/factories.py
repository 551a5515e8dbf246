"""Test data factories using factory_boy pattern.

Usage:
    # Build in memory
    user = UserFactory.build(username="seller")

    # Add and flush to DB (caller commits)
    product = await ProductFactory.create_async(db, seller_id=user.id, category_id=category.id)
"""

from datetime import UTC, datetime
from typing import TypeVar
from uuid import uuid4

import factory
from sqlalchemy.ext.asyncio import AsyncSession

from sellit.models import Category, Product, ProductLike, User
from sellit.security import hash_password

T = TypeVar("T")

DEFAULT_PASSWORD = "password123"


class AsyncFactoryMixin:
    """Mixin providing async database persistence for factories."""

    @classmethod
    async def create_async(cls, db: AsyncSession, *args, **kwargs) -> T:
        """Add and flush to database (transaction not committed)."""
        instance = cls.build(*args, **kwargs)
        db.add(instance)
        await db.flush()
        await db.refresh(instance)
        return instance


class UserFactory(factory.Factory, AsyncFactoryMixin):
    class Meta:
        model = User

    id = factory.LazyFunction(uuid4)
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    password_hash = factory.LazyFunction(lambda: hash_password(DEFAULT_PASSWORD))
    is_email_verified = True
    created_at = factory.LazyFunction(lambda: datetime.now(UTC))
    updated_at = factory.LazyFunction(lambda: datetime.now(UTC))


class CategoryFactory(factory.Factory, AsyncFactoryMixin):
    class Meta:
        model = Category

    id = factory.LazyFunction(uuid4)
    name = factory.Sequence(lambda n: f"category{n}")


class ProductFactory(factory.Factory, AsyncFactoryMixin):
    class Meta:
        model = Product

    id = factory.LazyFunction(uuid4)
    seller_id = factory.LazyFunction(uuid4)
    category_id = factory.LazyFunction(uuid4)
    title = factory.Sequence(lambda n: f"Listing {n}")
    description = "Gently used, works perfectly."
    price = 25.0
    images = factory.LazyFunction(list)
    published_at = factory.LazyFunction(lambda: datetime.now(UTC))


class ProductLikeFactory(factory.Factory, AsyncFactoryMixin):
    class Meta:
        model = ProductLike

    product_id = factory.LazyFunction(uuid4)
    user_id = factory.LazyFunction(uuid4)
    liked_at = factory.LazyFunction(lambda: datetime.now(UTC))
