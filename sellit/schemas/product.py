"""Pydantic schemas for product listings."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import Field, StringConstraints, field_validator, model_validator

from sellit.models import Category, Product
from sellit.schemas.base import ApiModel

MAX_IMAGES = 5
EXACTLY_ONE_CATEGORY_MESSAGE = "Provide exactly one of categoryId or categoryName"


class ProductImage(ApiModel):
    url: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2048)]
    public_id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=256)]


class ProductWrite(ApiModel):
    """Body for creating or replacing a listing.

    Exactly one category selector must be given: ``categoryId`` for an existing
    category, or ``categoryName`` which is created on first use.
    """

    title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=160)]
    description: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=5000)]
    price: Annotated[float, Field(gt=0, allow_inf_nan=False)]
    category_id: UUID | None = None
    category_name: Annotated[str, StringConstraints(strip_whitespace=True, max_length=64)] | None = None
    images: Annotated[list[ProductImage], Field(max_length=MAX_IMAGES)] | None = None

    @field_validator("category_id", "category_name", mode="before")
    @classmethod
    def blank_selector_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def exactly_one_category(self) -> "ProductWrite":
        if (self.category_id is None) == (self.category_name is None):
            raise ValueError(EXACTLY_ONE_CATEGORY_MESSAGE)
        return self


class CategoryRef(ApiModel):
    id: UUID
    name: str


class ProductResponse(ApiModel):
    id: UUID
    seller_id: UUID
    title: str
    description: str
    price: float
    category: CategoryRef
    images: list[ProductImage]
    published_at: datetime

    @classmethod
    def build(cls, product: Product, category: Category | None) -> "ProductResponse":
        return cls(**_product_fields(product, category))


class ProductDetailResponse(ProductResponse):
    liked_users: list[UUID]
    favorites_count: int

    @classmethod
    def build_detail(
        cls, product: Product, category: Category | None, liked_users: list[UUID]
    ) -> "ProductDetailResponse":
        return cls(
            **_product_fields(product, category),
            liked_users=liked_users,
            favorites_count=len(liked_users),
        )


def _product_fields(product: Product, category: Category | None) -> dict[str, Any]:
    # A listing whose category row vanished still renders, as "unknown"
    category_ref = CategoryRef(
        id=product.category_id,
        name=category.name if category is not None else "unknown",
    )
    return {
        "id": product.id,
        "seller_id": product.seller_id,
        "title": product.title,
        "description": product.description,
        "price": product.price,
        "category": category_ref,
        "images": [ProductImage.model_validate(image) for image in product.images or []],
        "published_at": product.published_at,
    }


class ProductEnvelope(ApiModel):
    product: ProductResponse


class ProductDetailEnvelope(ApiModel):
    product: ProductDetailResponse


class ProductListResponse(ApiModel):
    products: list[ProductResponse]
    page: int
    limit: int
    total: int
    total_pages: int


class FavoriteResponse(ApiModel):
    is_favorited: bool
    favorites_count: int
    liked_users: list[UUID]

    @classmethod
    def for_user(cls, liked_users: list[UUID], user_id: UUID) -> "FavoriteResponse":
        return cls(
            is_favorited=user_id in liked_users,
            favorites_count=len(liked_users),
            liked_users=liked_users,
        )


class FavoriteEnvelope(ApiModel):
    favorite: FavoriteResponse
