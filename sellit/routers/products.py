"""Product listing API router."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from sellit.deps import CurrentUser, DbSession, VerifiedUser
from sellit.logger import get_logger
from sellit.models import Product
from sellit.schemas import (
    FavoriteEnvelope,
    FavoriteResponse,
    OkResponse,
    ProductDetailEnvelope,
    ProductDetailResponse,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    ProductWrite,
)
from sellit.services import products as product_service
from sellit.services.categories import CategoryNotFoundError, CategorySelectorError
from sellit.services.products import Pagination, ProductForbiddenError, ProductNotFoundError
from sellit.utils import raise_bad_request, raise_forbidden, raise_not_found

router = APIRouter(prefix="/api/products", tags=["products"])
logger = get_logger(__name__)

PAGE_QUERY = Query(None, description="1-based page number; invalid values fall back to 1")
LIMIT_QUERY = Query(None, description="Page size, clamped to 1-50; invalid values fall back to 9")


async def _page_response(
    db: DbSession, products: list[Product], total: int, pagination: Pagination
) -> ProductListResponse:
    categories = await product_service.categories_for(db, products)
    return ProductListResponse(
        products=[ProductResponse.build(p, categories.get(p.category_id)) for p in products],
        page=pagination.page,
        limit=pagination.limit,
        total=total,
        total_pages=pagination.total_pages(total),
    )


@router.post("", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductWrite, db: DbSession, user: VerifiedUser) -> ProductEnvelope:
    """Create a listing owned by the caller."""
    try:
        product, category = await product_service.create_product(db, user.id, data)
    except (CategoryNotFoundError, CategorySelectorError) as e:
        raise_bad_request(str(e), cause=e)

    return ProductEnvelope(product=ProductResponse.build(product, category))


@router.get("", response_model=ProductListResponse)
async def list_products(
    db: DbSession,
    page: str | None = PAGE_QUERY,
    limit: str | None = LIMIT_QUERY,
) -> ProductListResponse:
    """List listings newest first."""
    pagination = product_service.parse_pagination(page, limit)
    products, total = await product_service.list_products(db, pagination)
    return await _page_response(db, products, total, pagination)


@router.get("/mine", response_model=ProductListResponse)
async def list_my_products(
    db: DbSession,
    user: CurrentUser,
    page: str | None = PAGE_QUERY,
    limit: str | None = LIMIT_QUERY,
) -> ProductListResponse:
    """List the caller's own listings newest first."""
    pagination = product_service.parse_pagination(page, limit)
    products, total = await product_service.list_products(db, pagination, seller_id=user.id)
    return await _page_response(db, products, total, pagination)


@router.get("/favorites", response_model=ProductListResponse)
async def list_my_favorites(
    db: DbSession,
    user: CurrentUser,
    page: str | None = PAGE_QUERY,
    limit: str | None = LIMIT_QUERY,
) -> ProductListResponse:
    """List the listings the caller has favorited, newest first."""
    pagination = product_service.parse_pagination(page, limit)
    products, total = await product_service.list_products(db, pagination, liked_by=user.id)
    return await _page_response(db, products, total, pagination)


@router.get("/{product_id}", response_model=ProductDetailEnvelope)
async def get_product(product_id: UUID, db: DbSession) -> ProductDetailEnvelope:
    """Get a listing with its favorites."""
    try:
        product = await product_service.get_product(db, product_id)
    except ProductNotFoundError as e:
        logger.debug("Product not found", product_id=str(product_id))
        raise_not_found("Product", cause=e)

    categories = await product_service.categories_for(db, [product])
    liked_users = await product_service.get_liked_users(db, product.id)
    return ProductDetailEnvelope(
        product=ProductDetailResponse.build_detail(product, categories.get(product.category_id), liked_users),
    )


@router.post("/{product_id}/favorite", response_model=FavoriteEnvelope)
async def favorite_product(product_id: UUID, db: DbSession, user: VerifiedUser) -> FavoriteEnvelope:
    """Add the caller to a listing's favorites."""
    try:
        liked_users = await product_service.favorite_product(db, product_id, user.id)
    except ProductNotFoundError as e:
        raise_not_found("Product", cause=e)
    except ProductForbiddenError as e:
        raise_forbidden(str(e), cause=e)

    return FavoriteEnvelope(favorite=FavoriteResponse.for_user(liked_users, user.id))


@router.delete("/{product_id}/favorite", response_model=FavoriteEnvelope)
async def unfavorite_product(product_id: UUID, db: DbSession, user: VerifiedUser) -> FavoriteEnvelope:
    """Remove the caller from a listing's favorites."""
    try:
        liked_users = await product_service.unfavorite_product(db, product_id, user.id)
    except ProductNotFoundError as e:
        raise_not_found("Product", cause=e)
    except ProductForbiddenError as e:
        raise_forbidden(str(e), cause=e)

    return FavoriteEnvelope(favorite=FavoriteResponse.for_user(liked_users, user.id))


@router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: UUID,
    data: ProductWrite,
    db: DbSession,
    user: VerifiedUser,
) -> ProductEnvelope:
    """Replace a listing's details (owner only)."""
    try:
        product, category = await product_service.update_product(db, product_id, user.id, data)
    except ProductNotFoundError as e:
        raise_not_found("Product", cause=e)
    except ProductForbiddenError as e:
        raise_forbidden(str(e), cause=e)
    except (CategoryNotFoundError, CategorySelectorError) as e:
        raise_bad_request(str(e), cause=e)

    return ProductEnvelope(product=ProductResponse.build(product, category))


@router.delete("/{product_id}", response_model=OkResponse)
async def delete_product(product_id: UUID, db: DbSession, user: VerifiedUser) -> OkResponse:
    """Delete a listing (owner only)."""
    try:
        await product_service.delete_product(db, product_id, user.id)
    except ProductNotFoundError as e:
        raise_not_found("Product", cause=e)
    except ProductForbiddenError as e:
        raise_forbidden(str(e), cause=e)

    return OkResponse(ok=True)
