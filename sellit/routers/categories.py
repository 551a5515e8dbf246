"""Category API router."""

from fastapi import APIRouter

from sellit.deps import DbSession
from sellit.schemas import CategoryListResponse, CategoryResponse
from sellit.services import categories as category_service

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=CategoryListResponse)
async def list_categories(db: DbSession) -> CategoryListResponse:
    """List all categories sorted by name."""
    categories = await category_service.list_categories(db)
    return CategoryListResponse(
        categories=[CategoryResponse(id=c.id, name=c.name) for c in categories],
    )
