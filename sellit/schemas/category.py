"""Pydantic schemas for categories."""

from uuid import UUID

from sellit.schemas.base import ApiModel


class CategoryResponse(ApiModel):
    id: UUID
    name: str


class CategoryListResponse(ApiModel):
    categories: list[CategoryResponse]
