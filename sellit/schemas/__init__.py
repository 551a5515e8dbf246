from sellit.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, VerifyEmailResponse
from sellit.schemas.base import ApiModel, MessageResponse, OkResponse
from sellit.schemas.category import CategoryListResponse, CategoryResponse
from sellit.schemas.product import (
    CategoryRef,
    FavoriteEnvelope,
    FavoriteResponse,
    ProductDetailEnvelope,
    ProductDetailResponse,
    ProductEnvelope,
    ProductImage,
    ProductListResponse,
    ProductResponse,
    ProductWrite,
)
from sellit.schemas.user import PublicUser, UserEnvelope, to_public_user

__all__ = [
    "ApiModel",
    "AuthResponse",
    "CategoryListResponse",
    "CategoryRef",
    "CategoryResponse",
    "FavoriteEnvelope",
    "FavoriteResponse",
    "LoginRequest",
    "MessageResponse",
    "OkResponse",
    "ProductDetailEnvelope",
    "ProductDetailResponse",
    "ProductEnvelope",
    "ProductImage",
    "ProductListResponse",
    "ProductResponse",
    "ProductWrite",
    "PublicUser",
    "RegisterRequest",
    "UserEnvelope",
    "VerifyEmailResponse",
    "to_public_user",
]
