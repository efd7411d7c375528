from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime

from models.product import ProductCategory, ProductStatus
from .common import CamelModel, split_tags
from .user import AuthorSchema

_input_config = ConfigDict(
    from_attributes=True,
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
    use_enum_values=True,
)


class ProductCreate(CamelModel):
    """Schema for creating a new product"""
    model_config = _input_config

    name: str = Field(..., min_length=2, max_length=100, description="Name of the product")
    description: str = Field(..., min_length=10, max_length=1000, description="Description of the product")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Price of the product")
    stock: int = Field(..., ge=0, description="Units in stock")
    category: ProductCategory = Field(..., description="One of the catalog categories")
    image: Optional[str] = Field(None, max_length=500, description="Main image URL")
    images: List[str] = Field(default_factory=list, description="Additional image URLs")
    tags: List[str] = Field(default_factory=list, description="Tags, as a list or comma-separated string")
    status: ProductStatus = ProductStatus.ACTIVE
    featured: bool = False

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, value):
        return split_tags(value)


class ProductUpdate(CamelModel):
    """Schema for updating a product (all fields optional)"""
    model_config = _input_config

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=1000)
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    stock: Optional[int] = Field(None, ge=0)
    category: Optional[ProductCategory] = None
    image: Optional[str] = Field(None, max_length=500)
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    status: Optional[ProductStatus] = None
    featured: Optional[bool] = None

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, value):
        return split_tags(value)


class ProductSchema(CamelModel):
    """Schema for returning product data"""
    id: int
    name: str
    description: str
    price: float
    category: str
    stock: int
    image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    status: str
    featured: bool
    tags: List[str] = Field(default_factory=list)
    likes: int
    liked_by: List[int] = Field(default_factory=list)
    views: int
    sales: int
    rating_average: float
    rating_count: int
    is_active: bool
    is_available: bool
    stock_status: str
    author_id: int
    author: Optional[AuthorSchema] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("images", "tags", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return value or []


class ProductWithFavorites(ProductSchema):
    """Product plus favorites-ledger data for the requesting user"""
    favorite_count: int = 0
    is_favorite: bool = False


class LikeResult(CamelModel):
    likes: int
    is_liked: bool


class DashboardStats(CamelModel):
    total_products: int
    active_products: int
    total_sales: int
    total_revenue: float
    total_likes: int
    total_favorites: int


class ImageUpload(CamelModel):
    url: str
