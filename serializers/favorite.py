from pydantic import Field
from typing import List, Optional
from datetime import datetime
from .common import MAX_ID, CamelModel
from .product import ProductSchema


class FavoriteCreate(CamelModel):
    """Schema for creating a favorite"""
    product_id: int = Field(..., gt=0, le=MAX_ID, description="ID of the product to favorite")


class FavoriteResponse(CamelModel):
    """Schema for returning favorite data"""
    id: int
    user_id: int
    product_id: int
    added_at: datetime
    created_at: datetime


class FavoriteWithProduct(FavoriteResponse):
    """Schema for returning favorite with product details"""
    product: Optional[ProductSchema] = None


class FavoriteIds(CamelModel):
    product_ids: List[int]


class FavoriteCheck(CamelModel):
    is_favorite: bool
