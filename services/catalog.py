"""
Catalog queries: turns listing parameters into SQLAlchemy filter and sort
clauses, runs them with pagination, and computes seller dashboard totals.
"""

import math
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Query, Session

from errors import InvalidParameter, field_errors
from models.favorite import FavoriteModel
from models.product import ProductModel, ProductStatus
from serializers.common import MAX_ID, Pagination

ALL_CATEGORIES = "all"
DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100
# Keeps the row offset within a 64-bit INTEGER.
MAX_PAGE = MAX_ID // MAX_PAGE_SIZE

SORTABLE_FIELDS = {
    "createdAt": ProductModel.created_at,
    "updatedAt": ProductModel.updated_at,
    "price": ProductModel.price,
    "name": ProductModel.name,
    "likes": ProductModel.likes,
    "views": ProductModel.views,
    "stock": ProductModel.stock,
    "sales": ProductModel.sales,
}


class ProductFilters(BaseModel):
    """Listing parameters for the product catalog, already coerced and range-checked."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    page: int = Field(1, ge=1, le=MAX_PAGE)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    category: Optional[str] = None
    status: str = ProductStatus.ACTIVE.value
    search: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    max_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    sort_by: str = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"
    featured: Optional[bool] = None
    author: Optional[int] = Field(None, le=MAX_ID)

    @field_validator("category", "search", "min_price", "max_price", "featured", "author", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return ProductStatus.ACTIVE.value
        return value

    @field_validator("sort_by")
    @classmethod
    def known_sort_field(cls, value):
        if value not in SORTABLE_FIELDS:
            raise ValueError(f"sortBy must be one of: {', '.join(SORTABLE_FIELDS)}")
        return value

    @field_validator("sort_order", mode="before")
    @classmethod
    def lowercase_order(cls, value):
        return value.lower() if isinstance(value, str) else value

    @classmethod
    def from_params(cls, **params):
        """Build filters from raw request values; ``None`` means "not supplied"."""
        supplied = {key: value for key, value in params.items() if value is not None}
        try:
            return cls(**supplied)
        except ValidationError as error:
            raise InvalidParameter(errors=field_errors(error.errors()))

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def tag_contains(term: str):
    """EXISTS clause: one element of the product's tag list contains ``term``."""
    tag = func.json_each(ProductModel.tags).table_valued("value", name="tag")
    return select(tag.c.value)\
        .where(tag.c.value.icontains(term, autoescape=True))\
        .exists()


def build_product_criteria(filters: ProductFilters) -> list:
    """
    Translate filters into a list of SQL criteria, to be AND-ed together.

    The order of the list is fixed, so equal filters always produce the
    same statement.
    """
    criteria = [
        ProductModel.status == filters.status,
        ProductModel.is_active.is_(True),
    ]

    if filters.category and filters.category.lower() != ALL_CATEGORIES:
        criteria.append(ProductModel.category.icontains(filters.category, autoescape=True))

    if filters.search:
        term = filters.search
        criteria.append(or_(
            ProductModel.name.icontains(term, autoescape=True),
            ProductModel.description.icontains(term, autoescape=True),
            ProductModel.category.icontains(term, autoescape=True),
            tag_contains(term),
        ))

    if filters.min_price is not None:
        criteria.append(ProductModel.price >= filters.min_price)
    if filters.max_price is not None:
        criteria.append(ProductModel.price <= filters.max_price)

    if filters.featured is not None:
        criteria.append(ProductModel.featured.is_(filters.featured))

    if filters.author is not None:
        criteria.append(ProductModel.author_id == filters.author)

    return criteria


def build_product_sort(filters: ProductFilters) -> list:
    column = SORTABLE_FIELDS[filters.sort_by]
    if filters.sort_order == "desc":
        return [column.desc(), ProductModel.id.desc()]
    return [column.asc(), ProductModel.id.asc()]


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def paginate(query: Query, page: int, limit: int) -> Tuple[list, Pagination]:
    """Run ``query`` for one page and count every match ignoring the page."""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, Pagination(page=page, limit=limit, total=total, pages=page_count(total, limit))


def get_filtered_products(db: Session, filters: ProductFilters) -> Tuple[List[ProductModel], Pagination]:
    query = db.query(ProductModel)\
              .filter(*build_product_criteria(filters))\
              .order_by(*build_product_sort(filters))
    return paginate(query, filters.page, filters.limit)


def get_seller_products(db: Session, author_id: int, page: int, limit: int, status: Optional[str] = None):
    """Every product of one seller regardless of isActive, optionally narrowed by status."""
    query = db.query(ProductModel).filter(ProductModel.author_id == author_id)
    if status and status.lower() != ALL_CATEGORIES:
        query = query.filter(ProductModel.status == status)
    query = query.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
    return paginate(query, page, limit)


def get_dashboard_stats(db: Session, author_id: int) -> dict:
    own_products = db.query(ProductModel).filter(ProductModel.author_id == author_id)

    total_products = own_products.count()
    active_products = own_products.filter(ProductModel.status == ProductStatus.ACTIVE.value).count()

    total_sales, total_revenue, total_likes = db.query(
        func.coalesce(func.sum(ProductModel.sales), 0),
        func.coalesce(func.sum(ProductModel.sales * ProductModel.price), 0),
        func.coalesce(func.sum(ProductModel.likes), 0),
    ).filter(ProductModel.author_id == author_id).one()

    total_favorites = db.query(func.count(FavoriteModel.id))\
                        .join(ProductModel, FavoriteModel.product_id == ProductModel.id)\
                        .filter(ProductModel.author_id == author_id)\
                        .scalar()

    return {
        "total_products": total_products,
        "active_products": active_products,
        "total_sales": int(total_sales),
        "total_revenue": float(total_revenue),
        "total_likes": int(total_likes),
        "total_favorites": total_favorites,
    }
