from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session
from typing import Optional
from loguru import logger
import cloudinary
import cloudinary.uploader

from config.environment import cloudinary_cloud_name, cloudinary_api_key, cloudinary_api_secret
from database import get_db
from dependencies.get_current_user import get_current_user, get_auth_context
from dependencies.params import parse_object_id
from errors import Forbidden, InvalidParameter, NotFound, ServerError
from models.product import ProductModel
from models.user import UserModel
from serializers.common import Envelope, MessageResponse, PaginatedEnvelope
from serializers.product import (
    DashboardStats, ImageUpload, LikeResult, ProductCreate, ProductSchema, ProductUpdate, ProductWithFavorites,
)
from services.auth import AuthContext
from services.catalog import (
    DEFAULT_PAGE_SIZE, MAX_PAGE, MAX_PAGE_SIZE, ProductFilters, get_dashboard_stats, get_filtered_products, get_seller_products,
)
from services.favorites import attach_favorite_info

# Configure Cloudinary
cloudinary.config(
    cloud_name=cloudinary_cloud_name,
    api_key=cloudinary_api_key,
    api_secret=cloudinary_api_secret,
    secure=True
)

router = APIRouter()


def get_product_or_404(db: Session, raw_id) -> ProductModel:
    product_id = parse_object_id(raw_id, "product")
    product = db.query(ProductModel).filter(ProductModel.id == product_id).first()
    if not product:
        raise NotFound("Product not found")
    return product


def ensure_owner(product: ProductModel, user: UserModel, action: str):
    if product.author_id != user.id:
        raise Forbidden(f"Not authorized to {action} this product")


# GET all products (public, token optional)
@router.get('', response_model=PaginatedEnvelope[ProductWithFavorites])
def get_products(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description=f"Results per page (1-{MAX_PAGE_SIZE}, default {DEFAULT_PAGE_SIZE})"),
    category: Optional[str] = Query(None, description="Category, or 'all'"),
    status_filter: Optional[str] = Query(None, alias="status", description="Product status (default active)"),
    search: Optional[str] = Query(None, description="Search name, description, category and tags"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    featured: Optional[str] = Query(None),
    author: Optional[str] = Query(None, description="Seller id"),
):
    """
    Get products with filtering, search, sorting and pagination.

    Each product carries `favoriteCount`, and `isFavorite` for the caller
    when a valid bearer token is sent.
    """
    filters = ProductFilters.from_params(
        page=page,
        limit=limit,
        category=category,
        status=status_filter,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
        featured=featured,
        author=author,
    )

    products, pagination = get_filtered_products(db, filters)

    return {
        "success": True,
        "data": attach_favorite_info(db, products, auth),
        "pagination": pagination,
    }


# GET caller's own products, any status
@router.get('/my-products', response_model=PaginatedEnvelope[ProductSchema])
def get_my_products(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    status_filter: Optional[str] = Query(None, alias="status", description="Status filter, or 'all'"),
):
    products, pagination = get_seller_products(db, current_user.id, page, limit, status_filter)
    return {"success": True, "data": products, "pagination": pagination}


# GET dashboard statistics for the caller's products
@router.get('/dashboard/stats', response_model=Envelope[DashboardStats])
def dashboard_stats(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    return {"success": True, "data": get_dashboard_stats(db, current_user.id)}


# Image upload endpoint
@router.post('/upload-image', response_model=Envelope[ImageUpload])
def upload_product_image(
    file: UploadFile = File(...),
    current_user: UserModel = Depends(get_current_user)
):
    """
    Upload a product image to Cloudinary.
    Returns the image URL.
    """
    if not file.content_type or not file.content_type.startswith('image/'):
        raise InvalidParameter("Only image files are allowed")

    try:
        result = cloudinary.uploader.upload(
            file.file,
            folder="dressify/products",
            resource_type="image",
            transformation=[
                {"width": 800, "height": 800, "crop": "limit"},
                {"quality": "auto:good"}
            ]
        )
    except Exception as e:
        logger.error(f"Image upload failed for user {current_user.id}: {e}")
        raise ServerError("Failed to upload image")

    return {"success": True, "data": {"url": result.get("secure_url")}}


# GET single product (public, token optional)
@router.get('/{product_id}', response_model=Envelope[ProductWithFavorites])
def get_product(
    product_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    product = get_product_or_404(db, product_id)

    product.increment_views()
    db.commit()
    db.refresh(product)

    return {"success": True, "data": attach_favorite_info(db, [product], auth)[0]}


# POST create product (requires authentication)
@router.post('', response_model=Envelope[ProductSchema], status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    """
    Create a new product owned by the authenticated user.
    """
    data = product.model_dump(exclude_none=True)
    new_product = ProductModel(**data, author_id=current_user.id)

    db.add(new_product)
    db.commit()
    db.refresh(new_product)

    logger.info(f"Product {new_product.id} created by user {current_user.id}")
    return {"success": True, "message": "Product created successfully", "data": new_product}


# PUT update product (owner only)
@router.put('/{product_id}', response_model=Envelope[ProductSchema])
def update_product(
    product_id: str,
    product_update: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    """
    Update a product. Only provided fields are changed.
    """
    db_product = get_product_or_404(db, product_id)
    ensure_owner(db_product, current_user, "update")

    update_data = product_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if value is None:
            continue
        setattr(db_product, key, value)

    db.commit()
    db.refresh(db_product)
    return {"success": True, "message": "Product updated successfully", "data": db_product}


# DELETE product (owner only)
@router.delete('/{product_id}', response_model=MessageResponse)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    """
    Delete a product permanently. Its favorites and likes go with it.
    """
    db_product = get_product_or_404(db, product_id)
    ensure_owner(db_product, current_user, "delete")
    deleted_id = db_product.id

    db.delete(db_product)
    db.commit()

    logger.info(f"Product {deleted_id} deleted by user {current_user.id}")
    return {"success": True, "message": "Product deleted successfully"}


# POST toggle like
@router.post('/{product_id}/like', response_model=Envelope[LikeResult])
def toggle_like(
    product_id: str,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    product = get_product_or_404(db, product_id)

    is_liked = product.toggle_like(current_user)
    db.commit()
    db.refresh(product)

    return {
        "success": True,
        "message": "Product liked" if is_liked else "Product unliked",
        "data": {"likes": product.likes, "is_liked": is_liked},
    }
