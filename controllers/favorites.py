from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from dependencies.get_current_user import get_current_user
from dependencies.params import parse_object_id
from models.favorite import FavoriteModel
from models.user import UserModel
from serializers.common import Envelope, MessageResponse, PaginatedEnvelope
from serializers.favorite import FavoriteCheck, FavoriteCreate, FavoriteIds, FavoriteResponse, FavoriteWithProduct
from services.catalog import MAX_PAGE, MAX_PAGE_SIZE, paginate
from services.favorites import add_favorite, remove_favorite
from sqlalchemy.orm import joinedload

router = APIRouter()


@router.post('', response_model=Envelope[FavoriteResponse], status_code=status.HTTP_201_CREATED)
def create_favorite(
    favorite: FavoriteCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    """
    Add a product to the user's favorites.

    A second request for the same product fails with 400.
    """
    new_favorite = add_favorite(db, current_user, favorite.product_id)
    return {"success": True, "message": "Product added to favorites", "data": new_favorite}


@router.get('', response_model=PaginatedEnvelope[FavoriteWithProduct])
def get_user_favorites(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    """
    Get the current user's favorites with product details, newest first.
    """
    query = db.query(FavoriteModel)\
              .options(joinedload(FavoriteModel.product))\
              .filter(FavoriteModel.user_id == current_user.id)\
              .order_by(FavoriteModel.created_at.desc(), FavoriteModel.id.desc())
    favorites, pagination = paginate(query, page, limit)
    return {"success": True, "data": favorites, "pagination": pagination}


@router.get('/ids', response_model=Envelope[FavoriteIds])
def get_favorite_ids(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    """
    Lightweight endpoint returning only the favorited product ids.
    """
    product_ids = sorted(FavoriteModel.favorited_product_ids(db, current_user.id))
    return {"success": True, "data": {"product_ids": product_ids}}


@router.get('/check/{product_id}', response_model=Envelope[FavoriteCheck])
def check_favorite(
    product_id: str,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    pid = parse_object_id(product_id, "product")
    is_favorite = FavoriteModel.is_product_favorited_by_user(db, current_user.id, pid)
    return {"success": True, "data": {"is_favorite": is_favorite}}


@router.delete('/{product_id}', response_model=MessageResponse)
def delete_favorite(
    product_id: str,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    """
    Remove a product from the user's favorites. Succeeds even if it was not there.
    """
    pid = parse_object_id(product_id, "product")
    if remove_favorite(db, current_user, pid):
        return {"success": True, "message": f"Product {pid} removed from favorites"}
    return {"success": True, "message": f"Product {pid} was not in favorites"}
