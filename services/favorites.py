from typing import Iterable, List

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from errors import DuplicateKey, NotFound
from models.favorite import FavoriteModel
from models.product import ProductModel
from models.user import UserModel
from serializers.product import ProductWithFavorites
from services.auth import AuthContext


def attach_favorite_info(db: Session, products: Iterable[ProductModel], auth: AuthContext) -> List[ProductWithFavorites]:
    """
    Enrich products with ``favoriteCount`` and ``isFavorite``.

    Both values are read from the favorites table on every call, one grouped
    count plus one membership query for the whole page. ``likes`` is left
    untouched: it is a separate counter.
    """
    products = list(products)
    product_ids = [product.id for product in products]

    counts = FavoriteModel.count_by_product(db, product_ids)
    if auth.is_authenticated:
        favorited = FavoriteModel.favorited_product_ids(db, auth.user_id, product_ids)
    else:
        favorited = set()

    enriched = []
    for product in products:
        item = ProductWithFavorites.model_validate(product)
        item.favorite_count = counts.get(product.id, 0)
        item.is_favorite = product.id in favorited
        enriched.append(item)
    return enriched


def add_favorite(db: Session, user: UserModel, product_id: int) -> FavoriteModel:
    product = db.query(ProductModel).filter(ProductModel.id == product_id).first()
    if not product:
        raise NotFound(f"Product with id {product_id} not found")

    if FavoriteModel.is_product_favorited_by_user(db, user.id, product_id):
        raise DuplicateKey("Product already in favorites")

    favorite = FavoriteModel(user_id=user.id, product_id=product_id)
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent request stored the same pair first
        db.rollback()
        raise DuplicateKey("Product already in favorites")
    db.refresh(favorite)

    logger.debug(f"User {user.id} favorited product {product_id}")
    return favorite


def remove_favorite(db: Session, user: UserModel, product_id: int) -> bool:
    """Delete the (user, product) favorite. Returns False when there was none."""
    deleted = db.query(FavoriteModel).filter(
        FavoriteModel.user_id == user.id,
        FavoriteModel.product_id == product_id,
    ).delete(synchronize_session=False)
    db.commit()
    return bool(deleted)
