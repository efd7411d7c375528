from sqlalchemy import Column, DateTime, Integer, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Session, relationship, joinedload
from models.base import BaseModel, utcnow


class FavoriteModel(BaseModel):
    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True)
    added_at = Column(DateTime, default=utcnow)

    # Relationships
    user = relationship('UserModel', backref='favorites')
    product = relationship('ProductModel', back_populates='favorites')

    # Ensure a user can only favorite a product once
    __table_args__ = (
        UniqueConstraint('user_id', 'product_id', name='unique_user_product_favorite'),
    )

    @classmethod
    def is_product_favorited_by_user(cls, db: Session, user_id: int, product_id: int) -> bool:
        return db.query(
            db.query(cls).filter(cls.user_id == user_id, cls.product_id == product_id).exists()
        ).scalar()

    @classmethod
    def get_product_favorite_count(cls, db: Session, product_id: int) -> int:
        return db.query(func.count(cls.id)).filter(cls.product_id == product_id).scalar()

    @classmethod
    def count_by_product(cls, db: Session, product_ids) -> dict:
        """Favorite counts for many products in one query. Products without favorites are omitted."""
        if not product_ids:
            return {}
        rows = db.query(cls.product_id, func.count(cls.id))\
                 .filter(cls.product_id.in_(product_ids))\
                 .group_by(cls.product_id)\
                 .all()
        return {product_id: count for product_id, count in rows}

    @classmethod
    def favorited_product_ids(cls, db: Session, user_id: int, product_ids=None) -> set:
        query = db.query(cls.product_id).filter(cls.user_id == user_id)
        if product_ids is not None:
            if not product_ids:
                return set()
            query = query.filter(cls.product_id.in_(product_ids))
        return {product_id for (product_id,) in query.all()}

    @classmethod
    def get_user_favorites(cls, db: Session, user_id: int, page: int = 1, limit: int = 10):
        return db.query(cls)\
                 .options(joinedload(cls.product))\
                 .filter(cls.user_id == user_id)\
                 .order_by(cls.created_at.desc(), cls.id.desc())\
                 .offset((page - 1) * limit)\
                 .limit(limit)\
                 .all()

    def __repr__(self):
        return f"<Favorite(user_id={self.user_id}, product_id={self.product_id})>"
