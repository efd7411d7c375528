import enum

from sqlalchemy import (
    Boolean, CheckConstraint, Column, Float, ForeignKey, Integer, JSON, String, Table,
)
from sqlalchemy.orm import relationship

from models.base import Base, BaseModel


class ProductCategory(str, enum.Enum):
    CLOTHING = "Clothing"
    SHOES = "Shoes"
    ACCESSORIES = "Accessories"
    BAGS = "Bags"
    JEWELRY = "Jewelry"
    ELECTRONICS = "Electronics"
    HOME = "Home"
    SPORTS = "Sports"
    BEAUTY = "Beauty"
    BOOKS = "Books"
    OTHER = "Other"


class ProductStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class StockStatus(str, enum.Enum):
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"


DEFAULT_PRODUCT_IMAGE = "https://images.unsplash.com/photo-1441986300917-64674bd600d8?w=400&h=400&fit=crop"
LOW_STOCK_THRESHOLD = 5

# Users who liked a product. Kept apart from the favorites ledger on purpose:
# `likes` is a counter maintained by toggle_like, favorites are counted on read.
product_likes = Table(
    "product_likes",
    Base.metadata,
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class ProductModel(BaseModel):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(1000), nullable=False)
    price = Column(Float, nullable=False, index=True)
    category = Column(String(50), nullable=False, index=True)
    stock = Column(Integer, nullable=False, default=0)
    image = Column(String(500), default=DEFAULT_PRODUCT_IMAGE)
    images = Column(JSON, default=list)
    status = Column(String(20), nullable=False, default=ProductStatus.ACTIVE.value, index=True)
    featured = Column(Boolean, nullable=False, default=False, index=True)
    tags = Column(JSON, default=list)
    likes = Column(Integer, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    sales = Column(Integer, nullable=False, default=0)
    rating_average = Column(Float, nullable=False, default=0)
    rating_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    author_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    # Relationships
    author = relationship('UserModel', lazy='selectin')
    likers = relationship('UserModel', secondary=product_likes, lazy='selectin')
    favorites = relationship(
        'FavoriteModel',
        back_populates='product',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
        CheckConstraint('stock >= 0', name='ck_products_stock_non_negative'),
        CheckConstraint('likes >= 0', name='ck_products_likes_non_negative'),
        CheckConstraint('views >= 0', name='ck_products_views_non_negative'),
        CheckConstraint('sales >= 0', name='ck_products_sales_non_negative'),
    )

    @property
    def liked_by(self):
        return [user.id for user in self.likers]

    @property
    def is_available(self):
        return self.stock > 0 and self.status == ProductStatus.ACTIVE.value and bool(self.is_active)

    @property
    def stock_status(self):
        if self.stock == 0:
            return StockStatus.OUT_OF_STOCK.value
        if self.stock <= LOW_STOCK_THRESHOLD:
            return StockStatus.LOW_STOCK.value
        return StockStatus.IN_STOCK.value

    def is_liked_by(self, user_id):
        return any(user.id == user_id for user in self.likers)

    def toggle_like(self, user):
        """Add or remove ``user`` from likers. Returns True when the product is now liked."""
        if self.is_liked_by(user.id):
            self.likers = [u for u in self.likers if u.id != user.id]
            self.likes = max(0, (self.likes or 0) - 1)
            return False

        self.likers.append(user)
        self.likes = (self.likes or 0) + 1
        return True

    def increment_views(self):
        self.views = (self.views or 0) + 1

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
