import enum
import math

from sqlalchemy import Boolean, Column, ForeignKey, Integer, JSON, String, Text, event
from sqlalchemy.orm import relationship

from .base import BaseModel


class PostCategory(str, enum.Enum):
    FASHION_TRENDS = "Fashion Trends"
    STYLE_TIPS = "Style Tips"
    SUSTAINABILITY = "Sustainability"
    BRAND_STORIES = "Brand Stories"
    SEASONAL = "Seasonal"


class PostStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


DEFAULT_POST_IMAGE = "https://images.unsplash.com/photo-1558769132-cb1aea458c5e?w=600&h=400&fit=crop&crop=center"
EXCERPT_LENGTH = 150
WORDS_PER_MINUTE = 200


def build_excerpt(content):
    return content[:EXCERPT_LENGTH] + "..."


def compute_read_time(content):
    """Minutes needed to read ``content`` at 200 words per minute."""
    return math.ceil(len(content.split()) / WORDS_PER_MINUTE)


class PostModel(BaseModel):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(String(300), nullable=True)
    category = Column(String(50), nullable=False, default=PostCategory.FASHION_TRENDS.value, index=True)
    image = Column(String(500), default=DEFAULT_POST_IMAGE)
    status = Column(String(20), nullable=False, default=PostStatus.DRAFT.value, index=True)
    featured = Column(Boolean, nullable=False, default=False)
    views = Column(Integer, nullable=False, default=0)
    likes = Column(Integer, nullable=False, default=0)
    tags = Column(JSON, default=list)
    read_time = Column(Integer, nullable=False, default=5)
    author_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    # Relationships
    author = relationship('UserModel', lazy='selectin')

    def fill_derived_fields(self):
        """Derive excerpt (only when missing) and read time from content."""
        if not self.excerpt and self.content:
            self.excerpt = build_excerpt(self.content)
        if self.content:
            self.read_time = compute_read_time(self.content)

    def increment_views(self):
        self.views = (self.views or 0) + 1

    def __repr__(self):
        return f"<Post(id={self.id}, title='{self.title}')>"


@event.listens_for(PostModel, "before_insert")
@event.listens_for(PostModel, "before_update")
def _post_before_save(mapper, connection, target):
    target.fill_derived_fields()
