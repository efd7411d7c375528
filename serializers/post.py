from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime

from models.post import PostCategory, PostStatus
from .common import CamelModel, split_tags
from .user import AuthorSchema

_input_config = ConfigDict(
    from_attributes=True,
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
    use_enum_values=True,
)


class PostCreate(CamelModel):
    """Schema for creating a blog post"""
    model_config = _input_config

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=10)
    excerpt: Optional[str] = Field(None, max_length=300, description="Derived from content when omitted")
    category: PostCategory = PostCategory.FASHION_TRENDS
    image: Optional[str] = Field(None, max_length=500)
    status: PostStatus = PostStatus.DRAFT
    featured: bool = False
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, value):
        return split_tags(value)


class PostUpdate(CamelModel):
    """Schema for updating a post (all fields optional)"""
    model_config = _input_config

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=10)
    excerpt: Optional[str] = Field(None, max_length=300)
    category: Optional[PostCategory] = None
    image: Optional[str] = Field(None, max_length=500)
    status: Optional[PostStatus] = None
    featured: Optional[bool] = None
    tags: Optional[List[str]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, value):
        return split_tags(value)


class PostSchema(CamelModel):
    """Schema for returning post data"""
    id: int
    title: str
    content: str
    excerpt: Optional[str] = None
    category: str
    image: Optional[str] = None
    status: str
    featured: bool
    views: int
    likes: int
    tags: List[str] = Field(default_factory=list)
    read_time: int
    author_id: int
    author: Optional[AuthorSchema] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return value or []
