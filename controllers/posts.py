from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from dependencies.get_current_user import get_current_user
from dependencies.params import parse_object_id
from errors import Forbidden, NotFound
from models.post import PostModel, PostStatus
from models.user import UserModel
from serializers.common import Envelope, MessageResponse, PaginatedEnvelope
from serializers.post import PostCreate, PostSchema, PostUpdate
from services.catalog import ALL_CATEGORIES, MAX_PAGE, MAX_PAGE_SIZE, paginate
from loguru import logger

router = APIRouter()


def get_post_or_404(db: Session, raw_id) -> PostModel:
    post_id = parse_object_id(raw_id, "post")
    post = db.query(PostModel).filter(PostModel.id == post_id).first()
    if not post:
        raise NotFound("Post not found")
    return post


def ensure_author(post: PostModel, user: UserModel, action: str):
    if post.author_id != user.id:
        raise Forbidden(f"Not authorized to {action} this post")


# GET published posts (public)
@router.get('', response_model=PaginatedEnvelope[PostSchema])
def get_posts(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    category: Optional[str] = Query(None, description="Category, or 'all'"),
    search: Optional[str] = Query(None, description="Search title, content and excerpt"),
    featured: Optional[bool] = Query(None),
):
    """
    Get published posts, newest first.
    """
    query = db.query(PostModel).filter(PostModel.status == PostStatus.PUBLISHED.value)

    if category and category.lower() != ALL_CATEGORIES:
        query = query.filter(PostModel.category == category)
    if search:
        query = query.filter(or_(
            PostModel.title.icontains(search, autoescape=True),
            PostModel.content.icontains(search, autoescape=True),
            PostModel.excerpt.icontains(search, autoescape=True),
        ))
    if featured is not None:
        query = query.filter(PostModel.featured.is_(featured))

    query = query.order_by(PostModel.created_at.desc(), PostModel.id.desc())
    posts, pagination = paginate(query, page, limit)
    return {"success": True, "data": posts, "pagination": pagination}


# GET caller's posts, any status
@router.get('/my-posts', response_model=PaginatedEnvelope[PostSchema])
def get_my_posts(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
):
    query = db.query(PostModel)\
              .filter(PostModel.author_id == current_user.id)\
              .order_by(PostModel.created_at.desc(), PostModel.id.desc())
    posts, pagination = paginate(query, page, limit)
    return {"success": True, "data": posts, "pagination": pagination}


@router.get('/{post_id}', response_model=Envelope[PostSchema])
def get_post(post_id: str, db: Session = Depends(get_db)):
    post = get_post_or_404(db, post_id)

    post.increment_views()
    db.commit()
    db.refresh(post)

    return {"success": True, "data": post}


@router.post('', response_model=Envelope[PostSchema], status_code=status.HTTP_201_CREATED)
def create_post(
    post: PostCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    """
    Create a blog post. Excerpt and read time are derived from the content.
    """
    new_post = PostModel(**post.model_dump(exclude_none=True), author_id=current_user.id)

    db.add(new_post)
    db.commit()
    db.refresh(new_post)

    logger.info(f"Post {new_post.id} created by user {current_user.id}")
    return {"success": True, "message": "Post created successfully", "data": new_post}


@router.put('/{post_id}', response_model=Envelope[PostSchema])
def update_post(
    post_id: str,
    post_update: PostUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    db_post = get_post_or_404(db, post_id)
    ensure_author(db_post, current_user, "update")

    for key, value in post_update.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(db_post, key, value)

    db.commit()
    db.refresh(db_post)
    return {"success": True, "message": "Post updated successfully", "data": db_post}


@router.delete('/{post_id}', response_model=MessageResponse)
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    db_post = get_post_or_404(db, post_id)
    ensure_author(db_post, current_user, "delete")

    db.delete(db_post)
    db.commit()

    return {"success": True, "message": "Post deleted successfully"}
