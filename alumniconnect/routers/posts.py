"""Feed routes: posting, likes, comments and sharing."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..schemas import (
    CommentCreate,
    LikeStateResponse,
    Message,
    Post,
    PostCreate,
    PostFeedResponse,
    SharePostRequest,
    User,
)
from ..services import Repository, compose_comment, compose_post, get_current_user, get_repository

router = APIRouter(prefix="/posts", tags=["posts"])

logger = logging.getLogger(__name__)


def _require_post(repository: Repository, post_id: str) -> Post:
    post = repository.get_post(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.get("/", response_model=PostFeedResponse)
async def feed_endpoint(
    q: str = Query(default="", max_length=200),
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> PostFeedResponse:
    return PostFeedResponse(items=repository.search_posts(q))


@router.post("/", response_model=Post, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    payload: PostCreate,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> Post:
    post = compose_post(current_user, content=payload.content, image_url=payload.image_url)
    if post is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Post content cannot be empty")
    return repository.create_post(post)


@router.get("/{post_id}", response_model=Post)
async def get_post_endpoint(
    post_id: str,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> Post:
    return _require_post(repository, post_id)


@router.post("/{post_id}/like", response_model=LikeStateResponse)
async def toggle_like_endpoint(
    post_id: str,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> LikeStateResponse:
    post = repository.toggle_like_post(post_id, current_user.id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return LikeStateResponse(post_id=post.id, liked=current_user.id in post.likes, like_count=len(post.likes))


@router.post("/{post_id}/comments", response_model=Post, status_code=status.HTTP_201_CREATED)
async def add_comment_endpoint(
    post_id: str,
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> Post:
    comment = compose_comment(current_user, content=payload.content)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment cannot be empty")
    post = repository.add_comment(post_id, comment)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.post("/{post_id}/share", response_model=list[Message], status_code=status.HTTP_201_CREATED)
async def share_post_endpoint(
    post_id: str,
    payload: SharePostRequest,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> list[Message]:
    _require_post(repository, post_id)
    sent = repository.share_post(post_id, current_user.id, payload.recipient_ids)
    logger.info("User %s shared post %s with %d recipient(s)", current_user.id, post_id, len(sent))
    return sent
