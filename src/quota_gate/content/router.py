"""Articles and videos API router.

Listing is free. Detail reads go through the access gate and answer 403
``QUOTA_EXCEEDED`` or 404 ``NOT_FOUND`` through the app's error handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from quota_gate.common.schemas import ErrorResponse
from quota_gate.common.security import require_user
from quota_gate.content.schemas import (
    ArticleDetailResponse,
    ArticleListing,
    ArticleListResponse,
    VideoDetailResponse,
    VideoListing,
    VideoListResponse,
)
from quota_gate.membership.policy import ContentType
from quota_gate.users.models import UserModel

router = APIRouter(responses={
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
})

_GATED = {
    403: {"model": ErrorResponse, "description": "Quota exceeded"},
    404: {"model": ErrorResponse, "description": "No such item"},
}

CONTENT_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


def _get_service():
    from quota_gate.deps import get_content_service
    return get_content_service()


def _get_db():
    from quota_gate.deps import get_db
    return get_db()


def _content_id():
    return Path(..., min_length=1, max_length=128, pattern=CONTENT_ID_PATTERN)


# ── Articles ──

@router.get("/articles", response_model=ArticleListResponse)
async def list_articles(
    limit: Optional[int] = Query(None, ge=1),
    user: UserModel = Depends(require_user),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        listing = await svc.list_with_usage(session, user, ContentType.ARTICLE, limit)
        return ArticleListResponse(data=ArticleListing(
            items=listing.items,
            accessed_ids=listing.accessed_ids,
            usage=listing.usage,
        ))


@router.get("/articles/{article_id}", response_model=ArticleDetailResponse, responses=_GATED)
async def get_article(
    article_id: str = _content_id(),
    user: UserModel = Depends(require_user),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        access = await svc.get_one(session, user, ContentType.ARTICLE, article_id)
        return ArticleDetailResponse(data=access.item, usage=access.usage)


# ── Videos ──

@router.get("/videos", response_model=VideoListResponse)
async def list_videos(
    limit: Optional[int] = Query(None, ge=1),
    user: UserModel = Depends(require_user),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        listing = await svc.list_with_usage(session, user, ContentType.VIDEO, limit)
        return VideoListResponse(data=VideoListing(
            items=listing.items,
            accessed_ids=listing.accessed_ids,
            usage=listing.usage,
        ))


@router.get("/videos/{video_id}", response_model=VideoDetailResponse, responses=_GATED)
async def get_video(
    video_id: str = _content_id(),
    user: UserModel = Depends(require_user),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        access = await svc.get_one(session, user, ContentType.VIDEO, video_id)
        return VideoDetailResponse(data=access.item, usage=access.usage)
