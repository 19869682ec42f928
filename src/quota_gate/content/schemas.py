"""Pydantic projections of content documents.

Preview projections have no protected field at all (``content`` for articles,
``video_url`` for videos), so a list response cannot carry one.
"""

from datetime import datetime
from typing import Optional, Union

from quota_gate.common.schemas import CamelModel
from quota_gate.usage.schemas import UsageSnapshot


class ArticlePreview(CamelModel):
    id: str
    title: str
    slug: str
    preview: str = ""
    cover_image: Optional[str] = None
    author: str = ""
    published_at: datetime


class Article(ArticlePreview):
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VideoPreview(CamelModel):
    id: str
    title: str
    slug: str
    description: str = ""
    thumbnail: str = ""
    duration: int = 0
    author: str = ""
    published_at: datetime


class Video(VideoPreview):
    video_url: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


Preview = Union[ArticlePreview, VideoPreview]
FullContent = Union[Article, Video]


class ArticleListing(CamelModel):
    items: list[ArticlePreview]
    accessed_ids: list[str]
    usage: UsageSnapshot


class VideoListing(CamelModel):
    items: list[VideoPreview]
    accessed_ids: list[str]
    usage: UsageSnapshot


class ArticleListResponse(CamelModel):
    data: ArticleListing


class VideoListResponse(CamelModel):
    data: VideoListing


class ArticleDetailResponse(CamelModel):
    data: Article
    usage: UsageSnapshot


class VideoDetailResponse(CamelModel):
    data: Video
    usage: UsageSnapshot
