"""Content repository: preview and full projections of catalog rows."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quota_gate.content.models import ArticleModel, VideoModel
from quota_gate.content.schemas import (
    Article,
    ArticlePreview,
    FullContent,
    Preview,
    Video,
    VideoPreview,
)
from quota_gate.content.timestamps import normalize_timestamp
from quota_gate.membership.policy import ContentType

_MODELS = {
    ContentType.ARTICLE: ArticleModel,
    ContentType.VIDEO: VideoModel,
}


def _article_preview(row: ArticleModel) -> ArticlePreview:
    return ArticlePreview(
        id=row.id,
        title=row.title,
        slug=row.slug,
        preview=row.preview or "",
        cover_image=row.cover_image,
        author=row.author or "",
        published_at=normalize_timestamp(row.published_at),
    )


def _article(row: ArticleModel) -> Article:
    return Article(
        id=row.id,
        title=row.title,
        slug=row.slug,
        preview=row.preview or "",
        content=row.content or "",
        cover_image=row.cover_image,
        author=row.author or "",
        published_at=normalize_timestamp(row.published_at),
        created_at=normalize_timestamp(row.created_at),
        updated_at=normalize_timestamp(row.updated_at),
    )


def _video_preview(row: VideoModel) -> VideoPreview:
    return VideoPreview(
        id=row.id,
        title=row.title,
        slug=row.slug,
        description=row.description or "",
        thumbnail=row.thumbnail or "",
        duration=row.duration or 0,
        author=row.author or "",
        published_at=normalize_timestamp(row.published_at),
    )


def _video(row: VideoModel) -> Video:
    return Video(
        id=row.id,
        title=row.title,
        slug=row.slug,
        description=row.description or "",
        thumbnail=row.thumbnail or "",
        video_url=row.video_url or "",
        duration=row.duration or 0,
        author=row.author or "",
        published_at=normalize_timestamp(row.published_at),
        created_at=normalize_timestamp(row.created_at),
        updated_at=normalize_timestamp(row.updated_at),
    )


_PREVIEW = {ContentType.ARTICLE: _article_preview, ContentType.VIDEO: _video_preview}
_FULL = {ContentType.ARTICLE: _article, ContentType.VIDEO: _video}


class ContentRepository:
    """Read-only access to the article and video catalogs."""

    async def list_previews(
        self,
        session: AsyncSession,
        content_type: ContentType | str,
        limit: int,
    ) -> list[Preview]:
        """Newest-first previews with protected fields removed."""
        content_type = ContentType(content_type)
        model = _MODELS[content_type]
        result = await session.execute(
            select(model)
            .order_by(model.published_at.desc(), model.id)
            .limit(limit)
        )
        project = _PREVIEW[content_type]
        return [project(row) for row in result.scalars().all()]

    async def get_full(
        self,
        session: AsyncSession,
        content_type: ContentType | str,
        content_id: str,
    ) -> FullContent | None:
        """Full projection including protected fields. Call only after a grant."""
        content_type = ContentType(content_type)
        model = _MODELS[content_type]
        result = await session.execute(select(model).where(model.id == content_id))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return _FULL[content_type](row)
