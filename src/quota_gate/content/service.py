"""Content service: quota-free listings and quota-gated detail reads."""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quota_gate.access.gate import AccessGate, Denied
from quota_gate.common.config import QuotaGateSettings
from quota_gate.common.exceptions import (
    ArticleNotFoundError,
    NotFoundError,
    QuotaExceededError,
    StoreUnavailableError,
    VideoNotFoundError,
)
from quota_gate.common.logging import get_logger
from quota_gate.content.repository import ContentRepository
from quota_gate.content.schemas import FullContent, Preview
from quota_gate.membership.policy import (
    ContentType,
    describe_limit,
    limit_for,
    membership_name,
)
from quota_gate.usage.schemas import ContentUsageStats, UsageSnapshot, UsageStatsResponse
from quota_gate.usage.store import UsageStore
from quota_gate.users.models import UserModel

logger = get_logger("content.service")

_NOT_FOUND = {
    ContentType.ARTICLE: ArticleNotFoundError,
    ContentType.VIDEO: VideoNotFoundError,
}


@dataclass
class ContentListing:
    items: list[Preview]
    accessed_ids: list[str]
    usage: UsageSnapshot


@dataclass
class ContentAccess:
    item: FullContent
    usage: UsageSnapshot
    replay: bool = False


@asynccontextmanager
async def _store_faults(operation: str) -> AsyncGenerator[None, None]:
    """Translate backing-store failures into the retryable client error."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("store.fault", exc_info=True, extra={"operation": operation})
        raise StoreUnavailableError() from exc


class ContentService:
    """Orchestrates the access gate and the content repository."""

    def __init__(
        self,
        settings: QuotaGateSettings,
        gate: AccessGate,
        repository: ContentRepository,
        store: UsageStore,
    ):
        self.settings = settings
        self.gate = gate
        self.repository = repository
        self.store = store

    def _list_limit(self, limit: int | None) -> int:
        if limit is None:
            return self.settings.default_list_limit
        return min(limit, self.settings.max_list_limit)

    async def list_with_usage(
        self,
        session: AsyncSession,
        user: UserModel,
        content_type: ContentType | str,
        limit: int | None = None,
    ) -> ContentListing:
        """Previews plus the user's accessed IDs. Never consumes quota."""
        content_type = ContentType(content_type)
        quota = limit_for(user.membership_type, content_type)
        async with _store_faults("list"):
            items = await self.repository.list_previews(
                session, content_type, self._list_limit(limit)
            )
            usage = await self.store.get_usage(session, user.id)

        return ContentListing(
            items=items,
            accessed_ids=usage.accessed_ids(content_type),
            usage=UsageSnapshot.from_limit(usage.count(content_type), quota),
        )

    async def get_one(
        self,
        session: AsyncSession,
        user: UserModel,
        content_type: ContentType | str,
        content_id: str,
    ) -> ContentAccess:
        """Full item after a quota decision.

        Raises:
            QuotaExceededError: The item is new and the tier quota is used up.
            NotFoundError: The grant went through but no document has this ID.
                The consumed slot is kept.
            StoreUnavailableError: The backing store failed.
        """
        content_type = ContentType(content_type)
        async with _store_faults("grant"):
            decision = await self.gate.check_and_grant(
                session, user, content_type, content_id
            )

        if isinstance(decision, Denied):
            raise QuotaExceededError(
                decision.current_usage, decision.limit, decision.membership_type
            )

        async with _store_faults("fetch"):
            item = await self.repository.get_full(session, content_type, content_id)

        if item is None:
            logger.warning(
                "content.missing_after_grant",
                extra={"user_id": user.id, "content_type": content_type.value,
                       "content_id": content_id, "replay": decision.replay},
            )
            raise _NOT_FOUND.get(content_type, NotFoundError)()

        return ContentAccess(
            item=item,
            usage=UsageSnapshot.from_limit(
                decision.usage.count(content_type), decision.limit
            ),
            replay=decision.replay,
        )

    async def usage_stats(self, session: AsyncSession, user: UserModel) -> UsageStatsResponse:
        """Usage, limits and remaining quota for both content types."""
        async with _store_faults("usage"):
            usage = await self.store.get_usage(session, user.id)

        def _stats(content_type: ContentType) -> ContentUsageStats:
            limit = limit_for(user.membership_type, content_type)
            snapshot = UsageSnapshot.from_limit(usage.count(content_type), limit)
            return ContentUsageStats(
                **snapshot.model_dump(),
                accessed=usage.accessed_ids(content_type),
                label=describe_limit(limit, content_type),
            )

        return UsageStatsResponse(
            articles=_stats(ContentType.ARTICLE),
            videos=_stats(ContentType.VIDEO),
            membership_type=user.membership_type,
            membership_name=membership_name(user.membership_type),
        )
