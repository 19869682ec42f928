"""Usage store: per-user sets of accessed content IDs.

The persisted row holds one JSON list per content type. Lists are treated as
sets: an ID is appended only if absent, so ``count`` is always the size of the
list and can never drift from it.

Writes are compare-and-swap on the row's ``version`` column. A caller reads a
snapshot, decides, and hands the same snapshot back to ``record_access``; if
any other writer touched the row in between, the update matches zero rows and
``None`` is returned so the caller can re-read and decide again.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from quota_gate.common.logging import get_logger
from quota_gate.common.models import utcnow
from quota_gate.membership.policy import ContentType
from quota_gate.usage.models import UsageRecordModel

logger = get_logger("usage.store")

_COLUMNS = {
    ContentType.ARTICLE: "articles_accessed",
    ContentType.VIDEO: "videos_accessed",
}

_INSERT_CONSTRUCTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


@dataclass(frozen=True)
class UsageRecord:
    """Snapshot of one user's usage at a given row version."""

    user_id: str
    articles: tuple[str, ...] = ()
    videos: tuple[str, ...] = ()
    version: int = 0
    persisted: bool = False
    last_updated: Optional[datetime] = field(default=None, compare=False)

    def accessed_ids(self, content_type: ContentType | str) -> list[str]:
        if ContentType(content_type) is ContentType.ARTICLE:
            return list(self.articles)
        return list(self.videos)

    def count(self, content_type: ContentType | str) -> int:
        return len(self.accessed_ids(content_type))

    def has_accessed(self, content_type: ContentType | str, content_id: str) -> bool:
        return content_id in self.accessed_ids(content_type)

    def with_access(self, content_type: ContentType | str, content_id: str) -> "UsageRecord":
        """Return the successor snapshot after a successful write."""
        content_type = ContentType(content_type)
        if self.has_accessed(content_type, content_id):
            return self
        changes = {
            "articles" if content_type is ContentType.ARTICLE else "videos":
                tuple(self.accessed_ids(content_type)) + (content_id,),
        }
        return replace(
            self, version=self.version + 1, persisted=True,
            last_updated=utcnow(), **changes,
        )


def _dedupe(ids: list | None) -> tuple[str, ...]:
    return tuple(dict.fromkeys(ids or ()))


class UsageStore:
    """SQL-backed usage store."""

    async def get_usage(self, session: AsyncSession, user_id: str) -> UsageRecord:
        """Fresh read of a user's usage. A missing row reads as empty sets."""
        result = await session.execute(
            select(
                UsageRecordModel.articles_accessed,
                UsageRecordModel.videos_accessed,
                UsageRecordModel.version,
                UsageRecordModel.updated_at,
            ).where(UsageRecordModel.user_id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            return UsageRecord(user_id=user_id)
        return UsageRecord(
            user_id=user_id,
            articles=_dedupe(row.articles_accessed),
            videos=_dedupe(row.videos_accessed),
            version=row.version,
            persisted=True,
            last_updated=row.updated_at,
        )

    async def record_access(
        self,
        session: AsyncSession,
        snapshot: UsageRecord,
        content_type: ContentType | str,
        content_id: str,
    ) -> UsageRecord | None:
        """Add ``content_id`` to the user's set if the row is still at ``snapshot.version``.

        Idempotent: an ID already in the snapshot returns the snapshot
        unchanged without writing. Returns ``None`` when the snapshot is stale.
        """
        content_type = ContentType(content_type)
        if snapshot.has_accessed(content_type, content_id):
            return snapshot

        if not snapshot.persisted:
            await self._insert_if_absent(session, snapshot.user_id)

        column = _COLUMNS[content_type]
        result = await session.execute(
            update(UsageRecordModel)
            .where(
                UsageRecordModel.user_id == snapshot.user_id,
                UsageRecordModel.version == snapshot.version,
            )
            .values(**{
                column: snapshot.accessed_ids(content_type) + [content_id],
                "version": snapshot.version + 1,
                "updated_at": utcnow(),
            })
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.info(
                "usage.stale_snapshot",
                extra={"user_id": snapshot.user_id, "version": snapshot.version},
            )
            return None
        return snapshot.with_access(content_type, content_id)

    async def _insert_if_absent(self, session: AsyncSession, user_id: str) -> None:
        """Create an empty row at version 0 unless one already exists."""
        dialect = session.get_bind().dialect.name
        try:
            insert = _INSERT_CONSTRUCTS[dialect]
        except KeyError:
            raise RuntimeError(
                f"Usage store needs INSERT ... ON CONFLICT support; '{dialect}' is not supported"
            ) from None
        now = utcnow()
        await session.execute(
            insert(UsageRecordModel)
            .values(
                user_id=user_id,
                articles_accessed=[],
                videos_accessed=[],
                version=0,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["user_id"])
        )
