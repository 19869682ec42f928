"""Access gate: decide whether a user may open a content item.

A request is either a free replay (the ID is already in the user's set), a
fresh grant (set size strictly below the tier limit, recorded before
returning) or a denial. The read, the comparison and the conditional add form
one optimistic unit: the store's compare-and-swap rejects the write if the
usage row changed after the read, and the gate then decides again from a
fresh read. The persisted count for a content type therefore never exceeds
the tier limit, whatever the interleaving of concurrent requests.
"""

from dataclasses import dataclass
from typing import Union

from sqlalchemy.ext.asyncio import AsyncSession

from quota_gate.common.config import QuotaGateSettings
from quota_gate.common.exceptions import UsageConflictError
from quota_gate.common.logging import get_logger
from quota_gate.membership.policy import UNLIMITED, ContentType, Limit, limit_for
from quota_gate.usage.store import UsageRecord, UsageStore
from quota_gate.users.models import UserModel

logger = get_logger("access.gate")


@dataclass(frozen=True)
class Granted:
    usage: UsageRecord
    limit: Limit
    replay: bool = False


@dataclass(frozen=True)
class Denied:
    current_usage: int
    limit: int
    membership_type: str


Decision = Union[Granted, Denied]


class AccessGate:
    """Quota decision engine."""

    def __init__(self, settings: QuotaGateSettings, store: UsageStore):
        self.settings = settings
        self.store = store

    async def check_and_grant(
        self,
        session: AsyncSession,
        user: UserModel,
        content_type: ContentType | str,
        content_id: str,
    ) -> Decision:
        content_type = ContentType(content_type)
        limit = limit_for(user.membership_type, content_type)

        for attempt in range(1, self.settings.grant_max_attempts + 1):
            usage = await self.store.get_usage(session, user.id)

            if usage.has_accessed(content_type, content_id):
                logger.debug(
                    "access.replay",
                    extra={"user_id": user.id, "content_type": content_type.value,
                           "content_id": content_id},
                )
                return Granted(usage=usage, limit=limit, replay=True)

            current = usage.count(content_type)
            if limit is not UNLIMITED and current >= limit:
                logger.info(
                    "access.denied",
                    extra={"user_id": user.id, "content_type": content_type.value,
                           "content_id": content_id, "current_usage": current,
                           "limit": limit, "membership_type": user.membership_type},
                )
                return Denied(
                    current_usage=current,
                    limit=limit,
                    membership_type=user.membership_type,
                )

            updated = await self.store.record_access(session, usage, content_type, content_id)
            if updated is None:
                logger.info(
                    "access.conflict",
                    extra={"user_id": user.id, "content_type": content_type.value,
                           "attempt": attempt},
                )
                continue

            # The slot is consumed even if the content fetch that follows fails.
            await session.commit()
            logger.info(
                "access.granted",
                extra={"user_id": user.id, "content_type": content_type.value,
                       "content_id": content_id, "current_usage": updated.count(content_type)},
            )
            return Granted(usage=updated, limit=limit)

        raise UsageConflictError()
