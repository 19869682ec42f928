"""Pydantic schemas for usage snapshots."""

from typing import Optional

from quota_gate.common.schemas import CamelModel
from quota_gate.membership.policy import Limit, is_unlimited, remaining_for


class UsageSnapshot(CamelModel):
    """Usage of one content type. ``limit``/``remaining`` are null when unlimited."""

    count: int
    limit: Optional[int] = None
    remaining: Optional[int] = None
    unlimited: bool = False

    @classmethod
    def from_limit(cls, count: int, limit: Limit) -> "UsageSnapshot":
        if is_unlimited(limit):
            return cls(count=count, unlimited=True)
        return cls(count=count, limit=limit, remaining=remaining_for(limit, count))


class ContentUsageStats(UsageSnapshot):
    accessed: list[str]
    label: str


class UsageStatsResponse(CamelModel):
    articles: ContentUsageStats
    videos: ContentUsageStats
    membership_type: str
    membership_name: str
