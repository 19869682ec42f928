"""quota-gate: tiered content access with lifetime per-user quotas."""

from quota_gate.client import ApiError, ContentClient, DetailState, fetch_detail
from quota_gate.membership.policy import (
    UNLIMITED,
    ContentType,
    MembershipTier,
    limit_for,
)

__all__ = [
    "ApiError",
    "ContentClient",
    "DetailState",
    "fetch_detail",
    "UNLIMITED",
    "ContentType",
    "MembershipTier",
    "limit_for",
]
__version__ = "0.1.0"
