"""Membership tiers and the per-content-type access limits they grant.

This table is the only place tier limits are encoded. Display copy (upgrade
prompts, usage meters) is derived from it through ``describe_limit`` and
``membership_name`` rather than re-stating numbers.

Tier   Articles    Videos
A      3           3
B      10          10
C      unlimited   unlimited
"""

from enum import Enum
from typing import Union


class MembershipTier(str, Enum):
    A = "A"
    B = "B"
    C = "C"


class ContentType(str, Enum):
    ARTICLE = "article"
    VIDEO = "video"


class _Unlimited:
    """Sentinel for a limit that is never reached. Not a number."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNLIMITED"

    def __reduce__(self):
        return (_Unlimited, ())


UNLIMITED = _Unlimited()

Limit = Union[int, _Unlimited]

MEMBERSHIP_LIMITS: dict[MembershipTier, dict[ContentType, Limit]] = {
    MembershipTier.A: {ContentType.ARTICLE: 3, ContentType.VIDEO: 3},
    MembershipTier.B: {ContentType.ARTICLE: 10, ContentType.VIDEO: 10},
    MembershipTier.C: {ContentType.ARTICLE: UNLIMITED, ContentType.VIDEO: UNLIMITED},
}

MEMBERSHIP_NAMES = {
    MembershipTier.A: "Basic",
    MembershipTier.B: "Standard",
    MembershipTier.C: "Premium",
}

DEFAULT_MEMBERSHIP_TIER = MembershipTier.A

_PLURALS = {ContentType.ARTICLE: "articles", ContentType.VIDEO: "videos"}


def limit_for(tier: Union[MembershipTier, str], content_type: Union[ContentType, str]) -> Limit:
    """Return the access limit for a tier and content type.

    Raises:
        ValueError: If the tier or content type is unknown. This indicates
            version skew between the user store and this service and is
            never translated into a client error.
    """
    return MEMBERSHIP_LIMITS[MembershipTier(tier)][ContentType(content_type)]


def is_unlimited(limit: Limit) -> bool:
    return limit is UNLIMITED


def remaining_for(limit: Limit, count: int) -> Limit:
    """Remaining quota for ``count`` items consumed; never negative."""
    if limit is UNLIMITED:
        return UNLIMITED
    return max(0, limit - count)


def membership_name(tier: Union[MembershipTier, str]) -> str:
    return MEMBERSHIP_NAMES[MembershipTier(tier)]


def describe_limit(limit: Limit, content_type: Union[ContentType, str]) -> str:
    """Human label for a limit, e.g. ``"3 articles"`` or ``"Unlimited videos"``."""
    noun = _PLURALS[ContentType(content_type)]
    if limit is UNLIMITED:
        return f"Unlimited {noun}"
    return f"{limit} {noun}"
