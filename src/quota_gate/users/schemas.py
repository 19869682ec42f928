"""Pydantic schemas for user endpoints."""

from quota_gate.common.schemas import CamelModel
from quota_gate.usage.schemas import UsageStatsResponse


class UserProfile(CamelModel):
    id: str
    email: str
    name: str = ""
    membership_type: str
    membership_name: str


class ProfileResponse(CamelModel):
    data: UserProfile


class UsageResponse(CamelModel):
    data: UsageStatsResponse
