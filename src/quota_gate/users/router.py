"""User profile and usage API router."""

from fastapi import APIRouter, Depends

from quota_gate.common.schemas import ErrorResponse
from quota_gate.common.security import require_user
from quota_gate.membership.policy import membership_name
from quota_gate.users.models import UserModel
from quota_gate.users.schemas import ProfileResponse, UsageResponse, UserProfile

router = APIRouter(responses={401: {"model": ErrorResponse}})


def _get_content_service():
    from quota_gate.deps import get_content_service
    return get_content_service()


def _get_db():
    from quota_gate.deps import get_db
    return get_db()


@router.get("/user/profile", response_model=ProfileResponse)
async def get_profile(user: UserModel = Depends(require_user)):
    return ProfileResponse(data=UserProfile(
        id=user.id,
        email=user.email,
        name=user.name or "",
        membership_type=user.membership_type,
        membership_name=membership_name(user.membership_type),
    ))


@router.get("/user/usage", response_model=UsageResponse)
async def get_usage(user: UserModel = Depends(require_user)):
    svc = _get_content_service()
    db = _get_db()
    async with db.get_session() as session:
        stats = await svc.usage_stats(session, user)
        return UsageResponse(data=stats)
