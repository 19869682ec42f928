"""User lookups for the auth boundary, CLI and seeding."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quota_gate.membership.policy import DEFAULT_MEMBERSHIP_TIER, MembershipTier
from quota_gate.users.models import UserModel


class UserService:
    """Read access to users; creation is only used by tooling and tests."""

    async def get_user(self, session: AsyncSession, user_id: str) -> UserModel | None:
        result = await session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, session: AsyncSession, email: str) -> UserModel | None:
        result = await session.execute(
            select(UserModel).where(UserModel.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def create_user(
        self,
        session: AsyncSession,
        email: str,
        name: str = "",
        membership_type: MembershipTier | str = DEFAULT_MEMBERSHIP_TIER,
    ) -> UserModel:
        user = UserModel(
            email=email.lower(),
            name=name,
            membership_type=MembershipTier(membership_type).value,
        )
        session.add(user)
        await session.flush()
        return user
