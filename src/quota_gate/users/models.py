"""SQLAlchemy model for users (owned by the auth collaborator)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from quota_gate.common.models import Base, TimestampMixin, generate_uuid


class UserModel(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    membership_type: Mapped[str] = mapped_column(String(1), default="A", nullable=False)
