"""SQLAlchemy model for per-user content usage."""

from sqlalchemy import ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from quota_gate.common.models import Base, TimestampMixin


class UsageRecordModel(Base, TimestampMixin):
    """One row per user. Writes are compare-and-swap on ``version``."""

    __tablename__ = "usage_records"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), primary_key=True
    )
    articles_accessed: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    videos_accessed: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
