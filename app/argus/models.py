from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ROLES = ("user", "admin")
PLANS = ("free", "pro")


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="user")  # user | admin
    plan: Mapped[str] = mapped_column(String(16), nullable=False, default="free")  # free | pro
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class SessionRecord(Base):
    """
    Server-side session row. `expires` is an absolute Unix timestamp (seconds);
    rows past it are ignored on read but never swept.
    """

    __tablename__ = "sessions"
    __table_args__ = (Index("idx_sessions_expires", "expires"),)

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    expires: Mapped[int] = mapped_column(Integer, nullable=False)
    data: Mapped[str] = mapped_column(Text, nullable=False)


def user_to_dict(u: User) -> dict:
    return {
        "id": u.id,
        "email": u.email,
        "name": u.name,
        "role": u.role or "user",
        "plan": u.plan or "free",
    }


def isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


# Ensure module models are imported so Base.metadata includes their tables.
# (Kept at bottom to avoid circular imports.)
from app.argus.modules.documents.models import Document  # noqa: E402,F401
from app.argus.modules.ideas.models import Idea  # noqa: E402,F401
from app.argus.modules.site_content.models import Company, Testimonial  # noqa: E402,F401
from app.argus.modules.cms.models import BlogPost, Doc  # noqa: E402,F401
