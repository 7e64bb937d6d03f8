"""SQLAlchemy database models for the readiness checker."""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from analyzers.base import FLAG_NAMES, ReadinessDetails, ReadinessResult

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class UserRole(str, enum.Enum):
    """Role of an account."""

    USER = "user"
    ADMIN = "admin"


class User(Base):
    """An account signed in through the external identity provider."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Subject id issued by Google OAuth
    google_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole),
        default=UserRole.USER,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    last_signed_in: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )


class Analysis(Base):
    """
    A stored readiness analysis.

    Flags are stored as columns for querying; the detail bag is stored as
    JSON exactly as the analyzer produced it.
    """

    __tablename__ = "analyses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Null for anonymous analyses until claimed
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)

    has_json_api: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_text_api: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_markdown_api: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_rss_feed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_atom_feed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_json_feed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_llms_txt: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_json_ld: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_semantic_html: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_server_side_rendering: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    has_meta_tags: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_sitemap: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_mcp_server: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    details: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
        index=True,
    )

    def to_result(self) -> ReadinessResult:
        """Rebuild the analyzer result this row was created from."""
        return ReadinessResult(
            score=self.score,
            details=ReadinessDetails.from_dict(self.details),
            **{name: getattr(self, name) for name in FLAG_NAMES},
        )


class Lead(Base):
    """An email address left on a result page."""

    __tablename__ = "leads"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    analysis_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("analyses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Copied from the analysis at submission time
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
