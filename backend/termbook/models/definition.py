"""
Termbook Backend: Definition SQLAlchemy Model
===============================================

What:  ORM model representing the `definitions` table, the only mutable
       entity in the system.
Who:   Queried and written exclusively through DefinitionRepository.

Table Design:
    - user_id: owner, set at creation
    - status_definition_id: moderation state, see DefinitionStatus
    - deleted_at: stamped by soft delete; rows are never physically removed
    - updated_at: bumped on every write, drives the dashboard ordering

    Index on (user_id, status_definition_id):
        Serves the dashboard's per-status counts and the user's own listing.
    Index on (status_definition_id, category_id):
        Serves the public category listing of approved definitions.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from termbook.database import Base
from termbook.models.category import Category
from termbook.models.status_definition import DefinitionStatus, StatusDefinition
from termbook.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Definition(Base):
    """
    A user-submitted term and its explanation.

    Lifecycle:
        1. Created with status PENDING by an authenticated user
        2. Moderated to APPROVED or REJECTED outside this service
        3. Every edit resets status to PENDING (re-moderation)
        4. Deletion sets status DELETED and stamps deleted_at
    """

    __tablename__ = "definitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    term: Mapped[str] = mapped_column(String(255), nullable=False)

    definition: Mapped[str] = mapped_column(Text, nullable=False)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
    )

    status_definition_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("status_definitions.id"),
        nullable=False,
        default=int(DefinitionStatus.PENDING),
        server_default=text(str(int(DefinitionStatus.PENDING))),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    # ── Relationships ─────────────────────────────────────────────────────
    # Shared reference data; no back-references on the other side.
    user: Mapped[User] = relationship(User, lazy="raise")
    category: Mapped[Category] = relationship(Category, lazy="raise")
    status_definition: Mapped[StatusDefinition] = relationship(StatusDefinition, lazy="raise")

    __table_args__ = (
        Index("idx_definitions_user_status", "user_id", "status_definition_id"),
        Index("idx_definitions_status_category", "status_definition_id", "category_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Definition(id={self.id}, term='{self.term}', "
            f"status={self.status_definition_id})>"
        )
