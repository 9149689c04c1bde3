"""
Termbook Backend: Moderation Status Lookup
============================================

What:  The `status_definitions` lookup table and the `DefinitionStatus`
       enumeration that every query and service uses instead of raw ids.

Lifecycle of a definition:

    create ──▶ PENDING ──(moderator)──▶ APPROVED | REJECTED
                  ▲                            │
                  └──────── update ────────────┘
    delete (any state) ──▶ DELETED

Older clients call PENDING "review"; both names refer to id 1 and the
dashboard still reports the count under `total_review`.
"""

from enum import IntEnum

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from termbook.database import Base


class DefinitionStatus(IntEnum):
    """Primary keys of the seeded `status_definitions` rows."""

    PENDING = 1
    APPROVED = 2
    REJECTED = 3
    DELETED = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


class StatusDefinition(Base):
    """One row per `DefinitionStatus` member, seeded by migration 001."""

    __tablename__ = "status_definitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    status_definition: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Display label: Pending, Approved, Rejected, Deleted",
    )

    def __repr__(self) -> str:
        return f"<StatusDefinition(id={self.id}, label='{self.status_definition}')>"
