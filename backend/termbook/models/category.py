"""
Termbook Backend: Category SQLAlchemy Model
=============================================

What:  ORM model for the `categories` lookup table.
Who:   Joined into every definition query for its display label; used by
       the definition service to validate `categoryId` on create/update.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from termbook.database import Base


class Category(Base):
    """Read-only grouping for definitions (e.g. "Slang", "Technology")."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    category: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display label",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, category='{self.category}')>"
