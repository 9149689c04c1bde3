"""
Termbook Backend: Definition Repository
=========================================

What:  Every query that touches the `definitions` table.
How:   Explicit methods over SQLAlchemy 2.0 `select`/`update` statements,
       joined to users, categories and status_definitions, returning plain
       `DefinitionRecord` dataclasses instead of ORM instances.
Who:   DefinitionService and DashboardService.

Query Inventory:
    find_approved_by_term      GET /definitions?term=
    find_approved_by_category  GET /definitions?categoryId=
    find_visible_by_id         GET /definitions/{id}
    find_for_update            PUT /definitions/{id} (row lock)
    find_by_user               GET /dashboard/definitions
    count_by_status            GET /dashboard/definitions (three times)
    create / update / soft_delete

The repository never commits. Writes are flushed into the request's
transaction and committed by `get_db_session`.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from termbook.models import Category, Definition, DefinitionStatus, StatusDefinition, User


@dataclass(frozen=True)
class DefinitionRecord:
    """A definition row with its lookup labels resolved."""

    id: int
    term: str
    definition: str
    user_id: int
    username: str
    category_id: int
    category: str
    status_definition_id: int
    status_definition: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class CategoryRecord:
    id: int
    category: str


class DefinitionRepository:
    """
    Stateless query layer for definitions.

    Every method takes the session as its first argument, like the services
    that call it, so a single instance can be shared across requests.
    """

    # ── Reads ─────────────────────────────────────────────────────────────

    @staticmethod
    def _select_records():
        return (
            select(
                Definition.id,
                Definition.term,
                Definition.definition,
                Definition.user_id,
                User.username,
                Definition.category_id,
                Category.category,
                Definition.status_definition_id,
                StatusDefinition.status_definition,
                Definition.created_at,
                Definition.updated_at,
                Definition.deleted_at,
            )
            .join(User, Definition.user_id == User.id)
            .join(Category, Definition.category_id == Category.id)
            .join(StatusDefinition, Definition.status_definition_id == StatusDefinition.id)
        )

    @staticmethod
    def _to_records(result) -> List[DefinitionRecord]:
        return [DefinitionRecord(**row._mapping) for row in result.all()]

    async def find_approved_by_term(
        self, db: AsyncSession, term: str
    ) -> List[DefinitionRecord]:
        """
        Approved definitions whose term contains `term`.

        `%`, `_` and the escape character in the input are escaped
        (`autoescape=True`), so they match literally.
        """
        query = (
            self._select_records()
            .where(Definition.status_definition_id == DefinitionStatus.APPROVED)
            .where(Definition.term.contains(term, autoescape=True))
            .order_by(Definition.id)
        )
        result = await db.execute(query)
        return self._to_records(result)

    async def find_approved_by_category(
        self, db: AsyncSession, category_id: int
    ) -> List[DefinitionRecord]:
        query = (
            self._select_records()
            .where(Definition.status_definition_id == DefinitionStatus.APPROVED)
            .where(Definition.category_id == category_id)
            .order_by(Definition.id)
        )
        result = await db.execute(query)
        return self._to_records(result)

    async def find_visible_by_id(
        self, db: AsyncSession, definition_id: int
    ) -> Optional[DefinitionRecord]:
        """A single definition in any state except DELETED."""
        query = (
            self._select_records()
            .where(Definition.id == definition_id)
            .where(Definition.status_definition_id != DefinitionStatus.DELETED)
        )
        result = await db.execute(query)
        records = self._to_records(result)
        return records[0] if records else None

    async def find_for_update(
        self, db: AsyncSession, definition_id: int
    ) -> Optional[DefinitionRecord]:
        """
        Like find_visible_by_id, but locks the definition row until the
        request's transaction ends (`SELECT ... FOR UPDATE OF definitions`).
        """
        query = (
            self._select_records()
            .where(Definition.id == definition_id)
            .where(Definition.status_definition_id != DefinitionStatus.DELETED)
            .with_for_update(of=Definition)
        )
        result = await db.execute(query)
        records = self._to_records(result)
        return records[0] if records else None

    async def find_by_user(
        self, db: AsyncSession, user_id: int
    ) -> List[DefinitionRecord]:
        """The user's own definitions, newest edit first, DELETED excluded."""
        query = (
            self._select_records()
            .where(Definition.user_id == user_id)
            .where(Definition.status_definition_id != DefinitionStatus.DELETED)
            .order_by(Definition.updated_at.desc(), Definition.id.desc())
        )
        result = await db.execute(query)
        return self._to_records(result)

    async def count_by_status(
        self, db: AsyncSession, user_id: int, status: DefinitionStatus
    ) -> int:
        query = (
            select(func.count())
            .select_from(Definition)
            .where(Definition.user_id == user_id)
            .where(Definition.status_definition_id == status)
        )
        result = await db.execute(query)
        return result.scalar() or 0

    async def get_owner_id(
        self, db: AsyncSession, definition_id: int
    ) -> Optional[int]:
        """Owner of a definition in any state, or None if the id is unknown."""
        result = await db.execute(
            select(Definition.user_id).where(Definition.id == definition_id)
        )
        return result.scalar_one_or_none()

    async def get_category(
        self, db: AsyncSession, category_id: int
    ) -> Optional[CategoryRecord]:
        result = await db.execute(
            select(Category.id, Category.category).where(Category.id == category_id)
        )
        row = result.first()
        return CategoryRecord(**row._mapping) if row is not None else None

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(
        self,
        db: AsyncSession,
        user_id: int,
        term: str,
        definition: str,
        category_id: int,
    ) -> int:
        """Insert a PENDING definition and return its id."""
        row = Definition(
            user_id=user_id,
            term=term,
            definition=definition,
            category_id=category_id,
            status_definition_id=int(DefinitionStatus.PENDING),
        )
        db.add(row)
        await db.flush()  # assigns the autoincrement id without committing
        return row.id

    async def update(
        self,
        db: AsyncSession,
        definition_id: int,
        user_id: int,
        term: str,
        definition: str,
        category_id: int,
    ) -> int:
        """
        Overwrite a non-deleted definition and send it back to PENDING.

        Returns the number of rows changed (0 or 1). `updated_at` is bumped by
        the column's onupdate hook.
        """
        result = await db.execute(
            update(Definition)
            .where(Definition.id == definition_id)
            .where(Definition.status_definition_id != DefinitionStatus.DELETED)
            .values(
                user_id=user_id,
                term=term,
                definition=definition,
                category_id=category_id,
                status_definition_id=DefinitionStatus.PENDING,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def soft_delete(
        self,
        db: AsyncSession,
        definition_id: int,
        owner_id: Optional[int] = None,
    ) -> int:
        """
        Mark a definition DELETED in a single conditional UPDATE.

        Already deleted rows match too and keep their first `deleted_at`,
        so repeating the call is harmless. With `owner_id`, only that user's
        definition is touched. Returns the number of rows matched.
        """
        query = (
            update(Definition)
            .where(Definition.id == definition_id)
            .values(
                status_definition_id=DefinitionStatus.DELETED,
                deleted_at=func.coalesce(
                    Definition.deleted_at, datetime.now(timezone.utc)
                ),
            )
            .execution_options(synchronize_session=False)
        )
        if owner_id is not None:
            query = query.where(Definition.user_id == owner_id)
        result = await db.execute(query)
        return result.rowcount


# ── Singleton Instance ────────────────────────────────────────────────────
definition_repository = DefinitionRepository()
