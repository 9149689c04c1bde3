"""
Termbook Backend: Definition Service
======================================

What:  Business rules for the public definitions API: search/list, fetch,
       create, update and soft delete.
How:   Validates search input, applies the moderation and edit-policy rules,
       delegates every query to DefinitionRepository and maps the returned
       records onto response schemas.
Who:   Called by the /definitions route handlers.

Moderation Rules Enforced Here:
    - Only APPROVED definitions are searchable
    - DELETED definitions are invisible to `get`
    - New and edited definitions always land in PENDING
    - Edits and deletes follow `settings.definition_edit_policy`

Error Handling Strategy:
    Application exceptions (ValidationError, NotFoundError,
    PermissionDeniedError) propagate untouched. Anything else is logged with
    its detail and re-raised as DatabaseError, which the global handler turns
    into the generic 500 envelope.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from termbook.config import settings
from termbook.exceptions import (
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    TermbookError,
    ValidationError,
)
from termbook.models import User
from termbook.repositories.definition_repository import (
    DefinitionRepository,
    definition_repository,
)
from termbook.schemas.definition import (
    CategoryOut,
    DefinitionDetail,
    DefinitionListItem,
    DefinitionPayload,
)
from termbook.utils import normalize_search_term, to_unix_timestamp

logger = logging.getLogger(__name__)

OWNER_POLICY = "owner"


class DefinitionService:
    """
    Stateless service; the session and the caller are passed into each call.

    Args:
        repository:  query layer (swappable in tests)
        edit_policy: overrides `settings.definition_edit_policy` when given
    """

    def __init__(
        self,
        repository: DefinitionRepository = definition_repository,
        edit_policy: Optional[str] = None,
    ):
        self.repository = repository
        self._edit_policy = edit_policy

    @property
    def edit_policy(self) -> str:
        return self._edit_policy or settings.definition_edit_policy

    async def list_definitions(
        self,
        db: AsyncSession,
        term: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> List[DefinitionListItem]:
        """
        Search approved definitions by term, or list a category.

        `term` wins when both are given. The term is percent-decoded and
        trimmed first; a blank term counts as absent.

        Raises:
            ValidationError: neither a term nor a category was supplied (→ 422)
            NotFoundError:   nothing approved matched (→ 404)
            DatabaseError:   query failed (→ 500)
        """
        search_term = normalize_search_term(term)
        if search_term is None and category_id is None:
            raise ValidationError(message="Term or categoryId is required")

        try:
            if search_term is not None:
                records = await self.repository.find_approved_by_term(db, search_term)
            else:
                records = await self.repository.find_approved_by_category(db, category_id)
        except Exception as e:
            logger.error("Database error listing definitions: %s", str(e), exc_info=True)
            raise DatabaseError(
                context={
                    "term": search_term,
                    "category_id": category_id,
                    "error_type": type(e).__name__,
                },
            )

        if not records:
            raise NotFoundError(message="Term not found", resource="term")

        return [
            DefinitionListItem(
                id=record.id,
                term=record.term,
                definition=record.definition,
                category=record.category,
                username=record.username,
                created_at=to_unix_timestamp(record.created_at),
            )
            for record in records
        ]

    async def get_definition(
        self, db: AsyncSession, definition_id: int
    ) -> DefinitionDetail:
        """
        Fetch one definition that has not been deleted.

        Raises:
            NotFoundError: unknown id or DELETED (→ 404)
            DatabaseError: query failed (→ 500)
        """
        try:
            record = await self.repository.find_visible_by_id(db, definition_id)
        except Exception as e:
            logger.error("Database error fetching definition %s: %s", definition_id, str(e))
            raise DatabaseError(
                context={"definition_id": definition_id, "error_type": type(e).__name__},
            )

        if record is None:
            raise NotFoundError(resource_id=definition_id)

        return DefinitionDetail(
            id=record.id,
            term=record.term,
            definition=record.definition,
            category=CategoryOut(id=record.category_id, category=record.category),
            username=record.username,
            created_at=to_unix_timestamp(record.created_at),
        )

    async def create_definition(
        self, db: AsyncSession, user: User, payload: DefinitionPayload
    ) -> int:
        """
        Store a new definition owned by `user`, always as PENDING.

        Returns:
            The new definition's id

        Raises:
            ValidationError: `categoryId` does not exist (→ 422)
            DatabaseError:   insert failed (→ 500)
        """
        try:
            await self._require_category(db, payload.category_id)
            definition_id = await self.repository.create(
                db,
                user_id=user.id,
                term=payload.term,
                definition=payload.definition,
                category_id=payload.category_id,
            )
        except TermbookError:
            raise
        except Exception as e:
            logger.error("Database error creating definition: %s", str(e), exc_info=True)
            raise DatabaseError(
                context={"user_id": user.id, "error_type": type(e).__name__},
            )

        logger.info("Definition %s created by user %s (pending)", definition_id, user.id)
        return definition_id

    async def update_definition(
        self,
        db: AsyncSession,
        user: User,
        definition_id: int,
        payload: DefinitionPayload,
    ) -> None:
        """
        Overwrite a definition and send it back to moderation.

        Workflow (one transaction):
            1. Lock the row, skipping DELETED definitions
            2. Apply the edit policy
            3. Check the category exists
            4. Overwrite term, definition, category and owner; status → PENDING

        Raises:
            NotFoundError:         unknown or deleted id (→ 404)
            PermissionDeniedError: not the owner under the `owner` policy (→ 403)
            ValidationError:       `categoryId` does not exist (→ 422)
            DatabaseError:         query failed (→ 500)
        """
        try:
            record = await self.repository.find_for_update(db, definition_id)
            if record is None:
                raise NotFoundError(resource_id=definition_id)

            if self.edit_policy == OWNER_POLICY and record.user_id != user.id:
                raise PermissionDeniedError(
                    context={"definition_id": definition_id, "user_id": user.id},
                )

            await self._require_category(db, payload.category_id)
            await self.repository.update(
                db,
                definition_id,
                user_id=user.id,
                term=payload.term,
                definition=payload.definition,
                category_id=payload.category_id,
            )
        except TermbookError:
            raise
        except Exception as e:
            logger.error(
                "Database error updating definition %s: %s", definition_id, str(e), exc_info=True
            )
            raise DatabaseError(
                context={"definition_id": definition_id, "error_type": type(e).__name__},
            )

        logger.info("Definition %s updated by user %s (pending)", definition_id, user.id)

    async def delete_definition(
        self,
        db: AsyncSession,
        definition_id: int,
        user: Optional[User] = None,
    ) -> None:
        """
        Soft-delete a definition.

        With a `user` and the `owner` policy, only that user's definition is
        matched. Deleting an already deleted definition succeeds again.

        Raises:
            NotFoundError:         unknown id (→ 404)
            PermissionDeniedError: someone else's definition under `owner` (→ 403)
            DatabaseError:         query failed (→ 500)
        """
        owner_id = user.id if user is not None and self.edit_policy == OWNER_POLICY else None

        try:
            matched = await self.repository.soft_delete(db, definition_id, owner_id=owner_id)
            if not matched:
                if owner_id is not None and (
                    await self.repository.get_owner_id(db, definition_id) is not None
                ):
                    raise PermissionDeniedError(
                        context={"definition_id": definition_id, "user_id": owner_id},
                    )
                raise NotFoundError(resource_id=definition_id)
        except TermbookError:
            raise
        except Exception as e:
            logger.error(
                "Database error deleting definition %s: %s", definition_id, str(e), exc_info=True
            )
            raise DatabaseError(
                context={"definition_id": definition_id, "error_type": type(e).__name__},
            )

        logger.info(
            "Definition %s deleted by %s",
            definition_id,
            f"user {user.id}" if user is not None else "anonymous caller",
        )

    async def _require_category(self, db: AsyncSession, category_id: int) -> None:
        if await self.repository.get_category(db, category_id) is None:
            raise ValidationError(
                field="categoryId",
                errors=[{
                    "field": "categoryId",
                    "rule": "exists",
                    "message": "exists validation failure",
                }],
            )


# ── Singleton Instance ────────────────────────────────────────────────────
definition_service = DefinitionService()
