"""
Termbook Backend: Dashboard Service
=====================================

What:  The signed-in user's own submissions plus per-status totals.
How:   One listing query and three independent count queries, all scoped to
       the caller's id.
Who:   Called by GET /dashboard/definitions.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from termbook.exceptions import DatabaseError
from termbook.models import DefinitionStatus, User
from termbook.repositories.definition_repository import (
    DefinitionRepository,
    definition_repository,
)
from termbook.schemas.definition import DashboardDefinitionItem, DashboardSummary
from termbook.utils import to_unix_timestamp

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, repository: DefinitionRepository = definition_repository):
        self.repository = repository

    async def get_summary(self, db: AsyncSession, user: User) -> DashboardSummary:
        """
        Build the dashboard for `user`.

        Definitions exclude DELETED and are ordered by last edit, newest
        first. `total_review` is the PENDING count.

        Raises:
            DatabaseError: any query failed (→ 500)
        """
        try:
            records = await self.repository.find_by_user(db, user.id)
            total_approved = await self.repository.count_by_status(
                db, user.id, DefinitionStatus.APPROVED
            )
            total_review = await self.repository.count_by_status(
                db, user.id, DefinitionStatus.PENDING
            )
            total_reject = await self.repository.count_by_status(
                db, user.id, DefinitionStatus.REJECTED
            )
        except Exception as e:
            logger.error("Database error building dashboard for user %s: %s", user.id, str(e))
            raise DatabaseError(
                context={"user_id": user.id, "error_type": type(e).__name__},
            )

        return DashboardSummary(
            user_id=user.id,
            username=user.username,
            email=user.email,
            total_approved=total_approved or 0,
            total_review=total_review or 0,
            total_reject=total_reject or 0,
            definitions=[
                DashboardDefinitionItem(
                    id=record.id,
                    term=record.term,
                    definition=record.definition,
                    category=record.category,
                    status_definition=record.status_definition,
                    created_at=to_unix_timestamp(record.created_at),
                    updated_at=to_unix_timestamp(record.updated_at),
                )
                for record in records
            ],
        )


dashboard_service = DashboardService()
