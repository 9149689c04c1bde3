"""
Termbook Backend: Dashboard Service Tests
===========================================

What we test:
    ✅ Totals count APPROVED, PENDING (as review) and REJECTED separately
    ✅ DELETED definitions are neither listed nor counted
    ✅ Listing is ordered by last edit, newest first
    ✅ Query failures → DatabaseError
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from termbook.exceptions import DatabaseError
from termbook.models import DefinitionStatus
from termbook.repositories.definition_repository import DefinitionRepository
from termbook.services.dashboard_service import DashboardService


def make_user(user_id=2, username="bob", email="bob@example.com"):
    user = MagicMock()
    user.id = user_id
    user.username = username
    user.email = email
    return user


class TestDashboardSummary:

    def setup_method(self):
        self.service = DashboardService(repository=DefinitionRepository())

    @pytest.mark.asyncio
    async def test_totals_and_listing(self, db_session, add_definition):
        approved = await add_definition(user_id=2, status=DefinitionStatus.APPROVED, minutes=1)
        pending = await add_definition(user_id=2, status=DefinitionStatus.PENDING, minutes=3)
        rejected = await add_definition(user_id=2, status=DefinitionStatus.REJECTED, minutes=2)
        await add_definition(user_id=2, status=DefinitionStatus.DELETED, minutes=4)
        await add_definition(user_id=1, status=DefinitionStatus.APPROVED)

        summary = await self.service.get_summary(db_session, make_user())

        assert summary.user_id == 2
        assert summary.username == "bob"
        assert summary.email == "bob@example.com"
        assert summary.total_approved == 1
        assert summary.total_review == 1
        assert summary.total_reject == 1
        assert [d.id for d in summary.definitions] == [pending, rejected, approved]
        assert summary.definitions[0].status_definition == "Pending"
        assert summary.definitions[0].created_at == 1705320000 + 180

    @pytest.mark.asyncio
    async def test_empty_dashboard(self, db_session):
        summary = await self.service.get_summary(db_session, make_user(5, "eve", "eve@example.com"))

        assert summary.definitions == []
        assert (summary.total_approved, summary.total_review, summary.total_reject) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_count_failure_becomes_database_error(self, mock_db_session):
        repo = MagicMock()
        repo.find_by_user = AsyncMock(return_value=[])
        repo.count_by_status = AsyncMock(side_effect=RuntimeError("timeout"))
        service = DashboardService(repository=repo)

        with pytest.raises(DatabaseError):
            await service.get_summary(mock_db_session, make_user())
