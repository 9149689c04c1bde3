"""
Termbook Backend: Definition Repository Tests
===============================================

What:  Runs every repository query against an in-memory SQLite database.
How:   Rows are inserted through the `add_definition` fixture; assertions
       read back through the repository itself.

What we test:
    ✅ Search only returns APPROVED rows, ordered by id
    ✅ LIKE wildcards in the term match literally
    ✅ DELETED rows are invisible to get/update lookups
    ✅ Dashboard listing order and per-status counts
    ✅ create → PENDING, update → PENDING, soft_delete is idempotent
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import select

from termbook.models import Definition, DefinitionStatus
from termbook.repositories.definition_repository import DefinitionRepository


class TestFindApproved:

    def setup_method(self):
        self.repo = DefinitionRepository()

    @pytest.mark.asyncio
    async def test_term_search_skips_unapproved(self, db_session, add_definition):
        approved = await add_definition(term="yeet", status=DefinitionStatus.APPROVED)
        await add_definition(term="yeet", status=DefinitionStatus.PENDING)
        await add_definition(term="yeeted", status=DefinitionStatus.REJECTED)
        await add_definition(term="yeet", status=DefinitionStatus.DELETED)

        records = await self.repo.find_approved_by_term(db_session, "yee")

        assert [r.id for r in records] == [approved]
        assert records[0].username == "alice"
        assert records[0].category == "Slang"
        assert records[0].status_definition == "Approved"

    @pytest.mark.asyncio
    async def test_term_search_is_substring_and_ordered_by_id(self, db_session, add_definition):
        first = await add_definition(term="rizz")
        second = await add_definition(term="unspoken rizz", minutes=5)
        await add_definition(term="slay")

        records = await self.repo.find_approved_by_term(db_session, "rizz")

        assert [r.id for r in records] == [first, second]

    @pytest.mark.asyncio
    async def test_wildcards_match_literally(self, db_session, add_definition):
        literal = await add_definition(term="50% off")
        await add_definition(term="500 off")
        await add_definition(term="snake_case")

        by_percent = await self.repo.find_approved_by_term(db_session, "50%")
        by_underscore = await self.repo.find_approved_by_term(db_session, "e_c")

        assert [r.id for r in by_percent] == [literal]
        assert [r.term for r in by_underscore] == ["snake_case"]

    @pytest.mark.asyncio
    async def test_category_listing(self, db_session, add_definition):
        tech = await add_definition(term="kubernetes", category_id=2)
        await add_definition(term="kubectl", category_id=2, status=DefinitionStatus.PENDING)
        await add_definition(term="yeet", category_id=1)

        records = await self.repo.find_approved_by_category(db_session, 2)

        assert [r.id for r in records] == [tech]
        assert records[0].category == "Technology"


class TestFindById:

    def setup_method(self):
        self.repo = DefinitionRepository()

    @pytest.mark.asyncio
    async def test_pending_and_rejected_are_visible(self, db_session, add_definition):
        pending = await add_definition(status=DefinitionStatus.PENDING)
        rejected = await add_definition(status=DefinitionStatus.REJECTED)

        assert (await self.repo.find_visible_by_id(db_session, pending)).id == pending
        assert (await self.repo.find_visible_by_id(db_session, rejected)).id == rejected

    @pytest.mark.asyncio
    async def test_deleted_and_unknown_are_hidden(self, db_session, add_definition):
        deleted = await add_definition(status=DefinitionStatus.DELETED)

        assert await self.repo.find_visible_by_id(db_session, deleted) is None
        assert await self.repo.find_visible_by_id(db_session, 9999) is None
        assert await self.repo.find_for_update(db_session, deleted) is None

    @pytest.mark.asyncio
    async def test_get_owner_id_includes_deleted(self, db_session, add_definition):
        deleted = await add_definition(user_id=2, status=DefinitionStatus.DELETED)

        assert await self.repo.get_owner_id(db_session, deleted) == 2
        assert await self.repo.get_owner_id(db_session, 9999) is None

    @pytest.mark.asyncio
    async def test_get_category(self, db_session):
        category = await self.repo.get_category(db_session, 3)

        assert category.id == 3
        assert category.category == "Science"
        assert await self.repo.get_category(db_session, 42) is None


class TestDashboardQueries:

    def setup_method(self):
        self.repo = DefinitionRepository()

    @pytest.mark.asyncio
    async def test_find_by_user_newest_edit_first(self, db_session, add_definition):
        older = await add_definition(user_id=2, minutes=0)
        newer = await add_definition(user_id=2, minutes=30, status=DefinitionStatus.PENDING)
        await add_definition(user_id=2, minutes=60, status=DefinitionStatus.DELETED)
        await add_definition(user_id=1, minutes=90)

        records = await self.repo.find_by_user(db_session, 2)

        assert [r.id for r in records] == [newer, older]

    @pytest.mark.asyncio
    async def test_count_by_status(self, db_session, add_definition):
        await add_definition(user_id=2, status=DefinitionStatus.APPROVED)
        await add_definition(user_id=2, status=DefinitionStatus.APPROVED)
        await add_definition(user_id=2, status=DefinitionStatus.PENDING)
        await add_definition(user_id=1, status=DefinitionStatus.APPROVED)

        assert await self.repo.count_by_status(db_session, 2, DefinitionStatus.APPROVED) == 2
        assert await self.repo.count_by_status(db_session, 2, DefinitionStatus.PENDING) == 1
        assert await self.repo.count_by_status(db_session, 2, DefinitionStatus.REJECTED) == 0


class TestWrites:

    def setup_method(self):
        self.repo = DefinitionRepository()

    @pytest.mark.asyncio
    async def test_create_is_pending(self, db_session):
        new_id = await self.repo.create(
            db_session, user_id=5, term="foo", definition="bar", category_id=1
        )
        await db_session.commit()

        record = await self.repo.find_visible_by_id(db_session, new_id)
        assert record.user_id == 5
        assert record.username == "eve"
        assert record.status_definition_id == DefinitionStatus.PENDING

    @pytest.mark.asyncio
    async def test_update_resets_to_pending(self, db_session, add_definition):
        definition_id = await add_definition(status=DefinitionStatus.APPROVED)

        changed = await self.repo.update(
            db_session, definition_id,
            user_id=1, term="yote", definition="Past tense", category_id=2,
        )
        await db_session.commit()

        assert changed == 1
        record = await self.repo.find_visible_by_id(db_session, definition_id)
        assert record.term == "yote"
        assert record.category_id == 2
        assert record.status_definition_id == DefinitionStatus.PENDING
        assert record.updated_at > record.created_at

    @pytest.mark.asyncio
    async def test_update_skips_deleted(self, db_session, add_definition):
        definition_id = await add_definition(status=DefinitionStatus.DELETED)

        changed = await self.repo.update(
            db_session, definition_id,
            user_id=1, term="x", definition="y", category_id=1,
        )

        assert changed == 0

    @pytest.mark.asyncio
    async def test_soft_delete_keeps_first_deleted_at(self, db_session, add_definition):
        first_deleted = datetime(2024, 2, 1, tzinfo=timezone.utc)
        definition_id = await add_definition(
            status=DefinitionStatus.DELETED, deleted_at=first_deleted
        )

        matched = await self.repo.soft_delete(db_session, definition_id)
        await db_session.commit()

        assert matched == 1
        deleted_at = (
            await db_session.execute(
                select(Definition.deleted_at).where(Definition.id == definition_id)
            )
        ).scalar_one()
        assert deleted_at.replace(tzinfo=timezone.utc) == first_deleted

    @pytest.mark.asyncio
    async def test_soft_delete_with_owner_filter(self, db_session, add_definition):
        definition_id = await add_definition(user_id=1)

        assert await self.repo.soft_delete(db_session, definition_id, owner_id=2) == 0
        assert await self.repo.soft_delete(db_session, definition_id, owner_id=1) == 1
        await db_session.commit()

        assert await self.repo.find_visible_by_id(db_session, definition_id) is None
