"""Create dictionary tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates users, categories, status_definitions and definitions, and
       seeds the four moderation statuses.

Rollback: downgrade() drops all four tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Must match termbook.models.status_definition.DefinitionStatus
STATUS_ROWS = [
    {"id": 1, "status_definition": "Pending"},
    {"id": 2, "status_definition": "Approved"},
    {"id": 3, "status_definition": "Rejected"},
    {"id": 4, "status_definition": "Deleted"},
]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category", sa.String(255), nullable=False, comment="Display label"),
        sa.PrimaryKeyConstraint("id"),
    )

    status_definitions = op.create_table(
        "status_definitions",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("status_definition", sa.String(50), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.bulk_insert(status_definitions, STATUS_ROWS)

    op.create_table(
        "definitions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("term", sa.String(255), nullable=False),
        sa.Column("definition", sa.Text(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column(
            "status_definition_id",
            sa.Integer(),
            server_default=sa.text("1"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"]),
        sa.ForeignKeyConstraint(["status_definition_id"], ["status_definitions.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_definitions_user_status",
        "definitions",
        ["user_id", "status_definition_id"],
    )
    op.create_index(
        "idx_definitions_status_category",
        "definitions",
        ["status_definition_id", "category_id"],
    )


def downgrade() -> None:
    op.drop_index("idx_definitions_status_category", table_name="definitions")
    op.drop_index("idx_definitions_user_status", table_name="definitions")
    op.drop_table("definitions")
    op.drop_table("status_definitions")
    op.drop_table("categories")
    op.drop_table("users")
