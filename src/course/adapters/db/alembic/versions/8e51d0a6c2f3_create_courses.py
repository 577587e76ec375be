"""Create courses table

Revision ID: 8e51d0a6c2f3
Revises: 3f2a9c1d7b40
Create Date: 2026-09-14

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "8e51d0a6c2f3"
down_revision: str | Sequence[str] | None = "3f2a9c1d7b40"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "courses",
        sa.Column(
            "code",
            sa.String(length=32),
            nullable=False,
            comment="Canonical uppercase code.",
        ),
        sa.Column("category_code", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("level", sa.String(length=16), nullable=False),
        sa.Column("price_cents", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.CheckConstraint(
            "price_cents >= 0", name=op.f("ck_courses_price_non_negative")
        ),
        sa.ForeignKeyConstraint(
            ["category_code"],
            ["categories.code"],
            name=op.f("fk_courses_category_code_categories"),
        ),
        sa.PrimaryKeyConstraint("code", name=op.f("pk_courses")),
    )
    op.create_index(
        op.f("ix_courses_courses_category_code"),
        "courses",
        ["category_code"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_courses_courses_category_code"), table_name="courses")
    op.drop_table("courses")
