"""SQLAlchemy Core tables for the course catalog.

The migrations in `course/adapters/db/alembic/versions` are the source of
truth for the live schema; these definitions mirror them for queries and
autogenerate.
"""

import sqlalchemy as sa

from .metadata import metadata

categories = sa.Table(
    "categories",
    metadata,
    sa.Column("code", sa.String(32), primary_key=True, comment="Canonical uppercase code."),
    sa.Column("name", sa.String(120), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
)

courses = sa.Table(
    "courses",
    metadata,
    sa.Column("code", sa.String(32), primary_key=True, comment="Canonical uppercase code."),
    sa.Column(
        "category_code",
        sa.String(32),
        sa.ForeignKey("categories.code"),
        nullable=False,
        index=True,
    ),
    sa.Column("title", sa.String(200), nullable=False),
    sa.Column("summary", sa.Text(), nullable=True),
    sa.Column("level", sa.String(16), nullable=False),
    sa.Column("price_cents", sa.Integer(), nullable=False),
    sa.Column("currency", sa.String(3), nullable=False),
    sa.Column("capacity", sa.Integer(), nullable=True),
    sa.CheckConstraint("price_cents >= 0", name="price_non_negative"),
)
