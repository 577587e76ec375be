"""Adapters (outbound) for COURSE.

Concrete implementations of the interfaces in `course.interfaces`: the
SQLAlchemy engine and schema, the Alembic migration gate, the Redis cache
and the catalog stores.
"""
