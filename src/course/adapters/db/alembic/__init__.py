"""Packaged Alembic migrations (``env.py`` and ``versions/``) for COURSE."""
