"""Database adapters: engine factory, schema, dialect helpers and migrations."""
