"""COURSE test suite.

Folder taxonomy
- unit/         : Single modules in isolation; fakes for Redis, stores and collaborators.
- integration/  : Real SQLite (and PostgreSQL when Docker is up), migrations, the HTTP API.
- functional/   : The ``course`` CLI driven end to end, asserting exit codes.
- fixtures/     : Fixture plugins loaded from the root conftest (no tests here).

Markers follow the folder (unit, integration, functional); ``slow`` marks tests
that start a real server or a container.
"""
