"""Support namespace for cross-cutting, dependency-light helpers.

Small, stateless helpers with minimal dependencies (e.g., sanitizing URLs for
display). No business rules, no orchestration, no wiring. Nothing is
re-exported here; import helpers from their defining modules.
"""
