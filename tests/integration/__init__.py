"""Integration tests against real databases and the full bootstrap."""
