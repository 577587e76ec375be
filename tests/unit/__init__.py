"""Unit tests.

No network; databases only as temp SQLite files. OS signals are raised in
process with `signal.raise_signal`.
"""
