"""Command-line interface for COURSE (``course server start|seed``)."""
