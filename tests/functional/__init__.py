"""Functional tests of the ``course`` command line."""
