"""COURSE

Backend service for the course marketplace catalog. The package loads
configuration, gates startup on schema migrations, serves the catalog over
HTTP and can seed the reference catalog data in a one-shot run.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
