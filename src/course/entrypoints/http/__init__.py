"""HTTP API: FastAPI application and the uvicorn-backed server unit."""

from .app import create_app
from .server import ApiServer, ServerError

__all__ = ["ApiServer", "ServerError", "create_app"]
