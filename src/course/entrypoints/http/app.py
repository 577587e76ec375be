"""FastAPI application for the course catalog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI, HTTPException, Response, status
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from course import __version__
from course.adapters.db.engine import check_connection

from .schemas import CategoryOut, CourseOut, HealthOut

if TYPE_CHECKING:
    from course.bootstrap.clients import Clients
    from course.service_layer import CatalogService

logger = logging.getLogger(__name__)


def create_app(service: CatalogService, clients: Clients) -> FastAPI:
    """Build the API around an already wired catalog service.

    The app does not own `clients`; the bootstrap opens and closes them.
    """
    app = FastAPI(title="course", version=__version__)

    @app.get("/healthz", response_model=HealthOut)
    def healthz(response: Response) -> HealthOut:
        database = cache = "ok"
        try:
            check_connection(clients.db)
        except SQLAlchemyError as e:
            logger.warning("health check: database unavailable: %s", e)
            database = "unavailable"
        if clients.cache is None:
            cache = "disabled"
        else:
            try:
                clients.cache.ping()
            except RedisError as e:
                logger.warning("health check: cache unavailable: %s", e)
                cache = "unavailable"
        degraded = "unavailable" in (database, cache)
        if degraded:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthOut(
            status="degraded" if degraded else "ok", database=database, cache=cache
        )

    @app.get("/categories", response_model=list[CategoryOut])
    def list_categories() -> list[CategoryOut]:
        return [CategoryOut.from_domain(c) for c in service.list_categories()]

    @app.get("/courses", response_model=list[CourseOut])
    def list_courses(category: str | None = None) -> list[CourseOut]:
        return [CourseOut.from_domain(c) for c in service.list_courses(category)]

    @app.get("/courses/{code}", response_model=CourseOut)
    def get_course(code: str) -> CourseOut:
        course = service.get_course(code)
        if course is None:
            raise HTTPException(status_code=404, detail=f"course {code.upper()} not found")
        return CourseOut.from_domain(course)

    return app
