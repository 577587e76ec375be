"""One-shot runnable unit that seeds the reference catalog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from course.interfaces.runnable import RunnableUnit

if TYPE_CHECKING:
    from course.lifecycle import CancellationToken
    from course.service_layer import CatalogService, SeedReport

logger = logging.getLogger(__name__)


class Seeder(RunnableUnit):
    """Write the reference catalog once and exit.

    Stops between batches when cancelled; a partial run is safe to repeat.
    Seed mode opens no cache client, so a running API server keeps serving
    its cached catalog until the entries expire (``redis.ttl_seconds``).
    """

    name = "seeder"

    def __init__(self, service: CatalogService, batch_size: int = 5) -> None:
        self.service = service
        self.batch_size = batch_size
        self.report: SeedReport | None = None

    def run(self, cancellation: CancellationToken) -> None:
        if cancellation.is_cancelled:
            logger.warning("shutdown requested before seeding started; nothing written")
            return
        self.report = self.service.seed(cancellation, batch_size=self.batch_size)
        if self.report.completed:
            logger.info(
                "catalog seeded: %d categories, %d courses",
                self.report.categories_written,
                self.report.courses_written,
            )
