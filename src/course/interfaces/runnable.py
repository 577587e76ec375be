"""The capability the bootstrap orchestrator runs: "run until done or cancelled".

Two variants exist: the long-running API server and the one-shot catalog
seeder. The orchestrator depends only on this contract.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from course.lifecycle import CancellationToken

# pylint: disable=too-few-public-methods


class RunnableUnit(abc.ABC):
    """A unit of work the process runs exactly once."""

    #: Short noun used in log lines ("server", "seeder").
    name: str = "unit"

    @abc.abstractmethod
    def run(self, cancellation: CancellationToken) -> None:
        """Run until the work completes or `cancellation` is triggered.

        Returning normally means a clean exit, including a shutdown requested
        through `cancellation`. Raising means the unit failed.

        The orchestrator imposes no deadline after cancellation: bounding the
        time to return (e.g. draining in-flight requests) is the unit's job.
        An external supervisor should enforce a hard kill timeout on top.
        """
