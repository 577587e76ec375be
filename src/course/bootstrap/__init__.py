"""Bootstrap (composition root) for COURSE.

Assembles the process at runtime: loads configuration, scopes logging,
bridges OS signals to cancellation, gates serving on migrations, opens the
infrastructure clients and runs exactly one runnable unit.

Import rules:
- Entry points import *this* package to start the process.
- This package may import: `course.adapters`, `course.service_layer`,
  `course.entrypoints.http`, `course.entrypoints.seeder`, `course.interfaces`,
  `course.domain`, `course.lifecycle` and `course.config`.
- Inner layers must not import `course.bootstrap`.
"""

from .orchestrator import Collaborators, ExitStatus, FatalSetupError, Mode, run

__all__ = ["Collaborators", "ExitStatus", "FatalSetupError", "Mode", "run"]
