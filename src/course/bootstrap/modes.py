"""Run modes and process exit statuses of the bootstrap."""

from enum import Enum, IntEnum


class Mode(Enum):
    """What the process does once setup succeeds."""

    SERVE = "serve"
    SEED = "seed"


class ExitStatus(IntEnum):
    """Process exit codes.

    A shutdown requested by SIGINT/SIGTERM is a clean exit (`OK`).
    """

    OK = 0
    RUNTIME_ERROR = 1
    CONFIG_ERROR = 3
    MIGRATION_ERROR = 4
