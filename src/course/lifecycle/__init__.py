"""Process lifecycle primitives.

Cancellation is a single process-wide token; the signal bridge is its only
producer. Everything started by the bootstrap observes the same token.
"""

from .cancellation import CancellationToken
from .signals import DEFAULT_SIGNALS, SignalBridge

__all__ = ["CancellationToken", "SignalBridge", "DEFAULT_SIGNALS"]
