"""Exception hierarchy for compose-monitor.

Every failure that ends a run derives from ComposeMonitorError so the CLI can
report it with a single handler. None of these are retried automatically,
except EngineQueryError when the caller opts into per-tick retries.
"""

from typing import Any


class ComposeMonitorError(Exception):
    """Base exception for all compose-monitor errors.

    Attributes:
        message: Human-readable error description
        details: Additional debugging information
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ManifestReadError(ComposeMonitorError):
    """The manifest file could not be opened or read."""


class ManifestFormatError(ComposeMonitorError):
    """The manifest content is not a valid compose document."""


class InvocationError(ComposeMonitorError):
    """The orchestration binary could not be spawned."""


class DeploymentError(ComposeMonitorError):
    """The orchestration binary exited non-zero and the run treats that as fatal."""

    def __init__(self, message: str, returncode: int):
        super().__init__(message, {"returncode": returncode})
        self.returncode = returncode


class EngineQueryError(ComposeMonitorError):
    """The container engine could not be reached or answered with garbage."""


class SerializationError(ComposeMonitorError):
    """A report could not be rendered or parsed."""
