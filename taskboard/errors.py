"""
Exceptions raised by the taskboard core.

Library layers (client, cache, form) raise; the board coordinator and the
CLI are the boundaries that catch and report.
"""
from typing import Optional


class TaskboardError(Exception):
    """Base class for all taskboard errors."""
    pass


class ConfigError(TaskboardError):
    """Raised when configuration is invalid or incomplete."""
    pass


class ValidationRejected(TaskboardError):
    """Raised when a task form is submitted without a usable title."""
    pass


class RequestFailed(TaskboardError):
    """
    A call to the task API failed.

    Raised for non-success HTTP statuses, transport errors and bodies that
    cannot be decoded. ``operation`` names the client method that failed.
    """

    def __init__(self, operation: str, status: Optional[int] = None, reason: str = ""):
        self.operation = operation
        self.status = status
        self.reason = reason
        msg = f"{operation} failed"
        if status is not None:
            msg += f" (HTTP {status})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
