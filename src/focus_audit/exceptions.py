"""Exception taxonomy for focus audits.

Only host-level failures are exceptional. Classifiers never raise; they
return results which the auditor turns into verdicts.
"""

from typing import Optional


class FocusAuditError(Exception):
    """Base class for all focus audit errors."""


class StaleNodeError(FocusAuditError):
    """An element handle became invalid mid-walk (removed from the page).

    The observation is skipped and the walk continues.
    """


class HostCommunicationError(FocusAuditError):
    """The focus host could not respond (closed session, timeout, crash).

    Aborts the current check only. The auditor records an Error verdict
    and moves on to the next check.
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        if operation:
            message = f"{operation}: {message}"
        super().__init__(message)


class SettleTimeoutError(HostCommunicationError):
    """The host did not settle within the configured bound after a shift."""
