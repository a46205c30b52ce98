"""
Error kinds raised by the mirror run.

Every failure aborts the run. The backend or OS exception that caused
it is kept unmodified on ``original`` (and chained as ``__cause__``).
"""


class SyncError(Exception):
    """Base class for all run-aborting failures."""

    kind = "sync"

    def __init__(self, message, original=None):
        super().__init__(message)
        self.original = original

    def __str__(self):
        message = super().__str__()
        if self.original is not None:
            return f"{message}: {self.original}"
        return message


class ConfigError(SyncError):
    """Configuration could not be turned into a runnable job."""

    kind = "config"


class ListingError(SyncError):
    """Remote inventory listing failed."""

    kind = "listing"


class WalkError(SyncError):
    """The local source tree could not be traversed."""

    kind = "walk"


class RemoteStateError(SyncError):
    """Fetching an existing object's headers or grants failed."""

    kind = "remote_state"


class WriteError(SyncError):
    """An upload, metadata copy, redirect or delete failed."""

    kind = "write"
