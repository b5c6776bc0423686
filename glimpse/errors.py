"""Application error taxonomy.

Backend access operations raise ``BackendError`` subclasses carrying a
descriptive message (``"Failed to <action>: <cause>"``). Screens catch
``GlimpseError`` at their boundary and present the message to the user.
"""


class GlimpseError(Exception):
    """Base exception for all Glimpse errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)


class BackendError(GlimpseError):
    """A backend operation failed."""
    pass


class NotFoundError(BackendError):
    """Referenced document does not exist."""
    pass


class UnauthorizedError(BackendError):
    """Actor does not own the resource being mutated."""
    pass


class WriteError(BackendError):
    """Backend rejected a write."""
    pass


class UploadError(BackendError):
    """Object storage rejected an upload."""
    pass


class ValidationError(GlimpseError):
    """User input failed a screen-level check."""
    pass


def wrap(action: str, error: Exception, default: type = BackendError) -> BackendError:
    """Wrap ``error`` in a descriptive backend error for ``action``.

    Errors that already belong to the taxonomy keep their class so callers
    can still tell ``NotFoundError`` from ``UnauthorizedError``.
    """
    cause = error.message if isinstance(error, GlimpseError) else str(error)
    cls = type(error) if isinstance(error, BackendError) else default
    return cls(f"Failed to {action}: {cause}")
