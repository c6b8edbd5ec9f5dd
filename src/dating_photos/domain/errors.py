"""Errors raised by the photo subsystem."""


class PhotoError(Exception):
    """Base class for photo failures reported back to the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PhotoUnauthorizedError(PhotoError):
    """Caller is not the user, or the photo does not belong to the user."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class PhotoValidationError(PhotoError):
    """A photo rule rejected the request."""


class PhotoPersistenceError(PhotoError):
    """Changes could not be saved."""


class PhotoNotFoundError(PhotoError):
    """Requested photo or user does not exist."""


class MediaStoreError(PhotoError):
    """The remote media store failed to handle a request."""


class RepositoryError(RuntimeError):
    """Raised by repository adapters when a write does not go through."""
