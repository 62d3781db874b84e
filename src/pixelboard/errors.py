"""Application error taxonomy.

Each error carries the HTTP status it maps to so the API layer can render
it without knowing which service raised it.
"""


class PixelBoardError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(
        self, message: str, details: dict[str, object] | None = None
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(PixelBoardError):
    """Raised when client input is missing or malformed."""

    status_code = 400


class UnauthorizedError(PixelBoardError):
    """Raised when a request carries no valid bearer token."""

    status_code = 401


class ForbiddenError(PixelBoardError):
    """Raised when the requester does not own the target resource."""

    status_code = 403


class NotFoundError(PixelBoardError):
    """Raised when a referenced photo or album does not exist."""

    status_code = 404


class DerivationError(PixelBoardError):
    """Raised when a thumbnail cannot be derived from an original."""

    status_code = 422


class StorageError(PixelBoardError):
    """Raised when the blob store rejects a read or write."""

    status_code = 500


class DependencyError(PixelBoardError):
    """Raised when the metadata store cannot complete a request."""

    status_code = 503
