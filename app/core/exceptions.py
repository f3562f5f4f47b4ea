"""Error taxonomy shared by the query engine and the bookmark guard."""


class DirectoryError(Exception):
    """Base exception for all property-directory errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(DirectoryError):
    """Raised when client input is malformed (page, pageSize, required fields)."""


class NotFoundError(DirectoryError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DirectoryError):
    """Raised when a write would violate a uniqueness constraint."""


class StorageError(DirectoryError):
    """Raised when the underlying record store fails."""


class InvalidIdentifierError(StorageError):
    """Raised when an identifier is not in the store's id format."""
