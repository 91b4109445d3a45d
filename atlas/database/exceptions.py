class StorageError(Exception):
    """Raised when a document store operation fails or times out."""
