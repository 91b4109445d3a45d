class ReadError(Exception):
    """Raised when content cannot be extracted from an uploaded file."""
