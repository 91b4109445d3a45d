class PdfExtractionError(Exception):
    """Raised when text cannot be pulled out of a PDF upload."""
