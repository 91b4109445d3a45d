class AnalysisError(Exception):
    """Raised when a document analysis attempt fails."""


class AnalysisTimeoutError(AnalysisError):
    """Raised when the backend call exceeds its time budget."""


class BackendError(AnalysisError):
    """Raised when the analysis backend returns a non-success response."""


class ParseError(AnalysisError):
    """Raised when the backend response is not valid structured output."""


class AnalysisSkippedError(AnalysisError):
    """Raised instead of calling a backend for content that failed to read."""
