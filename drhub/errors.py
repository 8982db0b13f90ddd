class SourceUnavailableError(RuntimeError):
    """Raised inside a source adapter when it cannot produce rows."""


class SourceShapeError(SourceUnavailableError):
    """Raised when a source answered but the payload has an unexpected shape."""
