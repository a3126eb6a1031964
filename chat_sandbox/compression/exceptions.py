class CompressionError(Exception):
    """Raised when the compression provider cannot be reached or does not return a successful response."""

    pass
