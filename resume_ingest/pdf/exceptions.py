class PdfExtractionError(Exception):
    """Raised when a PDF text layer cannot be read."""


class PdfEncryptedError(PdfExtractionError):
    """Raised when a PDF requires a password to open."""
