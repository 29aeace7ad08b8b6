class ExtractionError(Exception):
    """Base exception for text extraction errors."""


class UnsupportedMediaTypeError(ExtractionError):
    """Raised when a document type has no extraction strategies."""

    def __init__(self, media_type: str) -> None:
        super().__init__(
            f"Unsupported file type: {media_type or 'unknown'}. "
            "Please upload a PDF, DOCX or TXT file."
        )
        self.media_type = media_type


class StrategyError(ExtractionError):
    """Raised by a strategy that could not produce text. Recovered by the pipeline."""


class EncryptedDocumentError(StrategyError):
    """Raised when a document is password-protected."""
