from abc import ABC, abstractmethod
from typing import ClassVar

_ENCRYPTION_MARKERS = ("password", "encrypt")


class BasePdfExtractor(ABC):
    """Contract for all PDF text-layer extraction adapters."""

    engine: ClassVar[str]

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract the embedded text layer from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Page texts joined by newlines, stripped. Empty for image-only PDFs.

        Raises:
            PdfEncryptedError: if the document is password-protected.
            PdfExtractionError: if extraction fails for any other reason.
        """


def looks_encrypted(exc: BaseException) -> bool:
    """Whether an exception raised by a PDF library signals a password-protected file."""
    current: BaseException | None = exc
    while current is not None:
        text = f"{type(current).__name__} {current}".lower()
        if any(marker in text for marker in _ENCRYPTION_MARKERS):
            return True
        current = current.__cause__ or current.__context__
    return False
