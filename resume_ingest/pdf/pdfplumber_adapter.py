import io

import pdfplumber

from resume_ingest.pdf.base import BasePdfExtractor, looks_encrypted
from resume_ingest.pdf.exceptions import PdfEncryptedError, PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text from PDF using pdfplumber."""

    engine = "pdfplumber"

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
            return "\n".join(pages).strip()
        except PdfExtractionError:
            raise
        except Exception as exc:
            if looks_encrypted(exc):
                raise PdfEncryptedError("PDF is password-protected") from exc
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc
