import pymupdf

from resume_ingest.pdf.base import BasePdfExtractor, looks_encrypted
from resume_ingest.pdf.exceptions import PdfEncryptedError, PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text from PDF using PyMuPDF."""

    engine = "pymupdf"

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.needs_pass:
                    raise PdfEncryptedError("PDF is password-protected")
                pages = [page.get_text() for page in doc]
            return "\n".join(pages).strip()
        except PdfExtractionError:
            raise
        except Exception as exc:
            if looks_encrypted(exc):
                raise PdfEncryptedError("PDF is password-protected") from exc
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc
