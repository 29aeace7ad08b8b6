import codecs
import io
from abc import ABC, abstractmethod
from typing import Any

import docx

from resume_ingest.extraction.exceptions import EncryptedDocumentError, StrategyError
from resume_ingest.pdf.base import BasePdfExtractor
from resume_ingest.pdf.exceptions import PdfEncryptedError, PdfExtractionError


class BaseExtractionStrategy(ABC):
    """One way of turning document bytes into text."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier reported in extraction attempts."""

    @abstractmethod
    def attempt(self, data: bytes) -> str:
        """Return the raw text found in ``data``.

        Raises:
            EncryptedDocumentError: if the document is password-protected.
            StrategyError: on any other failure.
        """


class PdfTextLayerStrategy(BaseExtractionStrategy):
    """Reads the embedded text layer of a PDF through one PDF adapter."""

    def __init__(self, extractor: BasePdfExtractor) -> None:
        self._extractor = extractor

    @property
    def name(self) -> str:
        return f"pdf:{self._extractor.engine}"

    def attempt(self, data: bytes) -> str:
        try:
            return self._extractor.extract(data)
        except PdfEncryptedError as exc:
            raise EncryptedDocumentError(
                "PDF is password-protected. Please unlock it and try again."
            ) from exc
        except PdfExtractionError as exc:
            raise StrategyError(str(exc)) from exc


class DocxStrategy(BaseExtractionStrategy):
    """Reads paragraphs, tables, headers and footers with python-docx."""

    @property
    def name(self) -> str:
        return "docx:python-docx"

    def attempt(self, data: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(data))
        except Exception as exc:
            raise StrategyError(
                f"Could not open Word document ({exc}). "
                "Legacy .doc files should be saved as DOCX or PDF."
            ) from exc
        try:
            return self._read_text(document)
        except Exception as exc:
            raise StrategyError(f"python-docx extraction failed: {exc}") from exc

    @staticmethod
    def _read_text(document: Any) -> str:
        parts: list[str] = []
        for section in document.sections:
            parts.extend(p.text for p in section.header.paragraphs if p.text.strip())
        parts.extend(p.text for p in document.paragraphs if p.text.strip())
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))
        for section in document.sections:
            parts.extend(p.text for p in section.footer.paragraphs if p.text.strip())
        return "\n".join(parts).strip()


class PlainTextStrategy(BaseExtractionStrategy):
    """Decodes text bytes: UTF-8 (BOM aware), UTF-16 with BOM, then Latin-1."""

    @property
    def name(self) -> str:
        return "text:decode"

    def attempt(self, data: bytes) -> str:
        if data.startswith(codecs.BOM_UTF8):
            return data[len(codecs.BOM_UTF8):].decode("utf-8", errors="replace")
        if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
            try:
                return data.decode("utf-16")
            except UnicodeDecodeError as exc:
                raise StrategyError(f"Invalid UTF-16 text: {exc}") from exc
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return data.decode("latin-1")
