from resume_ingest.config.settings import Settings
from resume_ingest.pdf.base import BasePdfExtractor
from resume_ingest.pdf.pdfplumber_adapter import PdfPlumberAdapter
from resume_ingest.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Creates PDF extractors based on settings."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, engine: str) -> BasePdfExtractor:
        engine = engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()

    @classmethod
    def create_chain(cls, settings: Settings) -> list[BasePdfExtractor]:
        """Build the configured extractors in the order they should be tried."""
        engines = settings.pdf_engine_order
        if not engines:
            raise ValueError("pdf_engines must name at least one PDF engine")
        if len(set(engines)) != len(engines):
            raise ValueError(f"pdf_engines lists an engine twice: {engines}")
        return [cls.create(engine) for engine in engines]
