import time
from collections.abc import Mapping, Sequence

from resume_ingest.config.settings import Settings
from resume_ingest.extraction.exceptions import EncryptedDocumentError, StrategyError
from resume_ingest.extraction.media_types import document_kind
from resume_ingest.extraction.models import DocumentKind, ExtractionAttempt, ExtractionResult
from resume_ingest.extraction.quality import MIN_TEXT_CHARS, check_quality
from resume_ingest.extraction.strategies import (
    BaseExtractionStrategy,
    DocxStrategy,
    PdfTextLayerStrategy,
    PlainTextStrategy,
)
from resume_ingest.logging.logger import Log
from resume_ingest.pdf.factory import PdfExtractorFactory


class TextExtractionPipeline:
    """Tries ordered strategies per document kind until one passes the quality gate.

    The pipeline has no side effects beyond logging. Whether an insufficient
    result is escalated to OCR is the caller's decision.
    """

    def __init__(
        self,
        strategies: Mapping[DocumentKind, Sequence[BaseExtractionStrategy]],
        min_text_chars: int = MIN_TEXT_CHARS,
    ) -> None:
        self._strategies = strategies
        self._min_text_chars = min_text_chars

    def strategy_names(self, kind: DocumentKind) -> list[str]:
        return [strategy.name for strategy in self._strategies.get(kind, ())]

    def extract(self, data: bytes, media_type: str, filename: str = "") -> ExtractionResult:
        """Extract text from a document.

        Raises:
            UnsupportedMediaTypeError: before any strategy runs, for types
                outside PDF, Word and text.
        """
        kind = document_kind(media_type, filename)
        attempts: list[ExtractionAttempt] = []
        encrypted = False

        for strategy in self._strategies.get(kind, ()):
            started = time.perf_counter()
            try:
                raw = strategy.attempt(data)
            except EncryptedDocumentError as exc:
                attempts.append(_failed(strategy, started, str(exc)))
                Log.warning("Document is password-protected", strategy=strategy.name)
                encrypted = True
                break
            except StrategyError as exc:
                attempts.append(_failed(strategy, started, str(exc)))
                Log.warning(
                    "Extraction strategy failed", strategy=strategy.name, error=str(exc)
                )
                continue

            verdict = check_quality(raw, filename, self._min_text_chars)
            attempt = ExtractionAttempt(
                strategy=strategy.name,
                succeeded=verdict.accepted,
                char_count=verdict.char_count,
                elapsed_ms=_elapsed_ms(started),
                error=verdict.reason,
            )
            attempts.append(attempt)
            if verdict.accepted:
                Log.info(
                    "Text extracted",
                    strategy=strategy.name,
                    chars=attempt.char_count,
                    elapsed_ms=attempt.elapsed_ms,
                )
                return ExtractionResult(
                    document_kind=kind,
                    text=verdict.text,
                    strategy_used=strategy.name,
                    attempts=attempts,
                )
            Log.info(
                "Extraction output rejected by quality gate",
                strategy=strategy.name,
                reason=verdict.reason,
            )

        likely_scanned = kind is DocumentKind.PDF and not encrypted
        Log.info(
            "No strategy produced usable text",
            kind=kind.value,
            attempts=len(attempts),
            likely_scanned=likely_scanned,
        )
        return ExtractionResult(
            document_kind=kind,
            attempts=attempts,
            is_likely_scanned=likely_scanned,
            is_encrypted=encrypted,
        )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def _failed(strategy: BaseExtractionStrategy, started: float, error: str) -> ExtractionAttempt:
    return ExtractionAttempt(
        strategy=strategy.name,
        succeeded=False,
        elapsed_ms=_elapsed_ms(started),
        error=error,
    )


def build_pipeline(settings: Settings) -> TextExtractionPipeline:
    """Build the pipeline with the configured PDF engine order."""
    pdf_strategies = [
        PdfTextLayerStrategy(extractor)
        for extractor in PdfExtractorFactory.create_chain(settings)
    ]
    return TextExtractionPipeline(
        strategies={
            DocumentKind.PDF: pdf_strategies,
            DocumentKind.WORD: [DocxStrategy()],
            DocumentKind.TEXT: [PlainTextStrategy()],
        },
        min_text_chars=settings.min_text_chars,
    )
