from resume_ingest.extraction.exceptions import UnsupportedMediaTypeError
from resume_ingest.extraction.media_types import document_kind, resolve_media_type
from resume_ingest.extraction.pipeline import TextExtractionPipeline
from resume_ingest.ingestion.outcomes import (
    Extracted,
    IngestionOutcome,
    OcrOffered,
    Rejected,
    RejectionReason,
)
from resume_ingest.logging.logger import Log
from resume_ingest.ocr.models import OcrJobStatus
from resume_ingest.ocr.orchestrator import OcrJobOrchestrator

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class IngestionFacade:
    """Single entry point: extract text from an upload, escalating to OCR if needed.

    OCR is only requested after extraction has run and found no usable text
    in a PDF that looks scanned. The two never run for the same upload in
    parallel.
    """

    def __init__(
        self,
        pipeline: TextExtractionPipeline,
        orchestrator: OcrJobOrchestrator,
        *,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        ocr_enabled: bool = True,
    ) -> None:
        self._pipeline = pipeline
        self._orchestrator = orchestrator
        self._max_upload_bytes = max_upload_bytes
        self._ocr_enabled = ocr_enabled

    def ingest(
        self,
        data: bytes,
        media_type: str,
        filename: str,
        owner_id: str,
        linked_scan_id: str | None = None,
    ) -> IngestionOutcome:
        Log.info(
            "Ingesting upload",
            filename=filename,
            media_type=media_type,
            size_bytes=len(data),
            owner_id=owner_id,
        )
        try:
            document_kind(media_type, filename)
        except UnsupportedMediaTypeError as exc:
            Log.warning("Upload rejected", reason="unsupported_media_type", media_type=media_type)
            return Rejected(reason=RejectionReason.UNSUPPORTED_MEDIA_TYPE, message=str(exc))

        if not data:
            return Rejected(
                reason=RejectionReason.EMPTY_INPUT,
                message="The uploaded file is empty. Please choose a different file.",
            )
        if len(data) > self._max_upload_bytes:
            limit_mb = self._max_upload_bytes / (1024 * 1024)
            return Rejected(
                reason=RejectionReason.FILE_TOO_LARGE,
                message=f"File too large. Maximum size is {limit_mb:g} MB.",
            )

        result = self._pipeline.extract(data, media_type, filename)
        if result.text is not None and result.strategy_used is not None:
            return Extracted(
                text=result.text,
                strategy_used=result.strategy_used,
                attempts=result.attempts,
            )

        if result.is_encrypted:
            return Rejected(
                reason=RejectionReason.ENCRYPTED_DOCUMENT,
                message="PDF is password-protected. Please unlock it and try again.",
                attempts=result.attempts,
            )
        if not result.is_likely_scanned:
            return Rejected(
                reason=RejectionReason.INSUFFICIENT_TEXT,
                message=(
                    "No readable text was found in the file. "
                    "Please try a different file."
                ),
                attempts=result.attempts,
            )
        if not (self._ocr_enabled and self._orchestrator.is_available()):
            Log.warning("Scanned document but OCR is not available", filename=filename)
            return Rejected(
                reason=RejectionReason.OCR_UNAVAILABLE,
                message=(
                    "This PDF appears to be scanned images and OCR is not available. "
                    "Please upload a text-based PDF or DOCX."
                ),
                attempts=result.attempts,
            )

        handle = self._orchestrator.request_job(
            owner_id,
            data=data,
            filename=filename,
            content_type=resolve_media_type(media_type, filename),
            linked_scan_id=linked_scan_id,
        )
        Log.info("OCR offered", job_id=handle.job_id, state=handle.state.value)
        return OcrOffered(
            job_id=handle.job_id,
            state=handle.state,
            error_message=handle.error_message,
            attempts=result.attempts,
        )

    def job_status(self, job_id: str, owner_id: str) -> OcrJobStatus:
        """Status poll for an OCR job offered by :meth:`ingest`.

        Raises:
            OcrJobNotFoundError: if the job does not exist for this owner.
        """
        return self._orchestrator.check_status(job_id, owner_id)

    def close(self) -> None:
        self._orchestrator.close()
