from dataclasses import dataclass

from resume_ingest.database.models import OcrJobState


@dataclass(frozen=True)
class OcrJobHandle:
    """Result of requesting an OCR job."""

    job_id: str
    state: OcrJobState
    created: bool
    result_text: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class OcrJobStatus:
    """What a status poll reports to the caller.

    ``persisted`` is False when a failure is reported for this call only and
    the stored job was left untouched.
    """

    state: OcrJobState
    result_text: str | None = None
    error_message: str | None = None
    filename: str | None = None
    persisted: bool = True
