from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from resume_ingest.database.models import OcrJobState
from resume_ingest.extraction.models import ExtractionAttempt


class RejectionReason(str, Enum):
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    EMPTY_INPUT = "empty_input"
    FILE_TOO_LARGE = "file_too_large"
    ENCRYPTED_DOCUMENT = "encrypted_document"
    INSUFFICIENT_TEXT = "insufficient_text"
    OCR_UNAVAILABLE = "ocr_unavailable"


@dataclass(frozen=True)
class Extracted:
    """Text was extracted synchronously; OCR was never involved."""

    text: str
    strategy_used: str
    attempts: list[ExtractionAttempt] = field(default_factory=list)
    kind: Literal["extracted"] = "extracted"


@dataclass(frozen=True)
class OcrOffered:
    """Extraction was insufficient and an OCR job was requested; poll ``job_id``.

    ``state`` is ``failed`` with ``error_message`` set when the OCR service
    refused the submission.
    """

    job_id: str
    state: OcrJobState
    error_message: str | None = None
    attempts: list[ExtractionAttempt] = field(default_factory=list)
    kind: Literal["ocr_offered"] = "ocr_offered"


@dataclass(frozen=True)
class Rejected:
    """The upload cannot be turned into text; ``message`` tells the user what to do."""

    reason: RejectionReason
    message: str
    attempts: list[ExtractionAttempt] = field(default_factory=list)
    kind: Literal["rejected"] = "rejected"


IngestionOutcome = Extracted | OcrOffered | Rejected
