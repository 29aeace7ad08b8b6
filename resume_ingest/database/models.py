from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from resume_ingest.database.exceptions import InvalidTransitionError


class OcrJobState(str, Enum):
    """Lifecycle of an OCR job: queued -> running -> succeeded | failed."""

    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (OcrJobState.SUCCEEDED, OcrJobState.FAILED)


@dataclass
class OcrJob:
    """Represents a row from the ocr_jobs table."""

    id: str
    owner_id: str
    content_key: str
    state: OcrJobState
    filename: str | None = None
    external_job_id: str | None = None
    result_text: str | None = None
    error_message: str | None = None
    linked_scan_id: str | None = None
    live: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class OcrJobTransition:
    """A single state change together with the columns it sets.

    Stores apply a transition only while the job is in one of
    ``from_states``, so a transition is a compare-and-set on the row.
    """

    from_states: tuple[OcrJobState, ...]
    to_state: OcrJobState
    external_job_id: str | None = None
    result_text: str | None = None
    error_message: str | None = None

    def __post_init__(self) -> None:
        if any(state.is_terminal for state in self.from_states):
            raise InvalidTransitionError("cannot transition out of a terminal state")
        if (self.to_state is OcrJobState.SUCCEEDED) != (self.result_text is not None):
            raise InvalidTransitionError("result_text is set if and only if state is succeeded")
        if (self.to_state is OcrJobState.FAILED) != (self.error_message is not None):
            raise InvalidTransitionError("error_message is set if and only if state is failed")
        if self.to_state is OcrJobState.RUNNING and not self.external_job_id:
            raise InvalidTransitionError("running requires an external job id")
        if self.to_state is not OcrJobState.RUNNING and self.external_job_id is not None:
            raise InvalidTransitionError("external job id is only set when entering running")

    @classmethod
    def start(cls, external_job_id: str) -> "OcrJobTransition":
        return cls(
            from_states=(OcrJobState.QUEUED,),
            to_state=OcrJobState.RUNNING,
            external_job_id=external_job_id,
        )

    @classmethod
    def succeed(cls, result_text: str) -> "OcrJobTransition":
        return cls(
            from_states=(OcrJobState.RUNNING,),
            to_state=OcrJobState.SUCCEEDED,
            result_text=result_text,
        )

    @classmethod
    def fail(
        cls,
        error_message: str,
        from_states: tuple[OcrJobState, ...] = (OcrJobState.QUEUED, OcrJobState.RUNNING),
    ) -> "OcrJobTransition":
        return cls(
            from_states=from_states,
            to_state=OcrJobState.FAILED,
            error_message=error_message,
        )

    @property
    def keeps_live(self) -> bool:
        """Failed jobs stop blocking new attempts for the same document."""
        return self.to_state is not OcrJobState.FAILED


STALE_SUBMISSION_ERROR = "OCR submission did not complete. Please try again."
