from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class OcrPollStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class OcrPollResult:
    """What the OCR service reports for one of its jobs."""

    status: OcrPollStatus
    text: str | None = None
    error: str | None = None

    @classmethod
    def in_progress(cls) -> "OcrPollResult":
        return cls(status=OcrPollStatus.IN_PROGRESS)

    @classmethod
    def succeeded(cls, text: str) -> "OcrPollResult":
        return cls(status=OcrPollStatus.SUCCEEDED, text=text)

    @classmethod
    def failed(cls, error: str) -> "OcrPollResult":
        return cls(status=OcrPollStatus.FAILED, error=error)


class BaseOcrClient(ABC):
    """Contract for asynchronous, job-based OCR services."""

    @abstractmethod
    def submit(self, content_key: str, *, filename: str, content_type: str) -> str:
        """Start OCR of a stored document and return the service's job id.

        Raises:
            OcrSubmissionError: if the service rejects the job, errors or times out.
        """

    @abstractmethod
    def poll(self, external_job_id: str) -> OcrPollResult:
        """Query the service for the state of a job.

        Raises:
            OcrPollError: if the query itself fails.
        """

    def is_available(self) -> bool:
        return True

    def close(self) -> None:
        """Release network resources. Override if the client holds any."""
