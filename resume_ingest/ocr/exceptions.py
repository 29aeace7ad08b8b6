class OcrError(Exception):
    """Base exception for OCR-related errors."""


class OcrSubmissionError(OcrError):
    """Raised when the OCR service refuses, errors or times out on submit."""


class OcrPollError(OcrError):
    """Raised when a status query to the OCR service fails.

    ``retryable`` errors (network, timeouts, overload) leave the job untouched
    and the next poll tries again.
    """

    def __init__(self, message: str, *, retryable: bool) -> None:
        super().__init__(message)
        self.retryable = retryable


class OcrJobNotFoundError(OcrError):
    """Raised when a job does not exist or belongs to another owner."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"OCR job {job_id} not found")
        self.job_id = job_id
