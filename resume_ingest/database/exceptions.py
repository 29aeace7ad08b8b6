class JobStoreError(Exception):
    """Base exception for OCR job persistence errors."""


class InvalidTransitionError(JobStoreError):
    """Raised when a transition would break the OCR job state machine."""
