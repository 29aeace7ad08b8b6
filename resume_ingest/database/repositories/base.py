from abc import ABC, abstractmethod

from resume_ingest.database.models import OcrJob, OcrJobTransition


class BaseOcrJobStore(ABC):
    """Contract for OCR job persistence adapters."""

    @abstractmethod
    def create_if_absent(
        self,
        owner_id: str,
        content_key: str,
        *,
        filename: str | None = None,
        linked_scan_id: str | None = None,
        reuse_ttl_seconds: int = 0,
        stale_queued_seconds: int = 0,
    ) -> tuple[OcrJob, bool]:
        """Return the live job for (owner_id, content_key), creating a queued one if none.

        The lookup and the insert are one atomic unit: concurrent callers for the
        same key converge on a single row. A succeeded job older than
        ``reuse_ttl_seconds`` (0 disables expiry) is retired first, which clears
        its live flag and leaves its state and result untouched. A job still
        queued ``stale_queued_seconds`` after creation (0 disables) lost its
        submission and is failed with ``STALE_SUBMISSION_ERROR``.

        Returns:
            (job, created) where ``created`` is True only for the caller whose
            insert won.
        """

    @abstractmethod
    def get(self, job_id: str, owner_id: str) -> OcrJob | None:
        """Fetch a job by id, scoped to its owner. None if missing or not owned."""

    @abstractmethod
    def update_state(self, job_id: str, transition: OcrJobTransition) -> OcrJob | None:
        """Apply a transition atomically.

        Returns:
            The updated job, or None when the job is no longer in one of the
            transition's source states.
        """
