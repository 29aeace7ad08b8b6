from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from resume_ingest.database.models import (
    STALE_SUBMISSION_ERROR,
    OcrJob,
    OcrJobState,
    OcrJobTransition,
)
from resume_ingest.database.repositories.base import BaseOcrJobStore
from resume_ingest.logging.logger import Log
from resume_ingest.ocr.client_base import BaseOcrClient, OcrPollStatus
from resume_ingest.ocr.exceptions import OcrJobNotFoundError, OcrPollError, OcrSubmissionError
from resume_ingest.ocr.models import OcrJobHandle, OcrJobStatus
from resume_ingest.storage.base import BaseBlobStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OcrJobOrchestrator:
    """Creates or reuses OCR jobs and advances them as callers poll.

    One live job exists per (owner, content key): a queued, running or
    succeeded job is returned as is and never resubmitted. Jobs only move
    queued -> running -> succeeded | failed, and only here: right after
    submission, and when a poll reports a terminal outcome. There are no
    timers; every external call is made on behalf of a caller. A job left
    queued longer than ``stale_queued_seconds`` (0 disables) lost its
    submission and is failed the next time it is requested or polled.
    """

    def __init__(
        self,
        job_store: BaseOcrJobStore,
        blob_store: BaseBlobStore,
        ocr_client: BaseOcrClient,
        reuse_ttl_seconds: int = 0,
        stale_queued_seconds: int = 0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._job_store = job_store
        self._blob_store = blob_store
        self._ocr_client = ocr_client
        self._reuse_ttl_seconds = reuse_ttl_seconds
        self._stale_queued_seconds = stale_queued_seconds
        self._clock = clock

    def is_available(self) -> bool:
        return self._ocr_client.is_available()

    def close(self) -> None:
        self._ocr_client.close()

    def request_job(
        self,
        owner_id: str,
        *,
        filename: str,
        content_type: str = "application/pdf",
        content_key: str | None = None,
        data: bytes | None = None,
        linked_scan_id: str | None = None,
    ) -> OcrJobHandle:
        """Create or reuse the OCR job for a document.

        Pass either the content key of an already stored document or its raw
        bytes; bytes are stored first. A submission failure is recorded on the
        job and returned in the handle, never deferred to polling.
        """
        if content_key is not None and data is not None:
            raise ValueError("Pass exactly one of content_key or data")
        if data is not None:
            content_key = self._blob_store.put(owner_id, data, filename, content_type)
        if content_key is None:
            raise ValueError("Pass exactly one of content_key or data")

        job, created = self._job_store.create_if_absent(
            owner_id,
            content_key,
            filename=filename,
            linked_scan_id=linked_scan_id,
            reuse_ttl_seconds=self._reuse_ttl_seconds,
            stale_queued_seconds=self._stale_queued_seconds,
        )
        if not created:
            Log.info(
                "Reusing OCR job",
                job_id=job.id,
                state=job.state.value,
                owner_id=owner_id,
            )
            return _handle(job, created=False)

        Log.info("OCR job created", job_id=job.id, owner_id=owner_id, content_key=content_key)
        return _handle(self._submit(job, content_type), created=True)

    def check_status(self, job_id: str, owner_id: str) -> OcrJobStatus:
        """Report a job's state, querying the OCR service only while it is running.

        Raises:
            OcrJobNotFoundError: if the job does not exist for this owner.
        """
        job = self._job_store.get(job_id, owner_id)
        if job is None:
            raise OcrJobNotFoundError(job_id)

        if job.state.is_terminal:
            return _status(job)
        if self._is_stale(job):
            Log.warning("OCR job never left queued state", job_id=job.id)
            job = self._apply(
                job,
                OcrJobTransition.fail(STALE_SUBMISSION_ERROR, from_states=(OcrJobState.QUEUED,)),
            )
            return _status(job)
        if job.state is OcrJobState.QUEUED or not job.external_job_id:
            return OcrJobStatus(state=OcrJobState.RUNNING, filename=job.filename)

        try:
            result = self._ocr_client.poll(job.external_job_id)
        except OcrPollError as exc:
            if exc.retryable:
                Log.warning("OCR status check failed, will retry", job_id=job.id, error=str(exc))
                return OcrJobStatus(state=OcrJobState.RUNNING, filename=job.filename)
            Log.error("OCR status check failed", job_id=job.id, error=str(exc))
            return OcrJobStatus(
                state=OcrJobState.FAILED,
                error_message=str(exc),
                filename=job.filename,
                persisted=False,
            )

        if result.status is OcrPollStatus.IN_PROGRESS:
            return OcrJobStatus(state=OcrJobState.RUNNING, filename=job.filename)

        if result.status is OcrPollStatus.SUCCEEDED:
            transition = OcrJobTransition.succeed(result.text or "")
        else:
            transition = OcrJobTransition.fail(
                result.error or "OCR processing failed",
                from_states=(OcrJobState.RUNNING,),
            )
        job = self._apply(job, transition)
        Log.info(
            "OCR job finished",
            job_id=job.id,
            state=job.state.value,
            chars=len(job.result_text or ""),
        )
        return _status(job)

    def _submit(self, job: OcrJob, content_type: str) -> OcrJob:
        try:
            external_job_id = self._ocr_client.submit(
                job.content_key,
                filename=job.filename or "",
                content_type=content_type,
            )
        except OcrSubmissionError as exc:
            Log.error("OCR submission failed", job_id=job.id, error=str(exc))
            return self._apply(
                job, OcrJobTransition.fail(str(exc), from_states=(OcrJobState.QUEUED,))
            )
        except Exception as exc:
            # Never leave a queued job behind that blocks later attempts.
            self._apply(
                job,
                OcrJobTransition.fail(
                    f"Unexpected submission error: {exc}",
                    from_states=(OcrJobState.QUEUED,),
                ),
            )
            raise

        Log.info("OCR job running", job_id=job.id, external_job_id=external_job_id)
        return self._apply(job, OcrJobTransition.start(external_job_id))

    def _apply(self, job: OcrJob, transition: OcrJobTransition) -> OcrJob:
        updated = self._job_store.update_state(job.id, transition)
        if updated is not None:
            return updated
        # Another request already moved the job; report what is stored.
        current = self._job_store.get(job.id, job.owner_id)
        if current is None:
            raise OcrJobNotFoundError(job.id)
        Log.warning(
            "OCR job changed concurrently",
            job_id=job.id,
            wanted=transition.to_state.value,
            stored=current.state.value,
        )
        return current

    def _is_stale(self, job: OcrJob) -> bool:
        if self._stale_queued_seconds <= 0 or job.state is not OcrJobState.QUEUED:
            return False
        if job.created_at is None:
            return False
        return self._clock() - job.created_at > timedelta(seconds=self._stale_queued_seconds)


def _handle(job: OcrJob, created: bool) -> OcrJobHandle:
    return OcrJobHandle(
        job_id=job.id,
        state=job.state,
        created=created,
        result_text=job.result_text,
        error_message=job.error_message,
    )


def _status(job: OcrJob) -> OcrJobStatus:
    return OcrJobStatus(
        state=job.state,
        result_text=job.result_text,
        error_message=job.error_message,
        filename=job.filename,
    )
