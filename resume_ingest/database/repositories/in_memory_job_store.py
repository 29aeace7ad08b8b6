import threading
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from resume_ingest.database.models import (
    STALE_SUBMISSION_ERROR,
    OcrJob,
    OcrJobState,
    OcrJobTransition,
)
from resume_ingest.database.repositories.base import BaseOcrJobStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryOcrJobStore(BaseOcrJobStore):
    """Process-local job store guarded by a single lock.

    Suitable for a single-process deployment, local development and tests.
    Callers always receive copies, never the stored objects.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._jobs: dict[str, OcrJob] = {}
        self._lock = threading.Lock()

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
        with self._lock:
            now = self._clock()
            live = [
                job
                for job in self._jobs.values()
                if job.owner_id == owner_id and job.content_key == content_key and job.live
            ]
            for job in live:
                if self._is_stale(job, now, stale_queued_seconds):
                    job.state = OcrJobState.FAILED
                    job.error_message = STALE_SUBMISSION_ERROR
                    job.live = False
                    job.updated_at = now
                elif self._is_expired(job, now, reuse_ttl_seconds):
                    job.live = False
            live = [job for job in live if job.live]
            if live:
                newest = max(live, key=lambda job: job.created_at or now)
                return replace(newest), False

            job = OcrJob(
                id=str(uuid.uuid4()),
                owner_id=owner_id,
                content_key=content_key,
                state=OcrJobState.QUEUED,
                filename=filename,
                linked_scan_id=linked_scan_id,
                created_at=now,
                updated_at=now,
            )
            self._jobs[job.id] = job
            return replace(job), True

    def get(self, job_id: str, owner_id: str) -> OcrJob | None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or job.owner_id != owner_id:
                return None
            return replace(job)

    def update_state(self, job_id: str, transition: OcrJobTransition) -> OcrJob | None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or job.state not in transition.from_states:
                return None
            job.state = transition.to_state
            if transition.external_job_id is not None:
                job.external_job_id = transition.external_job_id
            job.result_text = transition.result_text
            job.error_message = transition.error_message
            job.live = job.live and transition.keeps_live
            job.updated_at = self._clock()
            return replace(job)

    @staticmethod
    def _is_expired(job: OcrJob, now: datetime, reuse_ttl_seconds: int) -> bool:
        if reuse_ttl_seconds <= 0 or job.state is not OcrJobState.SUCCEEDED:
            return False
        completed_at = job.updated_at or now
        return now - completed_at > timedelta(seconds=reuse_ttl_seconds)

    @staticmethod
    def _is_stale(job: OcrJob, now: datetime, stale_queued_seconds: int) -> bool:
        if stale_queued_seconds <= 0 or job.state is not OcrJobState.QUEUED:
            return False
        created_at = job.created_at or now
        return now - created_at > timedelta(seconds=stale_queued_seconds)
