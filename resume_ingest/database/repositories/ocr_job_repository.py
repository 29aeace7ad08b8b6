import uuid
from typing import Any

from psycopg.rows import dict_row

from resume_ingest.database.connection import get_connection
from resume_ingest.database.exceptions import JobStoreError
from resume_ingest.database.models import (
    STALE_SUBMISSION_ERROR,
    OcrJob,
    OcrJobState,
    OcrJobTransition,
)
from resume_ingest.database.repositories.base import BaseOcrJobStore
from resume_ingest.logging.logger import Log

_COLUMNS = """
    id, owner_id, content_key, state, filename, external_job_id,
    result_text, error_message, linked_scan_id, live, created_at, updated_at
"""


class PostgresOcrJobStore(BaseOcrJobStore):
    """Database operations for the ocr_jobs table."""

    CREATE_ATTEMPTS = 3

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
        # The partial unique index on (owner_id, content_key) WHERE live makes a
        # losing INSERT wait for the winner's commit and then do nothing.
        for _ in range(self.CREATE_ATTEMPTS):
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    if stale_queued_seconds > 0:
                        cur.execute(
                            """
                            UPDATE ocr_jobs
                            SET state = 'failed', error_message = %s,
                                live = FALSE, updated_at = NOW()
                            WHERE owner_id = %s
                              AND content_key = %s
                              AND live
                              AND state = 'queued'
                              AND created_at < NOW() - %s * INTERVAL '1 second'
                            """,
                            (STALE_SUBMISSION_ERROR, owner_id, content_key, stale_queued_seconds),
                        )
                        if cur.rowcount:
                            Log.warning(
                                "Failed OCR job stuck in queued state",
                                owner_id=owner_id,
                                content_key=content_key,
                            )
                    if reuse_ttl_seconds > 0:
                        cur.execute(
                            """
                            UPDATE ocr_jobs
                            SET live = FALSE, retired_at = NOW()
                            WHERE owner_id = %s
                              AND content_key = %s
                              AND live
                              AND state = 'succeeded'
                              AND updated_at < NOW() - %s * INTERVAL '1 second'
                            """,
                            (owner_id, content_key, reuse_ttl_seconds),
                        )
                        if cur.rowcount:
                            Log.info(
                                "Retired expired OCR result",
                                owner_id=owner_id,
                                content_key=content_key,
                            )
                    cur.execute(
                        f"""
                        INSERT INTO ocr_jobs
                            (id, owner_id, content_key, state, filename, linked_scan_id, live)
                        VALUES (%s, %s, %s, 'queued', %s, %s, TRUE)
                        ON CONFLICT (owner_id, content_key) WHERE live DO NOTHING
                        RETURNING {_COLUMNS}
                        """,
                        (str(uuid.uuid4()), owner_id, content_key, filename, linked_scan_id),
                    )
                    row = cur.fetchone()
                    created = row is not None
                    if row is None:
                        cur.execute(
                            f"""
                            SELECT {_COLUMNS}
                            FROM ocr_jobs
                            WHERE owner_id = %s AND content_key = %s AND live
                            ORDER BY created_at DESC
                            LIMIT 1
                            """,
                            (owner_id, content_key),
                        )
                        row = cur.fetchone()
                conn.commit()

            if row is not None:
                return self._to_job(row), created
            # The conflicting job left the live set between INSERT and SELECT.
            Log.warning(
                "Live OCR job vanished during create, retrying",
                owner_id=owner_id,
                content_key=content_key,
            )

        raise JobStoreError(
            f"Could not create or reuse OCR job for content key {content_key}"
        )

    def get(self, job_id: str, owner_id: str) -> OcrJob | None:
        if not _is_uuid(job_id):
            return None
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM ocr_jobs
                    WHERE id = %s AND owner_id = %s
                    """,
                    (job_id, owner_id),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return self._to_job(row)

    def update_state(self, job_id: str, transition: OcrJobTransition) -> OcrJob | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE ocr_jobs
                    SET state = %s,
                        external_job_id = COALESCE(%s, external_job_id),
                        result_text = %s,
                        error_message = %s,
                        live = live AND %s,
                        updated_at = NOW()
                    WHERE id = %s AND state = ANY(%s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        transition.to_state.value,
                        transition.external_job_id,
                        transition.result_text,
                        transition.error_message,
                        transition.keeps_live,
                        job_id,
                        [state.value for state in transition.from_states],
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            return None
        return self._to_job(row)

    @staticmethod
    def _to_job(row: dict[str, Any]) -> OcrJob:
        return OcrJob(
            id=str(row["id"]),
            owner_id=row["owner_id"],
            content_key=row["content_key"],
            state=OcrJobState(row["state"]),
            filename=row["filename"],
            external_job_id=row["external_job_id"],
            result_text=row["result_text"],
            error_message=row["error_message"],
            linked_scan_id=row["linked_scan_id"],
            live=row["live"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True
