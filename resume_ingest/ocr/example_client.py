"""Example OCR client.

Use this module as a reference when implementing new OCR service adapters.
Implement BaseOcrClient and register the provider in OcrClientFactory.
"""

import threading
import uuid
from typing import ClassVar

from resume_ingest.ocr.client_base import BaseOcrClient, OcrPollResult
from resume_ingest.ocr.exceptions import OcrPollError


class ExampleOcrClient(BaseOcrClient):
    """In-process client that finishes every job with a fixed text.

    No network calls. Jobs report in-progress until they have been polled
    ``polls_until_done`` times. A finished job is forgotten, so polling it
    again raises ``OcrPollError``.
    """

    DEFAULT_TEXT: ClassVar[str] = (
        "Jane Doe\n"
        "Software Engineer\n"
        "jane.doe@example.com\n"
        "Experience: Backend services, document processing pipelines."
    )

    def __init__(self, text: str = DEFAULT_TEXT, polls_until_done: int = 1) -> None:
        self._text = text
        self._polls_until_done = polls_until_done
        self._polls: dict[str, int] = {}
        self._lock = threading.Lock()

    def submit(self, content_key: str, *, filename: str, content_type: str) -> str:
        _ = content_key, filename, content_type
        external_job_id = f"example-{uuid.uuid4().hex}"
        with self._lock:
            self._polls[external_job_id] = 0
        return external_job_id

    def poll(self, external_job_id: str) -> OcrPollResult:
        with self._lock:
            if external_job_id not in self._polls:
                raise OcrPollError(f"Unknown OCR job {external_job_id}", retryable=False)
            self._polls[external_job_id] += 1
            if self._polls[external_job_id] < self._polls_until_done:
                return OcrPollResult.in_progress()
            del self._polls[external_job_id]
        return OcrPollResult.succeeded(self._text)
