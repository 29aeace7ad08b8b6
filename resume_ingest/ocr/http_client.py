"""HTTP adapter for a job-based OCR service.

Wire contract:
    POST {base_url}/jobs            multipart: document (file), content_key
        -> 2xx {"job_id": "..."}
    GET  {base_url}/jobs/{job_id}   query: next_token (optional)
        -> {"status": "in_progress" | "succeeded" | "failed",
            "lines": [{"type": "LINE", "text": "..."} | "...", ...],
            "next_token": "..." | null,
            "error": "..." | null}

Large results are paginated: every page of a succeeded job carries a slice of
the recognized lines and a ``next_token`` until the last page.
"""

from typing import Any

import httpx

from resume_ingest.logging.logger import Log
from resume_ingest.ocr.client_base import BaseOcrClient, OcrPollResult
from resume_ingest.ocr.exceptions import OcrPollError, OcrSubmissionError
from resume_ingest.storage.base import BaseBlobStore
from resume_ingest.storage.exceptions import BlobStoreError

_IN_PROGRESS_STATUSES = {"in_progress", "queued", "running", "pending"}
_RETRYABLE_STATUS_CODES = {408, 425, 429}


class HttpOcrClient(BaseOcrClient):
    """OCR service client built on httpx."""

    JOBS_PATH = "/jobs"
    MAX_RESULT_PAGES = 200

    def __init__(
        self,
        *,
        base_url: str,
        blob_store: BaseBlobStore,
        submit_timeout_seconds: float,
        poll_timeout_seconds: float,
        api_key: str = "",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._blob_store = blob_store
        self._submit_timeout = submit_timeout_seconds
        self._poll_timeout = poll_timeout_seconds
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.Client(
            base_url=self._base_url,
            headers=headers,
            transport=transport,
        )

    def is_available(self) -> bool:
        return bool(self._base_url)

    def submit(self, content_key: str, *, filename: str, content_type: str) -> str:
        try:
            document = self._blob_store.get(content_key)
        except BlobStoreError as exc:
            raise OcrSubmissionError(f"Could not read document for OCR: {exc}") from exc

        try:
            response = self._client.post(
                self.JOBS_PATH,
                data={"content_key": content_key},
                files={"document": (filename or "document", document, content_type)},
                timeout=self._submit_timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise OcrSubmissionError(
                f"OCR submission timed out after {self._submit_timeout}s"
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise OcrSubmissionError(
                f"OCR service rejected submission: HTTP {exc.response.status_code}"
                f"{_error_detail(exc.response)}"
            ) from exc
        except httpx.HTTPError as exc:
            raise OcrSubmissionError(f"OCR service unreachable: {exc}") from exc
        except ValueError as exc:
            raise OcrSubmissionError("OCR service returned invalid JSON") from exc

        job_id = payload.get("job_id") if isinstance(payload, dict) else None
        if not job_id:
            raise OcrSubmissionError("OCR service returned no job id")
        Log.info("OCR job submitted", content_key=content_key, external_job_id=job_id)
        return str(job_id)

    def poll(self, external_job_id: str) -> OcrPollResult:
        lines: list[str] = []
        next_token: str | None = None

        for _ in range(self.MAX_RESULT_PAGES):
            payload = self._get_page(external_job_id, next_token)
            status = str(payload.get("status", "")).lower()

            if status in _IN_PROGRESS_STATUSES:
                return OcrPollResult.in_progress()
            if status == "failed":
                return OcrPollResult.failed(
                    str(payload.get("error") or "OCR processing failed")
                )
            if status != "succeeded":
                raise OcrPollError(f"Unknown OCR job status: {status!r}", retryable=False)

            lines.extend(_line_texts(payload.get("lines")))
            next_token = payload.get("next_token") or None
            if next_token is None:
                text = "\n".join(lines).strip()
                Log.info(
                    "OCR result collected",
                    external_job_id=external_job_id,
                    chars=len(text),
                )
                return OcrPollResult.succeeded(text)

        raise OcrPollError(
            f"OCR result for {external_job_id} exceeded {self.MAX_RESULT_PAGES} pages",
            retryable=False,
        )

    def close(self) -> None:
        self._client.close()

    def _get_page(self, external_job_id: str, next_token: str | None) -> dict[str, Any]:
        params = {"next_token": next_token} if next_token else None
        try:
            response = self._client.get(
                f"{self.JOBS_PATH}/{external_job_id}",
                params=params,
                timeout=self._poll_timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise OcrPollError(
                f"OCR status check timed out after {self._poll_timeout}s", retryable=True
            ) from exc
        except httpx.HTTPStatusError as exc:
            code = exc.response.status_code
            raise OcrPollError(
                f"OCR status check failed: HTTP {code}{_error_detail(exc.response)}",
                retryable=code >= 500 or code in _RETRYABLE_STATUS_CODES,
            ) from exc
        except httpx.HTTPError as exc:
            raise OcrPollError(f"OCR service unreachable: {exc}", retryable=True) from exc
        except ValueError as exc:
            raise OcrPollError("OCR service returned invalid JSON", retryable=False) from exc

        if not isinstance(payload, dict):
            raise OcrPollError("OCR service returned an unexpected payload", retryable=False)
        return payload


def _line_texts(raw_lines: Any) -> list[str]:
    if not isinstance(raw_lines, list):
        return []
    texts: list[str] = []
    for item in raw_lines:
        if isinstance(item, str):
            text = item
        elif isinstance(item, dict) and str(item.get("type", "LINE")).upper() == "LINE":
            text = str(item.get("text") or "")
        else:
            continue
        if text.strip():
            texts.append(text)
    return texts


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return ""
    if isinstance(payload, dict) and payload.get("error"):
        return f": {payload['error']}"
    return ""
