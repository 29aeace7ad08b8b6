from collections.abc import Callable
from unittest.mock import MagicMock

import httpx
import pytest

from resume_ingest.ocr.client_base import OcrPollStatus
from resume_ingest.ocr.exceptions import OcrPollError, OcrSubmissionError
from resume_ingest.ocr.http_client import HttpOcrClient
from resume_ingest.storage.exceptions import BlobNotFoundError

Handler = Callable[[httpx.Request], httpx.Response]


def _make_client(handler: Handler, blob_store: MagicMock | None = None) -> HttpOcrClient:
    if blob_store is None:
        blob_store = MagicMock()
        blob_store.get.return_value = b"%PDF-scan"
    return HttpOcrClient(
        base_url="http://ocr.test/",
        api_key="token",
        blob_store=blob_store,
        submit_timeout_seconds=5,
        poll_timeout_seconds=5,
        transport=httpx.MockTransport(handler),
    )


class TestSubmit:
    def test_posts_document_and_returns_job_id(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202, json={"job_id": "ext-1"})

        client = _make_client(handler)
        job_id = client.submit("ocr-documents/u1/a_cv.pdf", filename="cv.pdf", content_type="application/pdf")

        assert job_id == "ext-1"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/jobs"
        assert request.headers["Authorization"] == "Bearer token"
        body = request.read()
        assert b"%PDF-scan" in body
        assert b"ocr-documents/u1/a_cv.pdf" in body

    def test_http_error_raises_submission_error(self) -> None:
        client = _make_client(lambda request: httpx.Response(422, json={"error": "bad pdf"}))
        with pytest.raises(OcrSubmissionError, match="HTTP 422: bad pdf"):
            client.submit("k", filename="cv.pdf", content_type="application/pdf")

    def test_timeout_raises_submission_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(OcrSubmissionError, match="timed out"):
            _make_client(handler).submit("k", filename="cv.pdf", content_type="application/pdf")

    def test_connection_error_raises_submission_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(OcrSubmissionError, match="unreachable"):
            _make_client(handler).submit("k", filename="cv.pdf", content_type="application/pdf")

    def test_missing_job_id_raises_submission_error(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, json={}))
        with pytest.raises(OcrSubmissionError, match="no job id"):
            client.submit("k", filename="cv.pdf", content_type="application/pdf")

    def test_missing_blob_raises_submission_error(self) -> None:
        blob_store = MagicMock()
        blob_store.get.side_effect = BlobNotFoundError("gone")
        handler = MagicMock()
        client = _make_client(handler, blob_store)

        with pytest.raises(OcrSubmissionError, match="Could not read document"):
            client.submit("k", filename="cv.pdf", content_type="application/pdf")
        handler.assert_not_called()


class TestPoll:
    def test_in_progress(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, json={"status": "IN_PROGRESS"}))
        assert client.poll("ext-1").status is OcrPollStatus.IN_PROGRESS

    def test_failed_carries_error(self) -> None:
        client = _make_client(
            lambda request: httpx.Response(200, json={"status": "failed", "error": "unreadable"})
        )
        result = client.poll("ext-1")
        assert result.status is OcrPollStatus.FAILED
        assert result.error == "unreadable"

    def test_succeeded_joins_line_blocks_across_pages(self) -> None:
        pages = {
            None: {
                "status": "succeeded",
                "lines": [
                    {"type": "PAGE", "text": "ignored"},
                    {"type": "LINE", "text": "Jane Doe"},
                ],
                "next_token": "p2",
            },
            "p2": {
                "status": "succeeded",
                "lines": [{"type": "LINE", "text": "Engineer"}, "Berlin"],
                "next_token": None,
            },
        }

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/jobs/ext-1"
            return httpx.Response(200, json=pages[request.url.params.get("next_token")])

        result = _make_client(handler).poll("ext-1")

        assert result.status is OcrPollStatus.SUCCEEDED
        assert result.text == "Jane Doe\nEngineer\nBerlin"

    def test_server_error_is_retryable(self) -> None:
        client = _make_client(lambda request: httpx.Response(503))
        with pytest.raises(OcrPollError) as exc_info:
            client.poll("ext-1")
        assert exc_info.value.retryable is True

    def test_rate_limit_is_retryable(self) -> None:
        client = _make_client(lambda request: httpx.Response(429))
        with pytest.raises(OcrPollError) as exc_info:
            client.poll("ext-1")
        assert exc_info.value.retryable is True

    def test_not_found_is_not_retryable(self) -> None:
        client = _make_client(lambda request: httpx.Response(404, json={"error": "no such job"}))
        with pytest.raises(OcrPollError, match="no such job") as exc_info:
            client.poll("ext-1")
        assert exc_info.value.retryable is False

    def test_timeout_is_retryable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("slow", request=request)

        with pytest.raises(OcrPollError) as exc_info:
            _make_client(handler).poll("ext-1")
        assert exc_info.value.retryable is True

    def test_invalid_json_is_not_retryable(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(OcrPollError) as exc_info:
            client.poll("ext-1")
        assert exc_info.value.retryable is False

    def test_unknown_status_is_not_retryable(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, json={"status": "exploded"}))
        with pytest.raises(OcrPollError, match="Unknown OCR job status") as exc_info:
            client.poll("ext-1")
        assert exc_info.value.retryable is False


class TestAvailability:
    def test_available_with_base_url(self) -> None:
        client = _make_client(lambda request: httpx.Response(200))
        assert client.is_available() is True
        client.close()
