from unittest.mock import MagicMock

import pytest

from resume_ingest.database.repositories.factory import JobStoreFactory
from resume_ingest.database.repositories.in_memory_job_store import InMemoryOcrJobStore
from resume_ingest.database.repositories.ocr_job_repository import PostgresOcrJobStore
from resume_ingest.ocr.example_client import ExampleOcrClient
from resume_ingest.ocr.factory import OcrClientFactory
from resume_ingest.ocr.http_client import HttpOcrClient


def _make_settings(**values: object) -> MagicMock:
    settings = MagicMock()
    settings.ocr_api_base_url = "http://ocr.test"
    settings.ocr_api_key = ""
    settings.ocr_submit_timeout_seconds = 30
    settings.ocr_poll_timeout_seconds = 10
    for name, value in values.items():
        setattr(settings, name, value)
    return settings


class TestJobStoreFactory:
    def test_creates_postgres_store(self) -> None:
        store = JobStoreFactory.create(_make_settings(job_store="postgres"))
        assert isinstance(store, PostgresOcrJobStore)

    def test_creates_memory_store_case_insensitive(self) -> None:
        store = JobStoreFactory.create(_make_settings(job_store="Memory"))
        assert isinstance(store, InMemoryOcrJobStore)

    def test_raises_for_unknown_store(self) -> None:
        with pytest.raises(ValueError, match="Unknown job store"):
            JobStoreFactory.create(_make_settings(job_store="redis"))


class TestOcrClientFactory:
    def test_creates_http_client(self) -> None:
        client = OcrClientFactory.create(_make_settings(ocr_provider="http"), MagicMock())
        assert isinstance(client, HttpOcrClient)
        client.close()

    def test_creates_example_client(self) -> None:
        client = OcrClientFactory.create(_make_settings(ocr_provider="EXAMPLE"), MagicMock())
        assert isinstance(client, ExampleOcrClient)

    def test_raises_for_unknown_provider(self) -> None:
        with pytest.raises(ValueError, match="Unknown OCR provider"):
            OcrClientFactory.create(_make_settings(ocr_provider="textract"), MagicMock())
