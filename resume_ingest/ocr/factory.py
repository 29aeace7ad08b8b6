from resume_ingest.config.settings import Settings
from resume_ingest.ocr.client_base import BaseOcrClient
from resume_ingest.ocr.example_client import ExampleOcrClient
from resume_ingest.ocr.http_client import HttpOcrClient
from resume_ingest.storage.base import BaseBlobStore


class OcrClientFactory:
    """Creates the configured OCR service client."""

    PROVIDERS = ("http", "example")

    @classmethod
    def create(cls, settings: Settings, blob_store: BaseBlobStore) -> BaseOcrClient:
        provider = settings.ocr_provider.lower()
        if provider == "example":
            return ExampleOcrClient()
        if provider == "http":
            return HttpOcrClient(
                base_url=settings.ocr_api_base_url,
                api_key=settings.ocr_api_key,
                blob_store=blob_store,
                submit_timeout_seconds=settings.ocr_submit_timeout_seconds,
                poll_timeout_seconds=settings.ocr_poll_timeout_seconds,
            )
        raise ValueError(
            f"Unknown OCR provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
