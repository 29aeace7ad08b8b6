from resume_ingest.config.settings import Settings
from resume_ingest.database.repositories.base import BaseOcrJobStore
from resume_ingest.database.repositories.in_memory_job_store import InMemoryOcrJobStore
from resume_ingest.database.repositories.ocr_job_repository import PostgresOcrJobStore


class JobStoreFactory:
    """Creates the configured OCR job store."""

    STORES: dict[str, type[BaseOcrJobStore]] = {
        "postgres": PostgresOcrJobStore,
        "memory": InMemoryOcrJobStore,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrJobStore:
        name = settings.job_store.lower()
        store_cls = cls.STORES.get(name)
        if store_cls is None:
            raise ValueError(
                f"Unknown job store '{name}'. Choose from: {list(cls.STORES)}"
            )
        return store_cls()
