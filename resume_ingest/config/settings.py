from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "resume_ingest"
    db_username: str = "resume_ingest"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    job_store: str = "postgres"
    files_root: str = "/app/files"

    pdf_engines: str = "pdfplumber,pymupdf"
    min_text_chars: int = 10
    max_upload_bytes: int = 10 * 1024 * 1024

    ocr_enabled: bool = True
    ocr_provider: str = "http"
    ocr_api_base_url: str = "http://localhost:8090"
    ocr_api_key: str = ""
    ocr_submit_timeout_seconds: int = 30
    ocr_poll_timeout_seconds: int = 10
    ocr_reuse_ttl_seconds: int = 7 * 24 * 60 * 60
    # A queued job older than this lost its submission (process died mid-submit).
    ocr_stale_queued_seconds: int = 300

    @field_validator("min_text_chars", "ocr_reuse_ttl_seconds", "ocr_stale_queued_seconds")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    @field_validator("ocr_submit_timeout_seconds", "ocr_poll_timeout_seconds", "max_upload_bytes")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be > 0")
        return value

    @property
    def pdf_engine_order(self) -> list[str]:
        """Configured PDF engines in the order they are tried."""
        return [name.strip().lower() for name in self.pdf_engines.split(",") if name.strip()]

    @property
    def database_conninfo(self) -> str:
        return (
            f"host={self.db_host} "
            f"port={self.db_port} "
            f"dbname={self.db_database} "
            f"user={self.db_username} "
            f"password={self.db_password}"
        )
