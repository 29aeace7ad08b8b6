import pytest
from pydantic import ValidationError

from resume_ingest.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_pdf_engine_order(self) -> None:
        s = Settings()
        assert s.pdf_engine_order == ["pdfplumber", "pymupdf"]

    def test_default_min_text_chars(self) -> None:
        s = Settings()
        assert s.min_text_chars == 10

    def test_default_max_upload_is_ten_megabytes(self) -> None:
        s = Settings()
        assert s.max_upload_bytes == 10 * 1024 * 1024

    def test_default_ocr_reuse_ttl_is_seven_days(self) -> None:
        s = Settings()
        assert s.ocr_reuse_ttl_seconds == 7 * 24 * 60 * 60

    def test_default_stale_queued_threshold_is_five_minutes(self) -> None:
        s = Settings()
        assert s.ocr_stale_queued_seconds == 300


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"
        assert "host=db.example.com" in s.database_conninfo

    def test_pdf_engines_are_trimmed_and_lowercased(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PDF_ENGINES", " PyMuPDF , pdfplumber,")
        s = Settings()
        assert s.pdf_engine_order == ["pymupdf", "pdfplumber"]

    def test_loads_ocr_enabled_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_ENABLED", "false")
        s = Settings()
        assert s.ocr_enabled is False


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_negative_min_text_chars_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MIN_TEXT_CHARS", "-1")
        with pytest.raises(ValidationError):
            Settings()

    def test_zero_submit_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_SUBMIT_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_zero_reuse_ttl_is_allowed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_REUSE_TTL_SECONDS", "0")
        s = Settings()
        assert s.ocr_reuse_ttl_seconds == 0

    def test_negative_stale_queued_threshold_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_STALE_QUEUED_SECONDS", "-1")
        with pytest.raises(ValidationError):
            Settings()
