import logging
import sys


class _FieldsFormatter(logging.Formatter):
    """Appends the structured fields of a record as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = getattr(record, "fields", None)
        if not fields:
            return message
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{message} {rendered}"


class Log:
    """Centralized logging with structured format."""

    _logger: logging.Logger = logging.getLogger("resume_ingest")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                _FieldsFormatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **fields: object) -> None:
        cls._logger.info(message, extra={"fields": fields})

    @classmethod
    def error(cls, message: str, **fields: object) -> None:
        cls._logger.error(message, extra={"fields": fields})

    @classmethod
    def warning(cls, message: str, **fields: object) -> None:
        cls._logger.warning(message, extra={"fields": fields})

    @classmethod
    def debug(cls, message: str, **fields: object) -> None:
        cls._logger.debug(message, extra={"fields": fields})
