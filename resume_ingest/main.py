import argparse
import dataclasses
import json
import sys
from pathlib import Path

from resume_ingest.config.settings import Settings
from resume_ingest.database.connection import close_pool, init_pool
from resume_ingest.database.repositories.factory import JobStoreFactory
from resume_ingest.extraction.pipeline import build_pipeline
from resume_ingest.ingestion.facade import IngestionFacade
from resume_ingest.logging.logger import Log
from resume_ingest.ocr.exceptions import OcrJobNotFoundError
from resume_ingest.ocr.factory import OcrClientFactory
from resume_ingest.ocr.orchestrator import OcrJobOrchestrator
from resume_ingest.storage.local_blob_store import LocalBlobStore


def build_facade(settings: Settings) -> IngestionFacade:
    """Wire settings -> stores -> pipeline -> OCR -> facade.

    Opens the connection pool when jobs are kept in Postgres; the caller
    closes it with ``close_pool()``.
    """
    if settings.job_store.lower() == "postgres":
        init_pool(settings)

    blob_store = LocalBlobStore(Path(settings.files_root))
    orchestrator = OcrJobOrchestrator(
        job_store=JobStoreFactory.create(settings),
        blob_store=blob_store,
        ocr_client=OcrClientFactory.create(settings, blob_store),
        reuse_ttl_seconds=settings.ocr_reuse_ttl_seconds,
        stale_queued_seconds=settings.ocr_stale_queued_seconds,
    )
    return IngestionFacade(
        build_pipeline(settings),
        orchestrator,
        max_upload_bytes=settings.max_upload_bytes,
        ocr_enabled=settings.ocr_enabled,
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="resume-ingest")
    commands = parser.add_subparsers(dest="command", required=True)

    ingest = commands.add_parser("ingest", help="extract text from a resume file")
    ingest.add_argument("path", type=Path)
    ingest.add_argument("--owner", required=True)
    ingest.add_argument("--media-type", default="")

    status = commands.add_parser("status", help="check an OCR job")
    status.add_argument("job_id")
    status.add_argument("--owner", required=True)
    return parser


def _print(result: object) -> None:
    print(json.dumps(dataclasses.asdict(result), indent=2))  # type: ignore[call-overload]


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse command -> build dependencies -> run -> close."""
    args = _parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    facade = build_facade(settings)
    try:
        if args.command == "ingest":
            _print(
                facade.ingest(
                    args.path.read_bytes(),
                    args.media_type,
                    args.path.name,
                    args.owner,
                )
            )
        else:
            try:
                _print(facade.job_status(args.job_id, args.owner))
            except OcrJobNotFoundError as exc:
                Log.error(str(exc))
                return 1
    finally:
        facade.close()
        close_pool()
    return 0


if __name__ == "__main__":
    sys.exit(main())
