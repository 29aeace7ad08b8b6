import hashlib
import os
import re
import uuid
from pathlib import Path

from resume_ingest.logging.logger import Log
from resume_ingest.storage.base import BaseBlobStore
from resume_ingest.storage.exceptions import (
    BlobNotFoundError,
    BlobStoreError,
    InvalidContentKeyError,
)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str, default: str = "document.pdf") -> str:
    """Reduce a client supplied filename to a single safe path segment."""
    name = Path(filename.replace("\\", "/")).name if filename else ""
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or default


def content_key_for(owner_id: str, filename: str, data: bytes) -> str:
    """Build a content key: ocr-documents/{owner_id}/{sha256(data)}_{filename}

    The same owner storing the same bytes under the same name gets the same
    key, so repeated uploads map onto one OCR job.
    """
    owner_segment = safe_filename(str(owner_id), default="owner")
    digest = hashlib.sha256(data).hexdigest()
    return f"ocr-documents/{owner_segment}/{digest}_{safe_filename(filename)}"


class LocalBlobStore(BaseBlobStore):
    """Stores documents as files under a root directory."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def put(self, owner_id: str, data: bytes, filename: str, content_type: str) -> str:
        content_key = content_key_for(owner_id, filename, data)
        path = self._resolve_path(content_key)
        # Concurrent puts of the same key write identical bytes; readers only
        # ever see a complete file.
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise BlobStoreError(f"Failed to store {content_key}: {exc}") from exc
        Log.info(
            "Stored document",
            content_key=content_key,
            size_bytes=len(data),
            content_type=content_type,
        )
        return content_key

    def get(self, content_key: str) -> bytes:
        path = self._resolve_path(content_key)
        if not path.is_file():
            raise BlobNotFoundError(f"Blob not found: {content_key}")
        return path.read_bytes()

    def _resolve_path(self, content_key: str) -> Path:
        root = self._files_root.resolve()
        path = (root / content_key).resolve()
        if not path.is_relative_to(root) or path == root:
            raise InvalidContentKeyError(f"Content key escapes storage root: {content_key}")
        return path
