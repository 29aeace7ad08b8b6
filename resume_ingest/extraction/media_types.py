from pathlib import PurePosixPath

from resume_ingest.extraction.exceptions import UnsupportedMediaTypeError
from resume_ingest.extraction.models import DocumentKind

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MSWORD = "application/msword"
PLAIN_TEXT = "text/plain"
OCTET_STREAM = "application/octet-stream"

EXTENSION_MEDIA_TYPES: dict[str, str] = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".doc": MSWORD,
    ".txt": PLAIN_TEXT,
    ".md": "text/markdown",
}


def normalize_media_type(media_type: str | None) -> str:
    """Lower-case a media type and drop its parameters (e.g. charset)."""
    if not media_type:
        return ""
    return media_type.split(";", 1)[0].strip().lower()


def resolve_media_type(media_type: str | None, filename: str = "") -> str:
    """Use the declared type, falling back to the extension for generic uploads."""
    declared = normalize_media_type(media_type)
    if declared and declared != OCTET_STREAM:
        return declared
    suffix = PurePosixPath(filename.replace("\\", "/")).suffix.lower() if filename else ""
    return EXTENSION_MEDIA_TYPES.get(suffix, declared)


def document_kind(media_type: str | None, filename: str = "") -> DocumentKind:
    """Map an upload to the strategy family that handles it.

    Raises:
        UnsupportedMediaTypeError: for any type outside PDF, Word and text.
    """
    resolved = resolve_media_type(media_type, filename)
    if resolved == PDF:
        return DocumentKind.PDF
    if resolved in (DOCX, MSWORD):
        return DocumentKind.WORD
    if resolved.startswith("text/"):
        return DocumentKind.TEXT
    raise UnsupportedMediaTypeError(resolved or (media_type or ""))
