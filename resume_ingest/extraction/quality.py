"""Quality gate applied to the output of every extraction strategy."""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

MIN_TEXT_CHARS = 10

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class GateVerdict:
    accepted: bool
    text: str
    char_count: int
    reason: str | None = None


def normalize_text(text: str) -> str:
    """Strip null bytes and collapse every whitespace run to a single space."""
    return _WHITESPACE.sub(" ", text.replace("\x00", "")).strip()


def filename_stem(filename: str) -> str:
    """Filename without directories and without its last extension."""
    if not filename:
        return ""
    return PurePosixPath(filename.replace("\\", "/")).stem


def check_quality(text: str, filename: str = "", min_chars: int = MIN_TEXT_CHARS) -> GateVerdict:
    """Accept text longer than ``min_chars`` that is not just the filename stem.

    Some PDF writers emit the document title (usually the filename) as the only
    text layer of an image-only file, so an echo of the stem counts as no text.
    """
    normalized = normalize_text(text)
    cleaned = text.replace("\x00", "").strip()
    char_count = len(normalized)

    if char_count <= min_chars:
        return GateVerdict(
            accepted=False,
            text=cleaned,
            char_count=char_count,
            reason=f"text too short ({char_count} <= {min_chars} chars)",
        )

    stem = normalize_text(filename_stem(filename))
    if stem and normalized.casefold() == stem.casefold():
        return GateVerdict(
            accepted=False,
            text=cleaned,
            char_count=char_count,
            reason="text only repeats the filename",
        )

    return GateVerdict(accepted=True, text=cleaned, char_count=char_count)
