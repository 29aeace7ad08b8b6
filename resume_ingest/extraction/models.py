from dataclasses import dataclass, field
from enum import Enum


class DocumentKind(str, Enum):
    PDF = "pdf"
    WORD = "word"
    TEXT = "text"


@dataclass(frozen=True)
class ExtractionAttempt:
    """Diagnostics for one strategy run. Never persisted."""

    strategy: str
    succeeded: bool
    char_count: int = 0
    elapsed_ms: float = 0.0
    error: str | None = None


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of the extraction pipeline.

    ``text`` is None when no strategy passed the quality gate; that is the
    insufficient-text outcome, not an error.
    """

    document_kind: DocumentKind
    text: str | None = None
    strategy_used: str | None = None
    attempts: list[ExtractionAttempt] = field(default_factory=list)
    is_likely_scanned: bool = False
    is_encrypted: bool = False

    @property
    def passed(self) -> bool:
        return self.text is not None
