import uuid
from dataclasses import dataclass, field
from enum import StrEnum

READ_ERROR_PREFIX = "Error reading file:"


class Category(StrEnum):
    """The fixed 8-item rubric plus the fallback label."""

    STATUTE_CITATION = "Statute + Citation"
    DOCTRINE = "Doctrine"
    SCHOLARLY_REFERENCE = "Literary/Scholarly Reference"
    OPINIONS = "Court/Judge/Legislative Opinions"
    TEMPLATES = "Templates"
    PHILOSOPHY = "Philosophy"
    PSYCHOLOGY = "Psychology"
    CASE_LAW_REFERENCE = "Case Law Reference"
    UNCATEGORIZED = "Uncategorized"

    @classmethod
    def rubric(cls) -> tuple["Category", ...]:
        return tuple(c for c in cls if c is not cls.UNCATEGORIZED)

    @classmethod
    def coerce(cls, value: object) -> "Category":
        """Map a loosely typed label onto the rubric, else Uncategorized."""
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        return cls.UNCATEGORIZED


class Relevance(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def coerce(cls, value: object) -> "Relevance":
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        return cls.MEDIUM


class ReviewStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"


@dataclass(frozen=True)
class Readable:
    """Extracted document text ready for analysis."""

    text: str

    def is_empty(self) -> bool:
        return len(self.text) == 0


@dataclass(frozen=True)
class Unreadable:
    """Content that could not be extracted at ingestion."""

    reason: str

    @property
    def text(self) -> str:
        return f"{READ_ERROR_PREFIX} {self.reason}"

    def is_empty(self) -> bool:
        return False


DocumentContent = Readable | Unreadable


def content_from_text(text: str) -> DocumentContent:
    """Build a content variant from a raw string, honouring the read-error marker."""
    if text.startswith(READ_ERROR_PREFIX):
        return Unreadable(reason=text[len(READ_ERROR_PREFIX):].strip())
    return Readable(text=text)


@dataclass(frozen=True)
class GroundingSource:
    title: str
    url: str


@dataclass(frozen=True)
class Snippet:
    """One extracted, categorized fact tied to its source document."""

    id: str
    source_doc_id: str
    source_doc_name: str
    headline: str
    category: Category
    content: str
    relevance: Relevance
    legal_citation: str | None = None
    status: ReviewStatus = ReviewStatus.PENDING


@dataclass(frozen=True)
class Document:
    """An uploaded document and the snippets extracted from it.

    Instances are immutable; every processing transition produces a new one.
    """

    id: str
    name: str
    content: DocumentContent
    mime_type: str = ""
    snippets: tuple[Snippet, ...] = field(default_factory=tuple)
    is_processed: bool = False
    error: str | None = None
    grounding_sources: tuple[GroundingSource, ...] | None = None

    @property
    def is_readable(self) -> bool:
        return isinstance(self.content, Readable)


class ProcessingStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"

    @classmethod
    def of(cls, document: Document) -> "ProcessingStatus":
        """Derive the status of a document as loaded from the store."""
        if not document.is_processed:
            return cls.PENDING
        return cls.ERROR if document.error else cls.DONE


def new_document_id(name: str) -> str:
    """Build a fresh identifier; re-uploading the same file never reuses one."""
    return f"{name}-{uuid.uuid4().hex[:12]}"
