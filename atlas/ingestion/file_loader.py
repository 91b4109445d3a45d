import mimetypes
from collections.abc import Iterable
from pathlib import Path

from atlas.documents.models import Document, Readable, Unreadable, new_document_id
from atlas.ingestion.exceptions import ReadError
from atlas.logging.logger import Log
from atlas.pdf.base import BasePdfExtractor
from atlas.pdf.exceptions import PdfExtractionError

PDF_MIME_TYPE = "application/pdf"
SUPPORTED_MIME_TYPES = frozenset(
    {PDF_MIME_TYPE, "text/csv", "text/html", "application/json", "text/plain"}
)


def guess_mime_type(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or ""


def is_supported(path: Path, mime_type: str) -> bool:
    return (
        mime_type in SUPPORTED_MIME_TYPES
        or mime_type.startswith("text/")
        or path.suffix.lower() == ".jsonl"
    )


class FileLoader:
    """Reads uploaded files into pending Documents."""

    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    def load_all(self, paths: Iterable[Path]) -> list[Document]:
        """Read every supported file.

        Hidden files, directories, empty files and unsupported types are
        skipped. A file that fails to read still yields a Document, with
        Unreadable content and the failure recorded as its error.
        """
        documents: list[Document] = []
        for path in paths:
            document = self.load(path)
            if document is not None:
                documents.append(document)
        return documents

    def load(self, path: Path) -> Document | None:
        if path.name.startswith(".") or path.is_dir():
            return None
        mime_type = guess_mime_type(path)
        try:
            if path.stat().st_size == 0:
                return None
            if not is_supported(path, mime_type):
                Log.debug(f"Skipping unsupported file {path.name} ({mime_type or 'unknown'})")
                return None
            text = self._read(path, mime_type)
        except (ReadError, OSError) as exc:
            Log.error(f"Error reading file {path.name}: {exc}")
            reason = str(exc)
            return Document(
                id=new_document_id(path.name),
                name=path.name,
                mime_type=mime_type,
                content=Unreadable(reason=reason),
                is_processed=True,
                error=reason,
            )
        return Document(
            id=new_document_id(path.name),
            name=path.name,
            mime_type=mime_type,
            content=Readable(text=text),
        )

    def _read(self, path: Path, mime_type: str) -> str:
        """Raises ReadError when the file cannot be turned into text."""
        try:
            raw_bytes = path.read_bytes()
        except OSError as exc:
            raise ReadError(f"{exc.strerror or exc}") from exc
        if mime_type == PDF_MIME_TYPE:
            try:
                return self._pdf_extractor.extract(raw_bytes)
            except PdfExtractionError as exc:
                raise ReadError(str(exc)) from exc
        return raw_bytes.decode("utf-8", errors="replace")
