import pymupdf

from atlas.pdf.base import BasePdfExtractor
from atlas.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Page-by-page text extraction with PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as pdf:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in pdf]
            return "\n".join(pages).strip()
        except Exception as exc:
            raise PdfExtractionError(f"PDF parse error: {exc}") from exc
