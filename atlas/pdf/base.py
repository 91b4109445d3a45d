from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for PDF text extraction used at ingestion."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Return the text of every page, one page per line block.

        Raises:
            PdfExtractionError: if the PDF cannot be parsed.
        """
