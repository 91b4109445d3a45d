import pytest

from atlas.pdf.exceptions import PdfExtractionError
from atlas.pdf.pdfplumber_adapter import PdfPlumberAdapter
from atlas.pdf.pymupdf_adapter import PyMuPdfAdapter


class TestPdfPlumberAdapter:
    def test_extract_returns_text(self, sample_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().extract(sample_pdf_bytes)
        assert "42 U.S.C. 1983" in result

    def test_extract_multi_page_in_order(self, multi_page_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().extract(multi_page_pdf_bytes)
        assert result.index("Page one holding") < result.index("Page two dissent")

    def test_extract_empty_pdf_returns_empty_string(self, empty_pdf_bytes: bytes) -> None:
        assert PdfPlumberAdapter().extract(empty_pdf_bytes) == ""

    def test_extract_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(PdfExtractionError, match="PDF parse error"):
            PdfPlumberAdapter().extract(b"not a pdf")


class TestPyMuPdfAdapter:
    def test_extract_multi_page_in_order(self, multi_page_pdf_bytes: bytes) -> None:
        result = PyMuPdfAdapter().extract(multi_page_pdf_bytes)
        assert result.index("Page one holding") < result.index("Page two dissent")

    def test_extract_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(PdfExtractionError):
            PyMuPdfAdapter().extract(b"not a pdf")
