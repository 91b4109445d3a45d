from atlas.config.settings import Settings
from atlas.pdf.base import BasePdfExtractor
from atlas.pdf.pdfplumber_adapter import PdfPlumberAdapter
from atlas.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Picks the PDF engine used when ingesting uploads."""

    ENGINES: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.strip().lower()
        engine_cls = cls.ENGINES.get(engine)
        if engine_cls is None:
            raise ValueError(
                f"Unsupported pdf_engine '{engine}'. Supported engines: {sorted(cls.ENGINES)}"
            )
        return engine_cls()
