from intake.config.settings import Settings
from intake.extraction.base import BaseExtractionStrategy
from intake.extraction.example_ocr_adapter import ExampleOcrAdapter
from intake.extraction.image_ocr import ImageOcrStrategy
from intake.extraction.ocr_client_base import BaseOcrClient
from intake.extraction.office import DOCX_MIME_TYPE, OfficeDocumentStrategy
from intake.extraction.openai_ocr_adapter import OpenAIVisionOcrAdapter
from intake.extraction.pdfplumber_adapter import PdfPlumberStrategy
from intake.extraction.plain_text import PlainTextStrategy
from intake.extraction.pymupdf_adapter import PyMuPdfStrategy


class TextExtractorFactory:
    """Builds the MIME type → strategy registry from settings."""

    PDF_ENGINES: dict[str, type[BaseExtractionStrategy]] = {
        "pdfplumber": PdfPlumberStrategy,
        "pymupdf": PyMuPdfStrategy,
    }

    @classmethod
    def create_strategies(cls, settings: Settings) -> dict[str, BaseExtractionStrategy]:
        ocr = ImageOcrStrategy(
            cls.create_ocr_client(settings),
            timeout_seconds=settings.capability_timeout_seconds,
        )
        office = OfficeDocumentStrategy()
        return {
            "text/plain": PlainTextStrategy(),
            "application/pdf": cls.create_pdf_strategy(settings),
            "image/jpeg": ocr,
            "image/png": ocr,
            "image/tiff": ocr,
            DOCX_MIME_TYPE: office,
            "application/msword": office,
        }

    @classmethod
    def create_pdf_strategy(cls, settings: Settings) -> BaseExtractionStrategy:
        engine = settings.pdf_engine.lower()
        strategy_cls = cls.PDF_ENGINES.get(engine)
        if strategy_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ENGINES)}"
            )
        return strategy_cls()

    @classmethod
    def create_ocr_client(cls, settings: Settings) -> BaseOcrClient:
        provider = settings.ocr_provider.lower()
        if provider == "example":
            return ExampleOcrAdapter()
        if provider == "openai":
            return OpenAIVisionOcrAdapter(
                api_key=settings.ocr_openai_api_key,
                model=settings.ocr_openai_model_name,
                timeout_seconds=settings.ocr_openai_timeout_seconds,
            )
        raise ValueError(f"Unknown OCR provider '{provider}'. Choose from: ['example', 'openai']")
