"""Text acquisition from PDF: embedded text first, OCR for scan-only pages"""
import asyncio
import io
import logging
import re
from typing import Callable, Optional

import fitz  # PyMuPDF
import pdfplumber
from PIL import Image

from .config import (
    DIGITAL_PDF_MIN_CHARS,
    DIGITAL_PDF_PAGES_CHECKED,
    MIN_EMBEDDED_TEXT_LENGTH,
    OCR_LANGUAGES,
    OCR_RENDER_SCALE,
)
from .errors import InvalidInputError, PageAcquisitionError
from .models import AcquiredDocument, RawPage

logger = logging.getLogger(__name__)


class PdfPageSource:
    """Per-page access to embedded text and rasterized images of a PDF"""

    def __init__(self, pdf_bytes: bytes):
        self._pdf_bytes = pdf_bytes
        self._plumber = None
        try:
            self.doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        except Exception as e:
            raise InvalidInputError(f"Unreadable PDF file: {e}") from e
        if self.doc.needs_pass:
            self.doc.close()
            raise InvalidInputError("PDF file is password protected")

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    def embedded_text(self, index: int) -> str:
        """Embedded text of one page, read with PyMuPDF and pdfplumber as fallback"""
        try:
            return self.doc[index].get_text("text")
        except Exception as e:
            logger.warning(f"PyMuPDF could not read page {index + 1}, trying pdfplumber: {e}")
            return self._extract_pdfplumber(index)

    def _extract_pdfplumber(self, index: int) -> str:
        if self._plumber is None:
            self._plumber = pdfplumber.open(io.BytesIO(self._pdf_bytes))
        return self._plumber.pages[index].extract_text() or ""

    def render(self, index: int, scale: float) -> Image.Image:
        """Rasterize one page at the given zoom factor"""
        pix = self.doc[index].get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
        image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
        pix = None  # drop the pixmap buffer before OCR runs
        return image

    def close(self):
        if self._plumber is not None:
            self._plumber.close()
            self._plumber = None
        self.doc.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class TextAcquirer:
    """Produces one text per page, falling back to OCR when embedded text is too short"""

    def __init__(self,
                 ocr_engine=None,
                 min_text_length: int = MIN_EMBEDDED_TEXT_LENGTH,
                 render_scale: float = OCR_RENDER_SCALE,
                 languages: str = OCR_LANGUAGES,
                 source_factory: Callable[[bytes], PdfPageSource] = PdfPageSource):
        self.ocr_engine = ocr_engine
        self.min_text_length = min_text_length
        self.render_scale = render_scale
        self.languages = languages
        self.source_factory = source_factory

    def _engine(self):
        if self.ocr_engine is None:
            from .ocr_engine import TesseractEngine
            self.ocr_engine = TesseractEngine(languages=self.languages)
        return self.ocr_engine

    def open(self, pdf_bytes: bytes) -> PdfPageSource:
        return self.source_factory(pdf_bytes)

    def acquire_page(self, source: PdfPageSource, index: int) -> RawPage:
        """
        Text of a single page

        Pages whose embedded text is shorter than min_text_length are rendered
        and recognized instead. A failed render or OCR yields an empty page.
        """
        try:
            embedded = source.embedded_text(index) or ""
        except Exception as e:
            logger.warning(f"Page {index + 1}: embedded text unavailable: {e}")
            embedded = ""

        if len(embedded.strip()) >= self.min_text_length:
            logger.info(f"Page {index + 1}: using embedded text")
            return RawPage(index=index, embedded_text=embedded, text=embedded, source="embedded")

        logger.info(f"Page {index + 1}: embedded text insufficient ({len(embedded.strip())} chars), using OCR")
        try:
            text = self._ocr_page(source, index)
        except PageAcquisitionError as e:
            logger.warning(str(e))
            return RawPage(index=index, embedded_text=embedded, text="", source="failed")
        return RawPage(index=index, embedded_text=embedded, text=text or "", source="ocr")

    def _ocr_page(self, source: PdfPageSource, index: int) -> str:
        try:
            image = source.render(index, self.render_scale)
        except Exception as e:
            raise PageAcquisitionError(index, f"render failed: {e}") from e
        try:
            return self._engine().recognize(image, self.languages)
        except Exception as e:
            raise PageAcquisitionError(index, f"OCR failed: {e}") from e
        finally:
            image.close()

    def acquire(self, pdf_bytes: bytes) -> AcquiredDocument:
        """Acquire every page in order"""
        with self.open(pdf_bytes) as source:
            pages = tuple(self.acquire_page(source, index) for index in range(source.page_count))
        return AcquiredDocument(pages=pages)

    async def acquire_async(self, pdf_bytes: bytes) -> AcquiredDocument:
        """Acquire every page in order, awaiting each page as its own unit of work"""
        source = await asyncio.to_thread(self.open, pdf_bytes)
        try:
            pages = []
            for index in range(source.page_count):
                page_task = asyncio.ensure_future(asyncio.to_thread(self.acquire_page, source, index))
                try:
                    pages.append(await asyncio.shield(page_task))
                except asyncio.CancelledError:
                    # Close only after the worker thread has released the document
                    await asyncio.wait([page_task])
                    raise
        finally:
            source.close()
        return AcquiredDocument(pages=tuple(pages))


def has_selectable_text(pdf_bytes: bytes,
                        pages_checked: int = DIGITAL_PDF_PAGES_CHECKED,
                        min_chars: int = DIGITAL_PDF_MIN_CHARS,
                        source_factory: Optional[Callable[[bytes], PdfPageSource]] = None) -> bool:
    """True when one of the first pages already carries embedded text"""
    with (source_factory or PdfPageSource)(pdf_bytes) as source:
        for index in range(min(pages_checked, source.page_count)):
            text = re.sub(r'\s', '', source.embedded_text(index) or '')
            if len(text) > min_chars:
                return True
    return False
