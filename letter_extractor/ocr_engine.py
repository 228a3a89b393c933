"""OCR engine wrapper around Tesseract"""
import logging
from typing import Optional

import pytesseract
from PIL import Image

from .config import OCR_LANGUAGES, TESSERACT_CMD

logger = logging.getLogger(__name__)


class TesseractEngine:
    """Recognizes text in a raster image with Tesseract"""

    def __init__(self, languages: str = OCR_LANGUAGES, tesseract_cmd: Optional[str] = TESSERACT_CMD):
        self.languages = languages
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
            logger.debug(f"Using Tesseract at: {tesseract_cmd}")

    def recognize(self, image: Image.Image, languages: Optional[str] = None) -> str:
        """
        Run OCR on one page image

        Args:
            image: Rendered page
            languages: Tesseract language hint, e.g. "ind+eng"

        Returns:
            Recognized text
        """
        return pytesseract.image_to_string(image, lang=languages or self.languages)

    def is_available(self) -> bool:
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError:
            logger.warning("Tesseract OCR is not installed or not in PATH")
            return False
        logger.info(f"Tesseract version: {version}")
        return True
