"""Reduced extraction of subject, letter date and classification code"""
import asyncio
import logging
import re
from typing import Optional

from .cache import ExtractionCache
from .candidate_generator import MONTH_PATTERN
from .config import MAX_FILE_SIZE_BYTES
from .extractor import validate_upload
from .field_extractor import to_iso_date
from .models import LetterSummary, PdfUpload
from .preprocessor import Preprocessor
from .text_extractor import TextAcquirer

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(
    rf'(?:\w+),\s+(?P<day>\d{{1,2}})\s+(?P<month>{MONTH_PATTERN})\s+(?P<year>\d{{4}})',
    re.IGNORECASE,
)
# Old style codes like 045.4 or 000.1.1.1 with optional slash parts, or 4/xxx/2025
CLASSIFICATION_PATTERN = re.compile(
    r'Nomor\s*:\s*((?:\d{1,3}(?:\.\d{1,3})+)(?:/[\w.-]+)*|\d+(?:/[\w.-]+)+)(?=\s*(?:\n|Sifat|$))',
    re.IGNORECASE,
)
REFERENCE_LINE_PATTERN = re.compile(r'Nomor\s*:\s*([^\n]+)', re.IGNORECASE)
SLASHED_CODE_PATTERN = re.compile(r'\d+(?:/[\w.-]+)+')
SUBJECT_PATTERN = re.compile(
    r'(?:Hal|Perihal)\s*:\s*([^\n]+?)'
    r'(?=\s*\n|\s*Kepada Yth\.|\s*Nomor\s*:|\s*Lampiran\s*:|\s*Sifat\s*:|$)',
    re.IGNORECASE,
)


def extract_classification_code(text: str) -> str:
    """Reference number prefix before its first slash, e.g. 045.4 from 045.4/123/2024"""
    match = CLASSIFICATION_PATTERN.search(text)
    if match:
        raw_code = re.sub(r'\s+', '', match.group(1))
    else:
        line_match = REFERENCE_LINE_PATTERN.search(text)
        if not line_match:
            return ''
        value = line_match.group(1).strip()
        sifat_index = value.find('Sifat')
        if sifat_index > 0:
            value = value[:sifat_index].strip()
        slashed = SLASHED_CODE_PATTERN.search(value)
        raw_code = re.sub(r'\s+', '', slashed.group(0) if slashed else value)
    return raw_code.split('/', 1)[0].strip()


def extract_subject(text: str) -> str:
    match = SUBJECT_PATTERN.search(text)
    if not match:
        return ''
    return re.sub(r'\.+$', '', match.group(1).strip()).strip()


class SummaryExtractor:
    """Two-field extractor sharing acquisition and normalization with the full pipeline"""

    def __init__(self,
                 text_acquirer: Optional[TextAcquirer] = None,
                 preprocessor: Optional[Preprocessor] = None,
                 cache: Optional[ExtractionCache] = None,
                 max_file_size: int = MAX_FILE_SIZE_BYTES):
        self.text_acquirer = text_acquirer or TextAcquirer()
        self.preprocessor = preprocessor or Preprocessor()
        self.cache = cache if cache is not None else ExtractionCache()
        self.max_file_size = max_file_size

    def parse_text(self, text: str) -> LetterSummary:
        normalized = self.preprocessor.normalize_text(text)

        document_date = ''
        formatted_date = ''
        date_match = DATE_PATTERN.search(normalized)
        if date_match:
            day, month, year = date_match.group('day'), date_match.group('month'), date_match.group('year')
            document_date = to_iso_date(day, month, year)
            formatted_date = f"{day} {month} {year}"

        return LetterSummary(
            classification_code=extract_classification_code(normalized),
            subject=extract_subject(normalized),
            document_date=document_date,
            suggested_start_date=document_date,
            formatted_date=formatted_date,
        )

    async def extract(self, upload: PdfUpload) -> LetterSummary:
        """
        Subject and date of an uploaded letter, served from cache when seen before

        Args:
            upload: PDF file to process

        Returns:
            LetterSummary, empty when no text could be recovered
        """
        key = self.cache.key_for(upload)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Using cached extraction for {upload.filename}")
            return cached

        validate_upload(upload, self.max_file_size)
        document = await self.text_acquirer.acquire_async(upload.content)
        text = self.preprocessor.normalize_text(document.text)
        if not text:
            logger.warning(f"No text detected in {upload.filename}")
            return LetterSummary()

        summary = self.parse_text(text)
        logger.debug(f"Summary for {upload.filename}: {summary}")
        return self.cache.put_if_absent(key, summary)

    def extract_sync(self, upload: PdfUpload) -> LetterSummary:
        return asyncio.run(self.extract(upload))
