"""Main extraction orchestrator"""
import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .body_segmenter import BodySegmenter
from .config import MAX_FILE_SIZE_BYTES, MIN_TOTAL_TEXT_LENGTH
from .errors import InsufficientTextError, InvalidInputError, InvalidStateTransition
from .fetcher import fetch_pdf_from_url
from .field_extractor import FieldExtractor
from .letterhead import content_after_letterhead
from .models import ExtractedLetter, PdfUpload
from .preprocessor import Preprocessor
from .signature_parser import SignatureParser
from .text_extractor import TextAcquirer, has_selectable_text

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]

MISSING_HEADER_WARNING = "No header fields detected, the letter format is probably non-standard"


def validate_upload(upload: PdfUpload, max_file_size: int = MAX_FILE_SIZE_BYTES):
    """Reject anything that is not a PDF within the size limit"""
    if "pdf" not in (upload.content_type or "").lower():
        raise InvalidInputError("File must be a PDF")
    if upload.size == 0:
        raise InvalidInputError("File is empty")
    if upload.size > max_file_size:
        raise InvalidInputError(
            f"File exceeds the maximum size of {max_file_size / (1024 * 1024):g} MB"
        )


class PipelineState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    ACQUIRING = "acquiring"
    NORMALIZING = "normalizing"
    EXTRACTING = "extracting"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


_RUNNING = (
    PipelineState.VALIDATING,
    PipelineState.ACQUIRING,
    PipelineState.NORMALIZING,
    PipelineState.EXTRACTING,
)

ALLOWED_TRANSITIONS = {
    PipelineState.IDLE: {PipelineState.VALIDATING},
    PipelineState.VALIDATING: {PipelineState.ACQUIRING},
    PipelineState.ACQUIRING: {PipelineState.NORMALIZING},
    PipelineState.NORMALIZING: {PipelineState.EXTRACTING},
    PipelineState.EXTRACTING: {PipelineState.DONE},
    PipelineState.DONE: set(),
    PipelineState.FAILED: set(),
    PipelineState.CANCELLED: set(),
}
for _state in _RUNNING:
    ALLOWED_TRANSITIONS[_state] |= {PipelineState.FAILED, PipelineState.CANCELLED}


class PipelineRun:
    """State and progress of a single extraction call"""

    def __init__(self, on_progress: Optional[ProgressCallback] = None):
        self.state = PipelineState.IDLE
        self.history: List[PipelineState] = [PipelineState.IDLE]
        self.progress: List[Tuple[int, str]] = []
        self.error: Optional[BaseException] = None
        self._on_progress = on_progress

    def advance(self, state: PipelineState):
        if state not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidStateTransition(f"Cannot move from {self.state.value} to {state.value}")
        self.state = state
        self.history.append(state)

    def report(self, percent: int, message: str):
        """Forward progress to the caller; callback failures never affect the run"""
        self.progress.append((percent, message))
        if self._on_progress is None:
            return
        try:
            self._on_progress(percent, message)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")

    def fail(self, error: BaseException):
        self.error = error
        if self.state in _RUNNING:
            self.advance(PipelineState.FAILED)
        self.report(0, f"Error: {error}")

    @property
    def finished(self) -> bool:
        return self.state in (PipelineState.DONE, PipelineState.FAILED, PipelineState.CANCELLED)


class LetterExtractor:
    """Main orchestrator: validate, acquire, normalize, then extract letter fields"""

    def __init__(self,
                 text_acquirer: Optional[TextAcquirer] = None,
                 preprocessor: Optional[Preprocessor] = None,
                 field_extractor: Optional[FieldExtractor] = None,
                 body_segmenter: Optional[BodySegmenter] = None,
                 signature_parser: Optional[SignatureParser] = None,
                 max_file_size: int = MAX_FILE_SIZE_BYTES,
                 min_total_text_length: int = MIN_TOTAL_TEXT_LENGTH,
                 require_scanned: bool = False):
        self.text_acquirer = text_acquirer or TextAcquirer()
        self.preprocessor = preprocessor or Preprocessor()
        self.field_extractor = field_extractor or FieldExtractor()
        self.body_segmenter = body_segmenter or BodySegmenter()
        self.signature_parser = signature_parser or SignatureParser()
        self.max_file_size = max_file_size
        self.min_total_text_length = min_total_text_length
        self.require_scanned = require_scanned
        # Run of the most recent call to extract
        self.last_run: Optional[PipelineRun] = None

    def validate(self, upload: PdfUpload):
        validate_upload(upload, self.max_file_size)

    async def extract(self,
                      upload: PdfUpload,
                      on_progress: Optional[ProgressCallback] = None) -> ExtractedLetter:
        """
        Main extraction method

        Args:
            upload: PDF file to process
            on_progress: Optional callback receiving (percent, message)

        Returns:
            ExtractedLetter with every recovered field

        Raises:
            InvalidInputError: wrong type, empty, oversized or unreadable file
            InsufficientTextError: too little text recovered
        """
        run = PipelineRun(on_progress)
        self.last_run = run
        try:
            # 1. Validate
            run.advance(PipelineState.VALIDATING)
            run.report(0, "Starting extraction...")
            self.validate(upload)
            if self.require_scanned and await asyncio.to_thread(
                    has_selectable_text, upload.content,
                    source_factory=self.text_acquirer.source_factory):
                raise InvalidInputError("PDF already contains selectable text and needs no media conversion")
            run.report(10, "File validated...")

            # 2. Acquire page texts
            run.advance(PipelineState.ACQUIRING)
            document = await self.text_acquirer.acquire_async(upload.content)
            if document.failed_pages:
                logger.warning(f"{upload.filename}: pages without text: {[i + 1 for i in document.failed_pages]}")
            run.report(70, "Text extraction finished, parsing letter...")

            # 3. Normalize
            run.advance(PipelineState.NORMALIZING)
            text = self.preprocessor.normalize_text(document.text)
            if len(text) < self.min_total_text_length:
                raise InsufficientTextError(
                    "Could not extract enough text from the PDF. "
                    "Make sure the file is not damaged or empty and the scan is legible."
                )

            # 4. Extract fields, body and signature
            run.advance(PipelineState.EXTRACTING)
            letter = self.parse_text(text)
            run.report(90, "Parsing finished, finalizing data...")

            if not letter.has_header_fields:
                logger.warning(f"{upload.filename}: {MISSING_HEADER_WARNING}")
                letter.warnings.append(MISSING_HEADER_WARNING)

            run.advance(PipelineState.DONE)
            run.report(100, "Done!")
            return letter

        except asyncio.CancelledError:
            logger.info(f"Extraction of {upload.filename} cancelled")
            if run.state in _RUNNING:
                run.advance(PipelineState.CANCELLED)
            raise
        except Exception as e:
            logger.error(f"Extraction of {upload.filename} failed: {e}")
            run.fail(e)
            raise

    def parse_text(self, text: str) -> ExtractedLetter:
        """Run normalization and parsing on already acquired text"""
        normalized = self.preprocessor.normalize_text(text)
        content = content_after_letterhead(normalized)

        matches = self.field_extractor.extract_matches(content)
        fields = self.field_extractor.values(matches)
        segments = self.body_segmenter.segment(content, matches)
        signature = self.signature_parser.parse(segments.signature_text)

        return ExtractedLetter(
            date=fields['date'],
            reference_number=fields['reference_number'],
            sensitivity=fields['sensitivity'],
            attachment=fields['attachment'],
            subject=fields['subject'],
            addressee=fields['addressee'],
            addressee_locality=fields['addressee_locality'],
            body=segments.paragraphs,
            closing=segments.closing,
            office_title=signature.office_title,
            signer_name=signature.name,
            signer_rank=signature.rank,
            signer_id=signature.employee_id,
        )

    async def extract_from_url(self,
                               url: str,
                               on_progress: Optional[ProgressCallback] = None,
                               client=None) -> ExtractedLetter:
        upload = await fetch_pdf_from_url(url, client=client)
        return await self.extract(upload, on_progress)

    def extract_sync(self,
                     upload: PdfUpload,
                     on_progress: Optional[ProgressCallback] = None) -> ExtractedLetter:
        """Blocking wrapper for callers without an event loop"""
        return asyncio.run(self.extract(upload, on_progress))
