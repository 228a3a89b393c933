"""Structured field extraction from scanned and digital official letters"""
from .errors import (
    FetchError,
    InsufficientTextError,
    InvalidInputError,
    LetterExtractionError,
)
from .extractor import LetterExtractor, PipelineState
from .models import ExtractedLetter, LetterSummary, PdfUpload
from .summary_extractor import SummaryExtractor

__version__ = "0.1.0"

__all__ = [
    "ExtractedLetter",
    "FetchError",
    "InsufficientTextError",
    "InvalidInputError",
    "LetterExtractionError",
    "LetterExtractor",
    "LetterSummary",
    "PdfUpload",
    "PipelineState",
    "SummaryExtractor",
]
