"""Exceptions raised by the letter extraction pipeline"""


class LetterExtractionError(Exception):
    """Base class for all pipeline errors"""


class InvalidInputError(LetterExtractionError):
    """The input is not a readable PDF within the accepted size"""


class InsufficientTextError(LetterExtractionError):
    """Too little text could be recovered from the document"""


class PageAcquisitionError(LetterExtractionError):
    """Rendering or OCR failed for a single page"""

    def __init__(self, page_index: int, reason: str):
        super().__init__(f"Page {page_index + 1}: {reason}")
        self.page_index = page_index
        self.reason = reason


class FetchError(LetterExtractionError):
    """A remote PDF could not be downloaded"""


class InvalidStateTransition(RuntimeError):
    """The pipeline state machine was driven out of order"""
