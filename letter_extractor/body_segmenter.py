"""Body segmentation: paragraphs, closing statement and signature block"""
import logging
import re
from typing import Dict, List, Optional, Tuple

from .config import MIN_PARAGRAPH_LENGTH
from .models import BodySegments, FieldMatch

logger = logging.getLogger(__name__)

BODY_START_FIELDS = ('subject', 'addressee', 'addressee_locality')

# Searched in order; the first hit marks where the signature block begins
SIGNATURE_PATTERNS = [
    re.compile(r'^[ \t]*(?:(?:a\.n\.?|atas\s+nama)\s+)?(?:(?:Plt|Plh|Pit|PIt)\.?\s+)?'
               r'(?:Kepala\s+Dinas|Kepala\s+Bidang|Kepala\s+Bagian|Sekretaris)\b',
               re.IGNORECASE | re.MULTILINE),
    re.compile(r"Wassalam(?:u'?alaikum)?", re.IGNORECASE),
    re.compile(r'Hormat\s+(?:kami|saya)', re.IGNORECASE),
]

CLOSING_PATTERN = re.compile(
    r"\b(demikian\s+(?:[\w/]+\s+){0,4}?(?:di|kami\s+)?sampaikan"
    r"|sekian\s+(?:disampaikan|yang\s+dapat\s+(?:kami\s+)?sampaikan)"
    r"|atas\s+perhatian(?:\s+(?:dan\s+)?kerja\s*sama)?.*?terima\s+kasih"
    r"|terima\s+kasih\s+atas\s+(?:perhatian|kerja\s*sama)"
    r"|hormat\s+kami|salam|wassalam|wassalamu'alaikum)\b",
    re.IGNORECASE,
)
WEAK_CLOSING_PATTERN = re.compile(r'\b(terima\s+kasih|hormat|salam)\b', re.IGNORECASE)

_INDENTED = re.compile(r'^(\t|  )')
_TERMINAL_PUNCTUATION = re.compile(r'[.,:;!?…]$')
_CAPITALIZED = re.compile(r'^[A-Z]')

SIGNATURE_CLOSING_LINES = 3


def find_body_start(matches: Dict[str, FieldMatch]) -> int:
    """Offset just past the last addressing field, 0 when none matched"""
    ends = [matches[name].end for name in BODY_START_FIELDS if name in matches]
    return max(ends) if ends else 0


def find_signature_start(text: str) -> int:
    """Line start of the first signature marker, -1 when there is none"""
    for pattern in SIGNATURE_PATTERNS:
        match = pattern.search(text)
        if match:
            return text.rfind('\n', 0, match.start()) + 1
    return -1


def split_signature(text: str) -> Tuple[str, str]:
    """Split into (body and closing, signature block)"""
    start = find_signature_start(text)
    if start == -1:
        return text.strip(), ''
    return text[:start].strip(), text[start:].strip()


def reconstruct_paragraphs(text: str, min_length: int = MIN_PARAGRAPH_LENGTH) -> List[str]:
    """
    Merge visually wrapped lines back into logical paragraphs

    A blank line closes a paragraph, an indented line opens one, and so does a
    capitalized line following a line that ends in punctuation. Paragraphs
    shorter than min_length are dropped as noise.
    """
    raw_lines = text.split('\n')
    paragraphs = []
    current = ''
    for i, line in enumerate(raw_lines):
        trimmed = line.strip()
        if not trimmed:
            if current:
                paragraphs.append(current)
                current = ''
            continue
        if _INDENTED.match(line):
            if current:
                paragraphs.append(current)
            current = trimmed
            continue
        if i > 0:
            previous = raw_lines[i - 1].strip()
            if previous and _TERMINAL_PUNCTUATION.search(previous) and _CAPITALIZED.match(trimmed):
                if current:
                    paragraphs.append(current)
                    current = ''
        current = f"{current} {trimmed}" if current else trimmed
    if current:
        paragraphs.append(current)
    return [paragraph for paragraph in paragraphs if len(paragraph) >= min_length]


def split_closing(paragraphs: List[str], signature_text: str) -> BodySegments:
    """Separate the closing statement from the body paragraphs"""
    for index in range(len(paragraphs) - 1, -1, -1):
        if CLOSING_PATTERN.search(paragraphs[index]):
            return BodySegments(
                paragraphs=paragraphs[:index],
                closing='\n\n'.join(paragraphs[index:]),
                signature_text=signature_text,
            )

    signature_lines = [line.strip() for line in signature_text.split('\n') if line.strip()]
    for index, line in enumerate(signature_lines[:SIGNATURE_CLOSING_LINES]):
        if CLOSING_PATTERN.search(line):
            return BodySegments(
                paragraphs=list(paragraphs),
                closing=line,
                signature_text='\n'.join(signature_lines[index + 1:]),
            )

    # Last resort heuristic: a trailing paragraph with a weak courtesy keyword
    if paragraphs and WEAK_CLOSING_PATTERN.search(paragraphs[-1]):
        logger.debug("Closing taken from last paragraph by weak keyword")
        return BodySegments(
            paragraphs=paragraphs[:-1],
            closing=paragraphs[-1],
            signature_text=signature_text,
        )
    return BodySegments(paragraphs=list(paragraphs), signature_text=signature_text)


class BodySegmenter:
    """Splits letter content into body paragraphs, closing and signature text"""

    def __init__(self, min_paragraph_length: int = MIN_PARAGRAPH_LENGTH):
        self.min_paragraph_length = min_paragraph_length

    def segment(self, content: str, matches: Optional[Dict[str, FieldMatch]] = None) -> BodySegments:
        """
        Segment the text following the addressing fields

        Args:
            content: Letter content after the letterhead
            matches: Winning field matches with offsets into content

        Returns:
            BodySegments with paragraphs, closing and signature text
        """
        body_start = find_body_start(matches or {})
        body_text = content[body_start:].strip() if body_start else content.strip()
        main_text, signature_text = split_signature(body_text)
        paragraphs = reconstruct_paragraphs(main_text, self.min_paragraph_length)
        segments = split_closing(paragraphs, signature_text)
        logger.debug(
            "Segmented body into %d paragraph(s), closing=%s, signature lines=%d",
            len(segments.paragraphs), bool(segments.closing),
            len([line for line in segments.signature_text.split('\n') if line.strip()]),
        )
        return segments
