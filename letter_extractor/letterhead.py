"""Detection of the institutional letterhead (kop surat) block"""
import re
from typing import List

from .config import LETTERHEAD_SCAN_LIMIT
from .preprocessor import Preprocessor

LETTERHEAD_PATTERNS = [
    re.compile(r'PEMERINTAH', re.IGNORECASE),
    re.compile(r'DINAS', re.IGNORECASE),
    re.compile(r'BADAN', re.IGNORECASE),
    re.compile(r'KANTOR', re.IGNORECASE),
    re.compile(r'KEMENTERIAN', re.IGNORECASE),
    re.compile(r'Jalan|Jl\.', re.IGNORECASE),
    re.compile(r'Telepon|Telp|Faximile|Fax', re.IGNORECASE),
    re.compile(r'e-mail|email|website', re.IGNORECASE),
    re.compile(r'Kode\s+Pos', re.IGNORECASE),
]

_UPPERCASE_LINE = re.compile(r'[A-Z\s]+')


def is_letterhead_line(line: str) -> bool:
    """Keyword or contact marker, or a short all-caps heading"""
    if any(pattern.search(line) for pattern in LETTERHEAD_PATTERNS):
        return True
    return (
        len(line) > 10
        and _UPPERCASE_LINE.fullmatch(line) is not None
        and len(line.split(' ')) <= 6
    )


def find_letterhead_end(text: str, scan_limit: int = LETTERHEAD_SCAN_LIMIT) -> int:
    """
    Count the leading non-empty lines that belong to the letterhead

    Args:
        text: Normalized letter text
        scan_limit: Maximum number of non-empty lines inspected

    Returns:
        Offset in non-empty lines, between 0 and min(scan_limit, line count)
    """
    lines = _non_empty_lines(text)
    offset = 0
    for i in range(min(scan_limit, len(lines))):
        if is_letterhead_line(lines[i]):
            offset = i + 1
        else:
            break
    return offset


def content_after_letterhead(text: str, scan_limit: int = LETTERHEAD_SCAN_LIMIT) -> str:
    """Text following the letterhead, blank lines inside the content kept"""
    offset = find_letterhead_end(text, scan_limit)
    raw_lines = text.split('\n')
    seen = 0
    start = 0
    if offset:
        for i, line in enumerate(raw_lines):
            if line.strip():
                seen += 1
                if seen == offset:
                    start = i + 1
                    break
    return '\n'.join(line.strip() for line in raw_lines[start:]).strip()


def _non_empty_lines(text: str) -> List[str]:
    return Preprocessor().lines(text)
