"""Positional parsing of the signature block (jabatan, nama, pangkat, NIP)"""
import re
from typing import List, Optional

from .models import SignatureBlock

EMPLOYEE_ID_LINE = re.compile(r'NIP\.?\s*[:.]?\s*\d{8,20}', re.IGNORECASE)
DIGIT_RUN = re.compile(r'\d{8,20}')

RANK_VOCABULARY = re.compile(
    r'\b(pangkat|golongan|penata|pembina|pengatur|juru|iv|iii|ii|i)\b|\b[IV]{1,3}/[a-e]\b',
    re.IGNORECASE,
)
RANK_LABEL_PREFIX = re.compile(r'^(?:Pangkat|Golongan|:|\s)+', re.IGNORECASE)

ROLE_VOCABULARY = re.compile(
    r'\b(plt|pit|pih|plh|kepala|sekretaris|kabid|bagian|dinas|unit|bidang)\b',
    re.IGNORECASE,
)
INSTITUTION_VOCABULARY = re.compile(
    r'provinsi|kabupaten|kota|dinas|bidang|bagian|sekretariat|sumatera|palembang|pusat|daerah',
    re.IGNORECASE,
)

# Known OCR misreadings of the acting-capacity markers
TITLE_CORRECTIONS = [
    (re.compile(r'\bPit\b', re.IGNORECASE), 'Plt'),
    (re.compile(r'\bPLT\b'), 'Plt'),
    (re.compile(r'\bPih\b', re.IGNORECASE), 'Plh'),
]

NAME_LINE = re.compile(r"^[A-Z][A-Z\s.,'-]+$")
NAME_MIN_LENGTH = 4
NAME_MAX_LENGTH = 60


class SignatureParser:
    """Infers office title, name, rank and employee ID by line position"""

    def parse(self, text: str) -> SignatureBlock:
        block = SignatureBlock()
        lines = [line.strip() for line in re.split(r'[\n\r]', text or '') if line.strip()]
        if not lines:
            return block

        id_index = self._find_id_line(lines)
        if id_index is not None:
            block.employee_id = DIGIT_RUN.search(lines[id_index]).group(0)
            if id_index > 0 and RANK_VOCABULARY.search(lines[id_index - 1]):
                block.rank = RANK_LABEL_PREFIX.sub('', lines[id_index - 1]).strip()
            name_index = id_index - 2 if block.rank else id_index - 1
            if name_index >= 0:
                block.name = lines[name_index]

        block.office_title = self._office_title(lines)

        if not block.name:
            block.name = self._fallback_name(lines, block.office_title)
        return block

    @staticmethod
    def _find_id_line(lines: List[str]) -> Optional[int]:
        for pattern in (EMPLOYEE_ID_LINE, DIGIT_RUN):
            for index, line in enumerate(lines):
                if pattern.search(line):
                    return index
        return None

    @staticmethod
    def _office_title(lines: List[str]) -> str:
        for index, line in enumerate(lines):
            if not ROLE_VOCABULARY.search(line):
                continue
            title = line
            for pattern, replacement in TITLE_CORRECTIONS:
                title = pattern.sub(replacement, title)
            next_line = lines[index + 1] if index + 1 < len(lines) else ''
            if next_line and INSTITUTION_VOCABULARY.search(next_line) and not DIGIT_RUN.search(next_line):
                title = re.sub(r'\s{2,}', ' ', f"{title} {next_line}").strip()
            return title
        return ''

    @staticmethod
    def _fallback_name(lines: List[str], office_title: str) -> str:
        for line in lines:
            if line in office_title:
                continue
            if NAME_LINE.match(line) and NAME_MIN_LENGTH <= len(line) <= NAME_MAX_LENGTH:
                return line
        return ''


def parse_signature(text: str) -> SignatureBlock:
    return SignatureParser().parse(text)
