"""Text preprocessing: cleanup of OCR and encoding noise"""
import re
from typing import List, Tuple


class Preprocessor:
    """Normalizes acquired text before any field matching"""

    def __init__(self):
        self.character_replacements = [
            ('|', 'I'),  # OCR reads capital I as a vertical bar
            ('“', '"'), ('”', '"'), ('„', '"'),
            ('‘', "'"), ('’', "'"),
            ('–', '-'), ('—', '-'),
        ]
        self.normalization_patterns: List[Tuple[str, str]] = [
            (r'\r\n?', '\n'),
            (r'[^\S\n]+', ' '),  # Horizontal whitespace runs to a single space
            (r'\n ', '\n'),
            (r' \n', '\n'),
            (r'\n{3,}', '\n\n'),  # At most one blank line
            (r'(?<=\w)-\s*\n\s*(?=\w)', ''),  # Rejoin hyphen-broken words
        ]

    def normalize_text(self, text: str) -> str:
        """Clean line endings, misread characters, spacing and broken words"""
        if not text:
            return ""
        normalized = text
        for old, new in self.character_replacements:
            normalized = normalized.replace(old, new)
        for pattern, replacement in self.normalization_patterns:
            normalized = re.sub(pattern, replacement, normalized)
        return normalized.strip()

    def lines(self, text: str) -> List[str]:
        """Non-empty trimmed lines"""
        return [line.strip() for line in text.split('\n') if line.strip()]


def normalize_text(text: str) -> str:
    return Preprocessor().normalize_text(text)
