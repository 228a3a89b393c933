"""Scoring, selection and cleanup of field candidates"""
import re
from typing import List, Optional

from .models import FieldMatch

SPACE_BONUS = 5


class ScorerValidator:
    """Scores competing captures and cleans the winning value"""

    def __init__(self):
        self.noise_patterns = [
            (r'^[:\-\s]+', ''),  # Leading separator noise
            (r'[:\-\s]+$', ''),  # Trailing separator noise
            (r'\s+', ' '),
        ]

    def score_candidate(self, value: str) -> int:
        """Longer captures win, multi-word captures get a bonus"""
        value = value.strip()
        if not value:
            return 0
        return len(value) + (SPACE_BONUS if ' ' in value else 0)

    def clean_value(self, value: str) -> str:
        cleaned = value.strip()
        for pattern, replacement in self.noise_patterns:
            cleaned = re.sub(pattern, replacement, cleaned)
        return cleaned

    def select_best_candidate(self, candidates: List[FieldMatch]) -> Optional[FieldMatch]:
        """
        Pick the highest scoring candidate

        Returns:
            Best candidate, the earliest one on ties, or None
        """
        best = None
        best_score = 0
        for candidate in candidates:
            if candidate.score > best_score:
                best = candidate
                best_score = candidate.score
        return best
