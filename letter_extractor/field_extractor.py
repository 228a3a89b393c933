"""Header field extraction: best candidate per field plus date formatting"""
import logging
from typing import Dict, Optional, Sequence

from .candidate_generator import FIELD_ORDER, INDONESIAN_MONTHS, CandidateGenerator
from .models import FieldMatch
from .scorer_validator import ScorerValidator

logger = logging.getLogger(__name__)


class FieldExtractor:
    """Picks the winning capture for every header field of a letter"""

    def __init__(self, cities: Optional[Sequence[str]] = None):
        self.candidate_generator = CandidateGenerator(cities)
        self.scorer_validator = ScorerValidator()

    def extract_matches(self, text: str) -> Dict[str, FieldMatch]:
        """Winning match per field; fields without a match are left out"""
        candidates = self.candidate_generator.generate_candidates(text)
        matches = {}
        for field_name in FIELD_ORDER:
            best = self.scorer_validator.select_best_candidate(candidates.get(field_name, []))
            if best is not None:
                matches[field_name] = best
        logger.debug("Matched fields: %s", sorted(matches))
        return matches

    def extract(self, text: str) -> Dict[str, str]:
        """
        Extract every header field as a cleaned string

        Args:
            text: Letter content after the letterhead

        Returns:
            Dictionary with every field name; missing fields map to ""
        """
        return self.values(self.extract_matches(text))

    def values(self, matches: Dict[str, FieldMatch]) -> Dict[str, str]:
        """Cleaned string per field from the winning matches"""
        values = {field_name: '' for field_name in FIELD_ORDER}
        for field_name, match in matches.items():
            values[field_name] = match.value
        if 'date' in matches:
            values['date'] = format_date(matches['date'])
        return values


def format_date(match: FieldMatch) -> str:
    """Written date, re-prefixed with the city when one was matched"""
    if not match.groups:
        return match.value
    city, day, month, year = match.groups
    if month and not month.isdigit():
        written = f"{day} {month} {year}"
        return f"{city}, {written}" if city else written
    return match.value


def to_iso_date(day: str, month: str, year: str) -> str:
    """ISO date from a day, an Indonesian month name or number and a year"""
    if month.isdigit():
        month_number = int(month)
    else:
        month_number = INDONESIAN_MONTHS.get(month.lower(), 0)
    if not 1 <= month_number <= 12:
        return ''
    return f"{int(year):04d}-{month_number:02d}-{int(day):02d}"
