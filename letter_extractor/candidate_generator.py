"""Candidate generation: competing regex rule families per letter field"""
import re
from typing import Dict, List, Optional, Sequence

from .config import KNOWN_CITIES
from .models import FieldMatch
from .scorer_validator import ScorerValidator

INDONESIAN_MONTHS = {
    'januari': 1, 'februari': 2, 'maret': 3, 'april': 4, 'mei': 5, 'juni': 6,
    'juli': 7, 'agustus': 8, 'september': 9, 'oktober': 10, 'november': 11, 'desember': 12,
}
MONTH_PATTERN = '|'.join(name.capitalize() for name in INDONESIAN_MONTHS)

# Lookahead closing a single-line value: end of line, or the next header label on the same line
_END = r'(?=\s*(?:\n|$){labels})'

FIELD_ORDER = (
    'date',
    'reference_number',
    'sensitivity',
    'attachment',
    'subject',
    'addressee',
    'addressee_locality',
)


def _until(labels: Sequence[str]) -> str:
    if not labels:
        return _END.format(labels='')
    return _END.format(labels=r'|\s+(?:' + '|'.join(labels) + r')\b')


def build_rule_families(cities: Sequence[str] = KNOWN_CITIES) -> Dict[str, List[re.Pattern]]:
    """Ordered rule families; earlier rules win ties"""
    city_pattern = '|'.join(re.escape(city) for city in cities) or r'(?!x)x'
    flags = re.IGNORECASE
    line_flags = re.IGNORECASE | re.MULTILINE

    return {
        'date': [
            re.compile(
                rf'(?P<city>\b(?:{city_pattern})),?\s*'
                rf'(?P<value>(?P<day>\b\d{{1,2}})\s+(?P<month>{MONTH_PATTERN})\s+(?P<year>\d{{4}}))',
                flags),
            re.compile(
                rf'(?P<value>(?P<day>\b\d{{1,2}})\s+(?P<month>{MONTH_PATTERN})\s+(?P<year>\d{{4}}))',
                flags),
            re.compile(
                r'(?P<value>(?P<day>\b\d{1,2})[-/](?P<month>\d{1,2})[-/](?P<year>\d{4}))\b'),
        ],
        'reference_number': [
            re.compile(r'\bNomor\s*[:=]?\s*(?P<value>[^\n]+?)'
                       + _until(['Sifat', 'Lampiran', 'Hal', 'Perihal']), flags),
            re.compile(r'\bNo\.\s*[:=]?\s*(?P<value>[^\n]+?)'
                       + _until(['Sifat', 'Lampiran', 'Hal', 'Perihal']), flags),
            re.compile(r'\bNumber\s*[:=]?\s*(?P<value>[^\n]+?)'
                       + _until(['Sifat', 'Lampiran', 'Hal', 'Perihal']), flags),
        ],
        'sensitivity': [
            re.compile(r'\bSifat\s*[:=]?\s*(?P<value>[^\n]+?)'
                       + _until(['Lampiran', 'Hal', 'Perihal', 'Kepada']), flags),
            re.compile(r'\bKlasifikasi\s*[:=]?\s*(?P<value>[^\n]+?)'
                       + _until(['Lampiran', 'Hal', 'Perihal', 'Kepada']), flags),
        ],
        'attachment': [
            re.compile(r'\bLampiran\s*[:=]?\s*(?P<value>[^\n]+?)'
                       + _until(['Hal', 'Perihal', 'Kepada']), flags),
            re.compile(r'\bAttachment\s*[:=]?\s*(?P<value>[^\n]+?)'
                       + _until(['Hal', 'Perihal', 'Kepada']), flags),
        ],
        'subject': [
            re.compile(r'\b(?:Perihal|Hal)\s*[:=]?\s*(?P<value>[^\n]+?)'
                       + _until(['Kepada']), flags),
            re.compile(r'\bSubject\s*[:=]?\s*(?P<value>[^\n]+?)'
                       + _until(['Kepada']), flags),
            re.compile(r'\bRe\s*[:=]\s*(?P<value>[^\n]+?)'
                       + _until(['Kepada']), flags),
        ],
        'addressee': [
            re.compile(r'\bKepada\s+(?:Yth\.?|Yang\s+Terhormat)\s*(?P<value>[^\n]+?)'
                       r'(?=\s*(?:\n|$)|\s+di\s)', flags),
            re.compile(r'\bKepada\s*[:=]?(?!\s*(?:Yth|Yang\s+Terhormat))\s*(?P<value>[^\n]+?)'
                       r'(?=\s*(?:\n|$)|\s+di\s)', flags),
            re.compile(r'\bTo\s*[:=]\s*(?P<value>[^\n]+?)'
                       r'(?=\s*(?:\n|$)|\s+di\s)', flags),
        ],
        'addressee_locality': [
            re.compile(r'^di(?:[ \t]+|[ \t]*\n[ \t]*)(?P<value>[A-Za-z]+)[ \t]*\.?$', line_flags),
            re.compile(r'\b(?:di|at)[ \t]+(?P<value>[A-Za-z]+)[ \t]*\.?$', line_flags),
        ],
    }


class CandidateGenerator:
    """Generates one candidate per matching rule for each letter field"""

    def __init__(self, cities: Optional[Sequence[str]] = None):
        self.rule_families = build_rule_families(KNOWN_CITIES if cities is None else cities)
        self.scorer = ScorerValidator()

    def generate_candidates(self, text: str) -> Dict[str, List[FieldMatch]]:
        """
        Run every rule family against the letter content

        Args:
            text: Letter content after the letterhead

        Returns:
            Dictionary mapping field names to candidates in rule order
        """
        candidates = {}
        for field_name in FIELD_ORDER:
            if field_name == 'addressee_locality':
                continue
            candidates[field_name] = self._regex_candidates(field_name, text)

        # The locality sits beneath the addressee, so search from there when it is known
        region_start = 0
        addressee = self.scorer.select_best_candidate(candidates['addressee'])
        if addressee is not None:
            region_start = addressee.start
        candidates['addressee_locality'] = self._regex_candidates(
            'addressee_locality', text, region_start
        )
        return candidates

    def _regex_candidates(self, field_name: str, text: str, offset: int = 0) -> List[FieldMatch]:
        candidates = []
        region = text[offset:]
        for rule_index, pattern in enumerate(self.rule_families[field_name]):
            match = pattern.search(region)
            if not match:
                continue
            raw_value = (match.group('value') or '').strip()
            if not raw_value:
                continue
            candidates.append(FieldMatch(
                field=field_name,
                value=self.scorer.clean_value(raw_value),
                score=self.scorer.score_candidate(raw_value),
                start=offset + match.start(),
                end=offset + match.end(),
                rule=rule_index,
                groups=self._date_groups(match) if field_name == 'date' else (),
            ))
        return candidates

    @staticmethod
    def _date_groups(match: re.Match):
        groupindex = match.re.groupindex
        city = match.group('city') if 'city' in groupindex else None
        return (city, match.group('day'), match.group('month'), match.group('year'))
