"""
Identifier Extractor Module

Finds correlation keys in a log message using two passes:
1. Structured fields - "OrderCode": "ABC123" for an allow-list of names
2. Numeric fallback - standalone 8-15 digit tokens

Both passes always run. Extraction works on raw text, so truncated or
malformed JSON only yields fewer keys.
"""

import re
from typing import List, Optional, Tuple

from logpair.common.types import IdentifierKey, NUMBER_MATCH_KIND
from logpair.common.config import AnalyzerConfiguration, get_config


class IdentifierExtractor:
    """
    Extracts IdentifierKeys from message text.

    Order of the result is the matching priority used by the correlator:
    structured keys in order of appearance, then numeric keys.
    """

    def __init__(self, config: Optional[AnalyzerConfiguration] = None):
        self.config = config or get_config()

        fields = "|".join(re.escape(f) for f in self.config.identifier_fields if f)
        self._field_pattern = (
            re.compile(r'"(%s)"\s*[:=]\s*"?([^",}]+)"?' % fields) if fields else None
        )
        self._number_pattern = re.compile(
            r'\b\d{%d,%d}\b' % (self.config.number_min_digits, self.config.number_max_digits),
            re.ASCII
        )

    def extract_keys(self, text: str) -> Tuple[IdentifierKey, ...]:
        """
        Extract all correlation keys from a message.

        Args:
            text: Raw message (usually the full log line)

        Returns:
            De-duplicated keys, structured first
        """
        keys: List[IdentifierKey] = []
        seen = set()

        for key in self._structured_keys(text) + self._numeric_keys(text):
            if key not in seen:
                seen.add(key)
                keys.append(key)

        return tuple(keys)

    def _structured_keys(self, text: str) -> List[IdentifierKey]:
        keys = []
        if self._field_pattern is None:
            return keys

        for match in self._field_pattern.finditer(text):
            value = match.group(2).strip()
            # Ignore null or empty values
            if value and value != "null":
                keys.append(IdentifierKey(kind=match.group(1), value=value))
        return keys

    def _numeric_keys(self, text: str) -> List[IdentifierKey]:
        return [
            IdentifierKey(kind=NUMBER_MATCH_KIND, value=digits)
            for digits in self._number_pattern.findall(text)
        ]
