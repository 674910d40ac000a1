"""
Log Ingestion Service for logpair

Transforms raw text logs into structured LogRecord objects.
Handles timestamp parsing, severity extraction and tag deduction.
Parsing is a pure per-line function and never raises on malformed input.
"""

import re
import logging
from typing import Iterable, List, Optional, Tuple
from datetime import datetime

from logpair.common.types import LogRecord, LogLevel
from logpair.common.config import AnalyzerConfiguration, get_config

logger = logging.getLogger(__name__)


class LogParserService:
    """
    Parses raw log text into LogRecord objects.

    Features:
    - Canonical date / date-time timestamp extraction
    - Severity detection (ERROR, WARN, INFO, DEBUG; INFO by default)
    - Tag deduction from the line prefix
    - Tag vocabulary for callers that filter by tag
    """

    # 2024-01-01, 2024-01-01 10:00:00, 2024-01-01T10:00:00.123
    TIMESTAMP_PATTERN = re.compile(
        r'(\d{4}-\d{2}-\d{2})(?:[T\s](\d{2}:\d{2}:\d{2})(?:\.(\d+))?)?',
        re.ASCII
    )

    LEVEL_PATTERN = re.compile(r'\b(ERROR|WARN|INFO|DEBUG)\b', re.IGNORECASE | re.ASCII)

    # Literal timestamp fragments that commonly follow the first timestamp
    LEADING_FRAGMENTS = [
        re.compile(r'^\d{4}-\d{2}-\d{2}[T\s]\d{2}:\d{2}:\d{2}(\.\d+)?\s*', re.ASCII),
        re.compile(r'^\.\d+\s*', re.ASCII),
        re.compile(r'^\d+\s*', re.ASCII),
    ]

    def __init__(self, config: Optional[AnalyzerConfiguration] = None):
        """
        Initialize the parser.

        Args:
            config: Optional analyzer settings (process-wide settings if omitted)
        """
        self.config = config or get_config()
        self.tag_max_length = self.config.tag_max_length

        n = self.tag_max_length
        # Rule 1: "InitialData:", "SendSlackMessage API :"
        self._colon_tag = re.compile(r'^([^:\r\n]{1,%d})\s*:' % n)
        # Rule 2: "request{", "OrderService request {"
        self._brace_tag = re.compile(r'^([^{:\r\n]{1,%d})\s*\{' % n)
        # Rule 3: first word
        self._generic_tag = re.compile(r'^[^\s{:]+')

    def parse_stream(self, raw_logs: str) -> List[LogRecord]:
        """
        Parse a raw log blob into records.

        Args:
            raw_logs: Multi-line string of raw logs

        Returns:
            Records in input order; blank lines are dropped
        """
        records = self.parse_lines(raw_logs.splitlines())
        logger.debug("[LogParserService] Parsed %d records", len(records))
        return records

    def parse_lines(self, lines: Iterable[str]) -> List[LogRecord]:
        """Parse already split lines; all records share one ingestion time"""
        ingested_at = datetime.now()
        records: List[LogRecord] = []

        for line in lines:
            stripped = line.strip()
            if not stripped:
                continue
            records.append(self.parse_line(stripped, len(records), ingested_at))

        return records

    def parse_line(
        self,
        line: str,
        line_number: int = 0,
        ingested_at: Optional[datetime] = None
    ) -> LogRecord:
        """Parse a single log line"""
        timestamp_text, timestamp = self._extract_timestamp(line)

        return LogRecord(
            line_number=line_number,
            timestamp=timestamp,
            timestamp_text=timestamp_text,
            level=self._extract_level(line),
            tag=self._extract_tag(line, timestamp_text),
            message=line,
            ingested_at=ingested_at or datetime.now(),
        )

    def _extract_timestamp(self, line: str) -> Tuple[Optional[str], Optional[datetime]]:
        """
        Find the first timestamp literal.

        Returns the literal and its parsed value; the value is None when the
        literal is not a real calendar time (e.g. 2024-13-45).
        """
        match = self.TIMESTAMP_PATTERN.search(line)
        if not match:
            return None, None

        date_part, time_part, fraction = match.groups()
        try:
            if time_part:
                parsed = datetime.strptime(f"{date_part} {time_part}", "%Y-%m-%d %H:%M:%S")
            else:
                parsed = datetime.strptime(date_part, "%Y-%m-%d")
        except ValueError:
            return match.group(0), None

        if fraction:
            # Handle fractions exceeding 6 digits
            parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, '0')))

        return match.group(0), parsed

    def _extract_level(self, line: str) -> LogLevel:
        match = self.LEVEL_PATTERN.search(line)
        if match:
            return LogLevel(match.group(1).upper())
        return LogLevel.INFO

    def _extract_tag(self, line: str, timestamp_text: Optional[str] = None) -> str:
        """Deduce a short label from what follows the timestamp"""
        body = line
        if timestamp_text:
            idx = line.find(timestamp_text)
            body = line[idx + len(timestamp_text):]

        for fragment in self.LEADING_FRAGMENTS:
            body = fragment.sub('', body, count=1)
        body = body.strip()

        colon_match = self._colon_tag.match(body)
        if colon_match:
            return colon_match.group(1).strip()

        brace_match = self._brace_tag.match(body)
        if brace_match:
            return brace_match.group(1).strip()

        generic_match = self._generic_tag.match(body)
        if generic_match:
            return generic_match.group(0)[:self.tag_max_length]

        return ""

    @staticmethod
    def collect_tags(records: Iterable[LogRecord]) -> List[str]:
        """Distinct non-empty tags in first-seen order"""
        seen = set()
        tags: List[str] = []

        for record in records:
            if record.tag and record.tag not in seen:
                seen.add(record.tag)
                tags.append(record.tag)

        return tags
