"""
Log Analysis Session

Holds the state of one "analyze" action:
1. Parse raw text into records (input order)
2. Collect the tag vocabulary
3. Correlate transactions on demand

Re-analysing replaces all previous state; nothing is merged.
"""

import logging
from typing import List, Optional

from logpair.common.types import LogRecord, LogStats, Transaction, TransactionStats
from logpair.common.config import AnalyzerConfiguration, get_config
from logpair.ingestion.log_parser import LogParserService
from logpair.correlation.transaction_correlator import TransactionCorrelator
from logpair.query.filters import Page, filter_records, filter_transactions, paginate
from logpair.query.stats import compute_stats, compute_transaction_stats

logger = logging.getLogger(__name__)


class LogAnalysisSession:
    """
    Single-threaded analysis session.

    Records are produced once per analyze() call. Transactions are derived
    lazily and cached until the record set changes.
    """

    def __init__(
        self,
        config: Optional[AnalyzerConfiguration] = None,
        parser: Optional[LogParserService] = None,
        correlator: Optional[TransactionCorrelator] = None
    ):
        self.config = config or get_config()
        self.parser = parser or LogParserService(self.config)
        self.correlator = correlator or TransactionCorrelator(self.config)

        self._records: List[LogRecord] = []
        self._tags: List[str] = []
        self._transactions: Optional[List[Transaction]] = None

    def analyze(self, raw_logs: str) -> List[LogRecord]:
        """Parse raw text, replacing any previous records and transactions"""
        self._records = self.parser.parse_stream(raw_logs)
        self._tags = LogParserService.collect_tags(self._records)
        self._transactions = None

        logger.info(
            "[LogAnalysisSession] Analysed %d records, %d distinct tags",
            len(self._records), len(self._tags)
        )
        return self._records

    def clear(self) -> None:
        self._records = []
        self._tags = []
        self._transactions = None

    @property
    def records(self) -> List[LogRecord]:
        return list(self._records)

    @property
    def tags(self) -> List[str]:
        return list(self._tags)

    @property
    def transactions(self) -> List[Transaction]:
        """Newest-first transactions; correlated on first access"""
        if self._transactions is None:
            self._transactions = self.correlator.correlate(self._records)
        return list(self._transactions)

    def stats(self) -> LogStats:
        return compute_stats(self._records)

    def transaction_stats(self) -> TransactionStats:
        return compute_transaction_stats(self.transactions)

    def query_records(
        self,
        level: str = "all",
        search: str = "",
        tag: str = "all",
        page: int = 1,
        page_size: Optional[int] = None
    ) -> Page[LogRecord]:
        matched = filter_records(self._records, level=level, search=search, tag=tag)
        return paginate(matched, page, page_size or self.config.page_size)

    def query_transactions(
        self,
        search: str = "",
        page: int = 1,
        page_size: Optional[int] = None
    ) -> Page[Transaction]:
        matched = filter_transactions(self.transactions, search)
        return paginate(matched, page, page_size or self.config.page_size)
