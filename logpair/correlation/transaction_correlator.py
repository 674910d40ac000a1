"""
Transaction Correlator Module

Pairs request records with response records using:
1. Key Matching - a response shares an identifier key with an earlier request
2. Temporal Fallback - closest earlier unconsumed request within a short window

Matching is best effort. Duplicate keys across unrelated transactions
(last registration wins), several responses sharing one key (only the first
consumes it) and missing timestamps (duration 0) are tolerated, not repaired.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from logpair.common.types import (
    IdentifierKey,
    LogRecord,
    MatchBasis,
    Transaction,
)
from logpair.common.config import AnalyzerConfiguration, get_config
from logpair.correlation.key_extractor import IdentifierExtractor
from logpair.correlation.role_classifier import RoleClassifier
from logpair.correlation.status_classifier import StatusClassifier

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1)


@dataclass
class IndexedRequest:
    """A request candidate for the temporal fallback"""
    record: LogRecord
    keys: Tuple[IdentifierKey, ...]
    timestamp: Optional[datetime]


@dataclass
class CorrelationState:
    """
    Mutable state of a single correlate() call.
    Never shared between runs.
    """
    # Key -> most recently registered request carrying it
    lookup: Dict[IdentifierKey, LogRecord] = field(default_factory=dict)
    # Every request in input order, with or without keys
    requests: List[IndexedRequest] = field(default_factory=list)
    # id() of request records already used by a transaction
    consumed: Set[int] = field(default_factory=set)
    transaction_ids: Set[str] = field(default_factory=set)
    transactions: List[Transaction] = field(default_factory=list)


class TransactionCorrelator:
    """
    Correlates an ordered record stream into transactions.

    Single pass in log order:
    - A request registers itself under each of its keys (later requests
      overwrite earlier ones) and joins the time-ordered candidate list
    - A response tries its keys in extraction order (the key is retired
      once used), then falls back to the closest unconsumed request seen
      so far

    Finally transactions are sorted newest first by request timestamp.
    """

    TIME_MATCH_LABEL = "time"

    def __init__(
        self,
        config: Optional[AnalyzerConfiguration] = None,
        extractor: Optional[IdentifierExtractor] = None,
        status_classifier: Optional[StatusClassifier] = None
    ):
        self.config = config or get_config()
        self.extractor = extractor or IdentifierExtractor(self.config)
        self.status_classifier = status_classifier or StatusClassifier(self.config)
        self.match_window = timedelta(seconds=self.config.match_window_seconds)

    def correlate(self, records: Iterable[LogRecord]) -> List[Transaction]:
        """
        Main entry point: walk the records once, pairing as we go, then sort.

        Args:
            records: Parsed records in original log order

        Returns:
            Matched transactions, newest first. Unmatched requests and
            unmatched responses produce nothing.
        """
        records = list(records)
        state = CorrelationState()

        for record in records:
            roles = RoleClassifier.classify(record)
            if not (roles.is_request or roles.is_response):
                continue

            keys = self.extractor.extract_keys(record.message)

            # A record that qualifies as a request is not also a response,
            # so it can never pair with itself
            if roles.is_request:
                self._register_request(record, keys, state)
            else:
                self._match_response(record, keys, state)

        transactions = state.transactions
        transactions.sort(key=lambda t: t.sort_timestamp, reverse=True)

        key_count = sum(1 for t in transactions if t.match_basis == MatchBasis.KEY)
        logger.info(
            "[TransactionCorrelator] %d transactions from %d records (key=%d, time=%d)",
            len(transactions), len(records), key_count, len(transactions) - key_count
        )
        return transactions

    @staticmethod
    def _register_request(
        record: LogRecord,
        keys: Tuple[IdentifierKey, ...],
        state: CorrelationState
    ) -> None:
        # Later requests overwrite earlier ones for the same key
        for key in keys:
            state.lookup[key] = record
        state.requests.append(IndexedRequest(
            record=record,
            keys=keys,
            timestamp=record.timestamp
        ))

    def _match_response(
        self,
        response: LogRecord,
        keys: Tuple[IdentifierKey, ...],
        state: CorrelationState
    ) -> None:
        """Key match against requests seen so far, then temporal fallback"""
        request, matched_key = self._match_by_key(keys, state)
        basis = MatchBasis.KEY

        if request is None:
            request = self._match_by_time(response, state)
            basis = MatchBasis.TIME

        if request is None:
            # Orphan response: not materialised
            return

        label = matched_key.label if matched_key else self.TIME_MATCH_LABEL
        state.consumed.add(id(request))
        state.transactions.append(Transaction(
            id=self._transaction_id(label, response, state),
            request_record=request,
            response_record=response,
            duration_ms=self._duration_ms(request, response),
            status=self.status_classifier.classify(response),
            match_basis=basis,
            key_info=label,
            timestamp=request.timestamp,
        ))

    @staticmethod
    def _match_by_key(
        keys: Tuple[IdentifierKey, ...],
        state: CorrelationState
    ) -> Tuple[Optional[LogRecord], Optional[IdentifierKey]]:
        """Strategy A: first key with a registered request; the key is retired"""
        for key in keys:
            request = state.lookup.pop(key, None)
            if request is not None:
                return request, key
        return None, None

    def _match_by_time(self, response: LogRecord, state: CorrelationState) -> Optional[LogRecord]:
        """
        Strategy B: the unconsumed request with the smallest positive delta
        strictly inside the match window. Does not touch the key lookup.
        """
        if response.timestamp is None:
            return None

        best: Optional[LogRecord] = None
        best_delta: Optional[timedelta] = None

        for candidate in state.requests:
            if candidate.timestamp is None or id(candidate.record) in state.consumed:
                continue

            delta = response.timestamp - candidate.timestamp
            if timedelta(0) < delta < self.match_window:
                if best_delta is None or delta < best_delta:
                    best = candidate.record
                    best_delta = delta

        return best

    @staticmethod
    def _duration_ms(request: LogRecord, response: LogRecord) -> int:
        """Response minus request time; 0 when unknown or negative"""
        if request.timestamp is None or response.timestamp is None:
            return 0

        duration = round((response.timestamp - request.timestamp).total_seconds() * 1000)
        return max(duration, 0)

    @staticmethod
    def _transaction_id(label: str, response: LogRecord, state: CorrelationState) -> str:
        """<key label>-<response epoch ms>, disambiguated by line number if taken"""
        if response.timestamp is not None:
            suffix = str((response.timestamp - _EPOCH) // timedelta(milliseconds=1))
        else:
            suffix = f"L{response.line_number}"

        tx_id = f"{label}-{suffix}"
        if tx_id in state.transaction_ids:
            tx_id = f"{tx_id}#{response.line_number}"

        state.transaction_ids.add(tx_id)
        return tx_id
