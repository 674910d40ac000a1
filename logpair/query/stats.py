"""Statistics: level counts, transaction outcomes."""

from collections import Counter
from typing import Iterable

from logpair.common.types import LogLevel, LogRecord, LogStats, Transaction, TransactionStats


def compute_stats(records: Iterable[LogRecord]) -> LogStats:
    """Count records per level."""
    counter = Counter(record.level for record in records)

    return LogStats(
        total=sum(counter.values()),
        errors=counter[LogLevel.ERROR],
        warnings=counter[LogLevel.WARN],
        info=counter[LogLevel.INFO],
        debug=counter[LogLevel.DEBUG],
    )


def compute_transaction_stats(transactions: Iterable[Transaction]) -> TransactionStats:
    status_counter = Counter()
    basis_counter = Counter()
    durations = []

    for tx in transactions:
        status_counter[tx.status.value] += 1
        basis_counter[tx.match_basis.value] += 1
        durations.append(tx.duration_ms)

    return TransactionStats(
        total=len(durations),
        by_status=dict(status_counter.most_common()),
        by_match_basis=dict(basis_counter.most_common()),
        avg_duration_ms=round(sum(durations) / len(durations), 2) if durations else 0.0,
        max_duration_ms=max(durations, default=0),
    )
