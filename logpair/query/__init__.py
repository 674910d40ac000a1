"""Query helpers over analysed records and transactions"""

from .filters import Page, filter_records, filter_transactions, paginate
from .stats import compute_stats, compute_transaction_stats

__all__ = [
    "Page",
    "filter_records",
    "filter_transactions",
    "paginate",
    "compute_stats",
    "compute_transaction_stats",
]
