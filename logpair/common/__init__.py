"""Common types and settings for logpair"""

from .types import (
    LogLevel,
    TransactionStatus,
    MatchBasis,
    NUMBER_MATCH_KIND,
    LogRecord,
    IdentifierKey,
    Transaction,
    LogStats,
    TransactionStats,
)
from .config import AnalyzerConfiguration, ConfigLoader, get_config

__all__ = [
    "LogLevel",
    "TransactionStatus",
    "MatchBasis",
    "NUMBER_MATCH_KIND",
    "LogRecord",
    "IdentifierKey",
    "Transaction",
    "LogStats",
    "TransactionStats",
    "AnalyzerConfiguration",
    "ConfigLoader",
    "get_config",
]
