"""
Core Domain Types for logpair
Types for the raw text → LogRecord → Transaction flow
"""

from typing import Optional, Dict
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class LogLevel(str, Enum):
    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"
    DEBUG = "DEBUG"


class TransactionStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    PENDING = "pending"


class MatchBasis(str, Enum):
    KEY = "key"
    TIME = "time"


# Synthetic key kind for bare 8-15 digit tokens
NUMBER_MATCH_KIND = "NumberMatch"


# =============================================================================
# RECORDS (PARSER OUTPUT)
# =============================================================================

class LogRecord(BaseModel):
    """
    One parsed log line.
    Created once per input line and never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    line_number: int = 0
    timestamp: Optional[datetime] = None
    timestamp_text: Optional[str] = None  # literal as it appeared in the line
    level: LogLevel = LogLevel.INFO
    tag: str = ""
    message: str
    ingested_at: datetime = Field(default_factory=datetime.now)

    @property
    def effective_timestamp(self) -> datetime:
        """Timestamp for ordering only; falls back to ingestion time"""
        return self.timestamp if self.timestamp is not None else self.ingested_at


class IdentifierKey(BaseModel):
    """A (kind, value) correlation key found in a message"""
    model_config = ConfigDict(frozen=True)

    kind: str
    value: str

    @property
    def label(self) -> str:
        return f"{self.kind}:{self.value}"

    @property
    def is_numeric_fallback(self) -> bool:
        return self.kind == NUMBER_MATCH_KIND


# =============================================================================
# TRANSACTIONS (CORRELATOR OUTPUT)
# =============================================================================

class Transaction(BaseModel):
    """
    A correlated request/response pair.
    `id` is unique within one correlation run only.
    """
    id: str
    request_record: LogRecord
    response_record: Optional[LogRecord] = None
    duration_ms: int = 0
    status: TransactionStatus = TransactionStatus.PENDING
    match_basis: MatchBasis
    key_info: str  # label of the key that produced the pairing, or "time"
    timestamp: Optional[datetime] = None  # equals the request's timestamp

    @property
    def sort_timestamp(self) -> datetime:
        return self.request_record.effective_timestamp


# =============================================================================
# STATISTICS
# =============================================================================

class LogStats(BaseModel):
    """Per-level counts for a record set"""
    total: int = 0
    errors: int = 0
    warnings: int = 0
    info: int = 0
    debug: int = 0


class TransactionStats(BaseModel):
    """Aggregates over a transaction set"""
    total: int = 0
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_match_basis: Dict[str, int] = Field(default_factory=dict)
    avg_duration_ms: float = 0.0
    max_duration_ms: int = 0
