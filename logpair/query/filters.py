"""Filters and pagination over records and transactions."""

import math
from dataclasses import dataclass, field
from typing import Generic, List, Sequence, TypeVar

from logpair.common.types import LogRecord, Transaction

T = TypeVar("T")

ALL = "all"
LEVEL_FILTERS = {ALL, "error", "warn", "info", "debug"}


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 50
    total_items: int = 0
    total_pages: int = 1


def matches_level(record: LogRecord, level: str) -> bool:
    return level == ALL or record.level.value.lower() == level


def matches_search(record: LogRecord, search: str) -> bool:
    return search.lower() in record.message.lower()


def matches_tag(record: LogRecord, tag: str) -> bool:
    return record.tag == tag


def filter_records(
    records: Sequence[LogRecord],
    level: str = ALL,
    search: str = "",
    tag: str = ALL
) -> List[LogRecord]:
    """Level AND (search OR tag).

    With no search term and no tag selected only the level applies.
    """
    level = (level or ALL).lower()
    if level not in LEVEL_FILTERS:
        raise ValueError(f"Unknown level filter: {level!r}")

    tag = tag or ALL
    has_search = bool(search)
    has_tag = tag != ALL

    result = []
    for record in records:
        if not matches_level(record, level):
            continue
        if has_search or has_tag:
            hit_search = has_search and matches_search(record, search)
            hit_tag = has_tag and matches_tag(record, tag)
            if not (hit_search or hit_tag):
                continue
        result.append(record)
    return result


def filter_transactions(transactions: Sequence[Transaction], search: str = "") -> List[Transaction]:
    """Substring match on request, response and matched key."""
    if not search:
        return list(transactions)

    needle = search.lower()
    result = []
    for tx in transactions:
        in_request = needle in tx.request_record.message.lower()
        in_response = tx.response_record is not None and needle in tx.response_record.message.lower()
        in_key = needle in tx.key_info.lower()
        if in_request or in_response or in_key:
            result.append(tx)
    return result


def paginate(items: Sequence[T], page: int = 1, page_size: int = 50) -> Page[T]:
    """Slice one page; out-of-range pages are clamped."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")

    total_pages = max(1, math.ceil(len(items) / page_size))
    safe_page = min(max(page, 1), total_pages)
    start = (safe_page - 1) * page_size

    return Page(
        items=list(items[start:start + page_size]),
        page=safe_page,
        page_size=page_size,
        total_items=len(items),
        total_pages=total_pages,
    )
