"""
Ingestion Module

Provides log line parsing and LogRecord creation.
"""

from .log_parser import LogParserService
from .payload import extract_json_payload, format_json_payload

__all__ = [
    'LogParserService',
    'extract_json_payload',
    'format_json_payload',
]
