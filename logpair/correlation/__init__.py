"""
Correlation Module

Identifier extraction, role/status classification and request/response pairing.
"""

from .key_extractor import IdentifierExtractor
from .role_classifier import RoleClassifier, RoleFlags
from .status_classifier import StatusClassifier
from .transaction_correlator import TransactionCorrelator

__all__ = [
    "IdentifierExtractor",
    "RoleClassifier",
    "RoleFlags",
    "StatusClassifier",
    "TransactionCorrelator",
]
