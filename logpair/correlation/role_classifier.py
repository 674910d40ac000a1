"""
Role Classifier Module

Decides from lexical cues whether a record opens a transaction (request),
closes one (response), both, or neither.
"""

from dataclasses import dataclass

from logpair.common.types import LogRecord


@dataclass(frozen=True)
class RoleFlags:
    """Non-exclusive role flags for one record"""
    is_request: bool = False
    is_response: bool = False


class RoleClassifier:
    """
    Loose lexical rules:
    - request:  "request" (any case) plus a '{', or the InputChainData marker
    - response: "response" (any case) plus a '{' or the OutputChainData marker
    """

    REQUEST_MARKER = "InputChainData"
    RESPONSE_MARKER = "OutputChainData"

    @classmethod
    def classify(cls, record: LogRecord) -> RoleFlags:
        return cls.classify_message(record.message)

    @classmethod
    def classify_message(cls, message: str) -> RoleFlags:
        lower_msg = message.lower()
        has_brace = "{" in message

        is_request = ("request" in lower_msg and has_brace) or cls.REQUEST_MARKER in message
        is_response = "response" in lower_msg and (has_brace or cls.RESPONSE_MARKER in message)

        return RoleFlags(is_request=is_request, is_response=is_response)
