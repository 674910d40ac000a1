"""
Payload helpers.

Log lines often end with a JSON body ("request{...}", "Response: {...}").
These helpers try to decode that tail for display; failures return None.
"""

import json
import re
from typing import Any, Optional

_PAYLOAD_START = re.compile(r'[{\[]')

_NOT_FOUND = object()


def _decode_tail(message: str) -> Any:
    match = _PAYLOAD_START.search(message)
    if not match:
        return _NOT_FOUND
    try:
        return json.loads(message[match.start():])
    except ValueError:
        return _NOT_FOUND


def extract_json_payload(message: str) -> Optional[Any]:
    """Decode the JSON that starts at the first '{' or '[' of the message"""
    payload = _decode_tail(message)
    return None if payload is _NOT_FOUND else payload


def format_json_payload(message: str, indent: int = 2) -> Optional[str]:
    """Pretty-printed payload, or None if the tail is not valid JSON"""
    payload = _decode_tail(message)
    if payload is _NOT_FOUND:
        return None
    return json.dumps(payload, indent=indent, ensure_ascii=False)
