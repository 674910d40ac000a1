"""
Status Classifier Module

Classifies a matched response as success or error.
"""

import re
from typing import Optional

from logpair.common.types import LogRecord, LogLevel, TransactionStatus
from logpair.common.config import AnalyzerConfiguration, get_config


class StatusClassifier:
    """
    First applicable rule wins:
    1. Response logged at ERROR level        -> error
    2. "Status": "<value>" present            -> success iff value is "Success"
    3. "ReturnCode": "API..." other than API0001 -> error
    4. Otherwise                              -> success
    """

    STATUS_FIELD = re.compile(r'"Status"\s*:\s*"([^"]*)"')
    RETURN_CODE_FIELD = re.compile(r'"ReturnCode"\s*:\s*"(API[^"]*)"')

    def __init__(self, config: Optional[AnalyzerConfiguration] = None):
        self.config = config or get_config()

    def classify(self, response: LogRecord) -> TransactionStatus:
        if response.level == LogLevel.ERROR:
            return TransactionStatus.ERROR

        status_match = self.STATUS_FIELD.search(response.message)
        if status_match:
            if status_match.group(1) == self.config.success_status:
                return TransactionStatus.SUCCESS
            return TransactionStatus.ERROR

        code_match = self.RETURN_CODE_FIELD.search(response.message)
        if code_match and code_match.group(1) != self.config.success_return_code:
            return TransactionStatus.ERROR

        return TransactionStatus.SUCCESS
