import unittest

from logpair.common.config import AnalyzerConfiguration
from logpair.common.types import TransactionStatus
from logpair.correlation import RoleClassifier, StatusClassifier
from logpair.ingestion import LogParserService


class TestRoleClassifier(unittest.TestCase):
    def test_request_needs_brace(self):
        self.assertTrue(RoleClassifier.classify_message('OrderService request{"a": 1}').is_request)
        self.assertTrue(RoleClassifier.classify_message('REQUEST: {"a": 1}').is_request)
        self.assertFalse(RoleClassifier.classify_message("Request sent to bank").is_request)

    def test_input_marker_is_request(self):
        flags = RoleClassifier.classify_message("PaymentGateway InputChainData amount=100")
        self.assertTrue(flags.is_request)
        self.assertFalse(flags.is_response)

    def test_response_with_brace(self):
        flags = RoleClassifier.classify_message('RESPONSE {"x": 1}')
        self.assertTrue(flags.is_response)
        self.assertFalse(flags.is_request)

    def test_response_with_output_marker(self):
        self.assertTrue(RoleClassifier.classify_message("response OutputChainData ok").is_response)

    def test_output_marker_alone_is_not_response(self):
        self.assertFalse(RoleClassifier.classify_message("OutputChainData {}").is_response)

    def test_response_without_cue(self):
        self.assertFalse(RoleClassifier.classify_message("response received").is_response)

    def test_neither(self):
        flags = RoleClassifier.classify_message("cache warmed in 20ms")
        self.assertFalse(flags.is_request or flags.is_response)

    def test_both_flags_possible(self):
        flags = RoleClassifier.classify_message('request/response dump {"a": 1}')
        self.assertTrue(flags.is_request)
        self.assertTrue(flags.is_response)

    def test_classify_record(self):
        record = LogParserService(AnalyzerConfiguration()).parse_line(
            '2024-01-01 10:00:00 Api: response {"OrderCode": "A"}'
        )
        self.assertTrue(RoleClassifier.classify(record).is_response)


class TestStatusClassifier(unittest.TestCase):
    def setUp(self):
        self.parser = LogParserService(AnalyzerConfiguration())
        self.classifier = StatusClassifier(AnalyzerConfiguration())

    def _classify(self, line):
        return self.classifier.classify(self.parser.parse_line(line))

    def test_error_level_wins(self):
        self.assertEqual(
            self._classify('Api: ERROR response {"Status": "Success"}'),
            TransactionStatus.ERROR
        )

    def test_status_success(self):
        self.assertEqual(self._classify('Api: response {"Status": "Success"}'), TransactionStatus.SUCCESS)
        self.assertEqual(self._classify('Api: response {"Status":"Success"}'), TransactionStatus.SUCCESS)

    def test_status_other_value(self):
        self.assertEqual(self._classify('Api: response {"Status": "Failed"}'), TransactionStatus.ERROR)
        self.assertEqual(self._classify('Api: response {"Status": "success"}'), TransactionStatus.ERROR)

    def test_status_beats_return_code(self):
        self.assertEqual(
            self._classify('Api: response {"Status": "Success", "ReturnCode": "API9999"}'),
            TransactionStatus.SUCCESS
        )

    def test_return_code(self):
        self.assertEqual(self._classify('Api: response {"ReturnCode": "API0001"}'), TransactionStatus.SUCCESS)
        self.assertEqual(self._classify('Api: response {"ReturnCode": "API0042"}'), TransactionStatus.ERROR)

    def test_non_api_return_code_is_success(self):
        self.assertEqual(self._classify('Api: response {"ReturnCode": "E01"}'), TransactionStatus.SUCCESS)

    def test_default_success(self):
        self.assertEqual(self._classify('Api: WARN response {"Result": "maybe"}'), TransactionStatus.SUCCESS)


if __name__ == "__main__":
    unittest.main()
