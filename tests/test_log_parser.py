import unittest
from datetime import datetime

from logpair.common.config import AnalyzerConfiguration
from logpair.common.types import LogLevel
from logpair.ingestion import LogParserService, extract_json_payload, format_json_payload


class TestParseLine(unittest.TestCase):
    def setUp(self):
        self.parser = LogParserService(AnalyzerConfiguration())

    def test_full_line(self):
        record = self.parser.parse_line(
            "2024-03-05 08:30:15.123 PaymentService: ERROR timeout talking to bank"
        )

        self.assertEqual(record.timestamp, datetime(2024, 3, 5, 8, 30, 15, 123000))
        self.assertEqual(record.timestamp_text, "2024-03-05 08:30:15.123")
        self.assertEqual(record.level, LogLevel.ERROR)
        self.assertEqual(record.tag, "PaymentService")
        self.assertEqual(record.message, "2024-03-05 08:30:15.123 PaymentService: ERROR timeout talking to bank")

    def test_iso_separator_and_long_fraction(self):
        record = self.parser.parse_line("2024-03-05T08:30:15.123456789 Svc: hi")
        self.assertEqual(record.timestamp, datetime(2024, 3, 5, 8, 30, 15, 123456))

    def test_short_fraction_is_padded(self):
        record = self.parser.parse_line("2024-03-05T08:30:15.5 Svc: hi")
        self.assertEqual(record.timestamp.microsecond, 500000)

    def test_date_only(self):
        record = self.parser.parse_line("2024-01-01 INFO hello")
        self.assertEqual(record.timestamp, datetime(2024, 1, 1))
        self.assertEqual(record.timestamp_text, "2024-01-01")

    def test_no_timestamp(self):
        record = self.parser.parse_line("just some text here")
        self.assertIsNone(record.timestamp)
        self.assertIsNone(record.timestamp_text)
        self.assertEqual(record.level, LogLevel.INFO)
        self.assertEqual(record.tag, "just")

    def test_impossible_date_keeps_literal_only(self):
        record = self.parser.parse_line("2024-13-45 10:00:00 WARN disk nearly full")
        self.assertIsNone(record.timestamp)
        self.assertEqual(record.timestamp_text, "2024-13-45 10:00:00")
        self.assertEqual(record.level, LogLevel.WARN)
        self.assertEqual(record.tag, "WARN")

    def test_effective_timestamp_falls_back_to_ingestion_time(self):
        ingested = datetime(2030, 1, 1, 12, 0, 0)
        record = self.parser.parse_line("no time here", ingested_at=ingested)
        self.assertEqual(record.effective_timestamp, ingested)


class TestLevelExtraction(unittest.TestCase):
    def setUp(self):
        self.parser = LogParserService(AnalyzerConfiguration())

    def test_case_insensitive(self):
        self.assertEqual(self.parser.parse_line("warn: disk low").level, LogLevel.WARN)
        self.assertEqual(self.parser.parse_line("[debug] cache hit").level, LogLevel.DEBUG)

    def test_first_level_wins(self):
        record = self.parser.parse_line("2024-01-01 10:00:00 INFO retry after ERROR")
        self.assertEqual(record.level, LogLevel.INFO)

    def test_whole_word_only(self):
        self.assertEqual(self.parser.parse_line("WARNING: deprecated").level, LogLevel.INFO)
        self.assertEqual(self.parser.parse_line("ERRORS were found").level, LogLevel.INFO)


class TestTagExtraction(unittest.TestCase):
    def setUp(self):
        self.parser = LogParserService(AnalyzerConfiguration())

    def test_colon_rule(self):
        record = self.parser.parse_line("2024-01-01 10:00:00 SendSlackMessage API : sent")
        self.assertEqual(record.tag, "SendSlackMessage API")

    def test_colon_rule_beats_brace_rule(self):
        record = self.parser.parse_line('2024-01-01 10:00:00 request{"OrderCode": "A1"}')
        self.assertEqual(record.tag, 'request{"OrderCode"')

    def test_brace_rule(self):
        record = self.parser.parse_line("2024-01-01 10:00:00 取得訂單明細request{}")
        self.assertEqual(record.tag, "取得訂單明細request")

    def test_generic_first_token(self):
        record = self.parser.parse_line("2024-01-01 10:00:00 EtlFlowService constructor called")
        self.assertEqual(record.tag, "EtlFlowService")

    def test_colon_too_far_falls_through(self):
        line = "2024-01-01 10:00:00 " + "word " * 15 + ": value"
        self.assertEqual(self.parser.parse_line(line).tag, "word")

    def test_tag_is_capped(self):
        record = self.parser.parse_line("2024-01-01 10:00:00 " + "x" * 80)
        self.assertEqual(record.tag, "x" * 50)

    def test_glued_second_timestamp_is_skipped(self):
        record = self.parser.parse_line("2024-01-01 10:00:002024-01-01 10:00:01.250 Worker: started")
        self.assertEqual(record.timestamp, datetime(2024, 1, 1, 10, 0, 0))
        self.assertEqual(record.tag, "Worker")

    def test_glued_integer_is_skipped(self):
        record = self.parser.parse_line("2024-01-0112345 Worker: started")
        self.assertEqual(record.timestamp, datetime(2024, 1, 1))
        self.assertEqual(record.tag, "Worker")

    def test_glued_fraction_is_skipped(self):
        self.assertEqual(self.parser.parse_line("2024-01-01.250 Worker: started").tag, "Worker")

    def test_empty_after_timestamp(self):
        self.assertEqual(self.parser.parse_line("2024-01-01 10:00:00").tag, "")


class TestParseNeverRaises(unittest.TestCase):
    def test_odd_inputs(self):
        parser = LogParserService(AnalyzerConfiguration())
        for line in ["", "{{{{", ":::", "\x00\x01", "9999-99-99T99:99:99", "😀 request {"]:
            record = parser.parse_line(line)
            self.assertIn(record.level, list(LogLevel))
            self.assertLessEqual(len(record.tag), 50)


class TestParseStream(unittest.TestCase):
    def test_blank_lines_dropped_and_trimmed(self):
        parser = LogParserService(AnalyzerConfiguration())
        records = parser.parse_stream("a\n\n   \n  b  \r\nc")

        self.assertEqual([r.message for r in records], ["a", "b", "c"])
        self.assertEqual([r.line_number for r in records], [0, 1, 2])
        self.assertEqual(len({r.ingested_at for r in records}), 1)

    def test_collect_tags_first_seen(self):
        parser = LogParserService(AnalyzerConfiguration())
        records = parser.parse_stream(
            "Db: one\nCache: two\nDb: three\n\nApi: four\n2024-01-01 10:00:00"
        )
        self.assertEqual(LogParserService.collect_tags(records), ["Db", "Cache", "Api"])


class TestPayload(unittest.TestCase):
    def test_extract_object(self):
        self.assertEqual(extract_json_payload('svc request{"a": 1, "b": [2]}'), {"a": 1, "b": [2]})

    def test_extract_array(self):
        self.assertEqual(extract_json_payload("ids: [1, 2, 3]"), [1, 2, 3])

    def test_no_json(self):
        self.assertIsNone(extract_json_payload("plain text"))

    def test_truncated_json(self):
        self.assertIsNone(extract_json_payload('response {"OrderCode": "AB'))

    def test_format(self):
        self.assertEqual(format_json_payload('x {"a":1}'), '{\n  "a": 1\n}')
        self.assertIsNone(format_json_payload("x {oops"))


if __name__ == "__main__":
    unittest.main()
