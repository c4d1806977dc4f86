import json
import unittest
from datetime import date

from ccpick.extract import (
    export_filename,
    extract_round,
    extract_rounds,
    get_round,
    list_rounds,
    parse_round_number,
    require_round,
    round_filename,
)
from ccpick.models import RoundNotFoundError
from ccpick.reader import parse_lines, split_lines
from ccpick.segment import segment

SESSION = (
    '{"type":"user","uuid":"a","timestamp":"2026-02-16T10:00:00Z","message":{"role":"user","content":"Fix bug"}}\r\n'
    '{ "parentUuid" : "a", "type" : "assistant", "uuid":"b", "message":{"content":"Done \\u00e9","role":"assistant"}}\n'
    "\n"
    '{"type":"file-history-snapshot","messageId":"s1","snapshot":{"messageId":"s1"},"isSnapshotUpdate":false}\n'
    '{"type":"user","uuid":"c","timestamp":"2026-02-16T10:05:00Z","message":{"role":"user","content":"Thanks"}}\n'
    '{"type":"assistant","uuid":"d","parentUuid":"c","message":{"role":"assistant","content":"You are welcome"}}'
)


class ExtractTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rounds = segment(parse_lines(SESSION))

    def test_extracted_rounds_are_byte_identical(self) -> None:
        lines = [line for line in split_lines(SESSION) if line.strip()]

        self.assertEqual(extract_round(self.rounds, 0), "".join(lines[:3]))
        self.assertEqual(extract_round(self.rounds, 1), "".join(lines[3:]))

    def test_whole_file_round_trip_drops_only_blank_lines(self) -> None:
        self.assertEqual(extract_rounds(self.rounds), SESSION.replace("\n\n", "\n"))

    def test_extracted_lines_parse_to_original_values(self) -> None:
        text = extract_round(self.rounds, 0)
        values = [json.loads(line) for line in split_lines(text)]

        self.assertEqual(values[1]["message"]["content"], "Done \u00e9")
        self.assertEqual(values[2], {
            "type": "file-history-snapshot",
            "messageId": "s1",
            "snapshot": {"messageId": "s1"},
            "isSnapshotUpdate": False,
        })

    def test_last_line_without_newline_is_kept_as_is(self) -> None:
        self.assertFalse(extract_round(self.rounds, 1).endswith("\n"))

    def test_missing_round(self) -> None:
        self.assertIsNone(extract_round(self.rounds, 2))
        self.assertIsNone(get_round(self.rounds, 5))

        with self.assertRaises(RoundNotFoundError) as ctx:
            require_round(self.rounds, 5)
        self.assertEqual(ctx.exception.total_rounds, 2)
        self.assertEqual(str(ctx.exception), "Round 5 not found. Total rounds: 2")

    def test_parse_round_number(self) -> None:
        self.assertEqual(parse_round_number("0"), 0)
        self.assertEqual(parse_round_number("12"), 12)
        for bad in ("-1", "abc", "1.5", ""):
            with self.assertRaises(ValueError):
                parse_round_number(bad)

    def test_list_rounds_has_no_content(self) -> None:
        listing = list_rounds(self.rounds, "session.jsonl").to_dict()

        self.assertEqual(listing["filePath"], "session.jsonl")
        self.assertEqual(listing["totalRounds"], 2)
        self.assertEqual(listing["rounds"][0], {
            "number": 0,
            "summary": "Fix bug",
            "entryCount": 3,
            "startTimestamp": "2026-02-16T10:00:00Z",
        })
        self.assertEqual(listing["rounds"][1]["entryCount"], 2)

    def test_filenames(self) -> None:
        self.assertEqual(round_filename("/tmp/logs/abc.jsonl", 2), "abc-2.jsonl")
        self.assertEqual(round_filename("notes.txt", 0), "notes.txt-0.jsonl")
        self.assertEqual(export_filename("abc", date(2026, 1, 2)), "abc-2026-01-02.jsonl")


if __name__ == "__main__":
    unittest.main()
