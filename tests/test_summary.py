import json
import unittest

from ccpick.reader import parse_lines
from ccpick.segment import build_round
from ccpick.summary import PLACEHOLDER, truncate_label


def _round(*records: dict):
    return build_round(0, parse_lines("".join(json.dumps(r) + "\n" for r in records)))


def _user(content, **extra):
    return {"type": "user", "uuid": "u", "message": {"role": "user", "content": content}, **extra}


class SummaryTests(unittest.TestCase):
    def test_plain_string_prompt(self) -> None:
        self.assertEqual(_round(_user("Fix bug")).summary, "Fix bug")

    def test_text_blocks_are_joined_and_others_skipped(self) -> None:
        round_ = _round(_user([
            {"type": "text", "text": "Hello"},
            {"type": "image", "source": {"type": "base64", "media_type": "image/png", "data": "AAAA"}},
            {"type": "text", "text": "world"},
        ]))

        self.assertEqual(round_.summary, "Hello world")

    def test_whitespace_is_collapsed(self) -> None:
        self.assertEqual(_round(_user("  Fix\n\n  the\tbug  ")).summary, "Fix the bug")

    def test_long_text_is_truncated(self) -> None:
        summary = _round(_user("x" * 100)).summary

        self.assertEqual(summary, "x" * 80 + "...")

    def test_text_at_limit_is_not_truncated(self) -> None:
        self.assertEqual(_round(_user("y" * 80)).summary, "y" * 80)

    def test_placeholder_without_user_text(self) -> None:
        round_ = _round(
            {"type": "assistant", "uuid": "b", "message": {"role": "assistant", "content": "I said something"}},
            _user([{"type": "tool_result", "tool_use_id": "t1", "content": "output"}]),
        )

        self.assertEqual(round_.summary, PLACEHOLDER)

    def test_first_user_entry_with_text_wins(self) -> None:
        round_ = _round(
            _user("   "),
            _user("the real prompt"),
            _user("later"),
        )

        self.assertEqual(round_.summary, "the real prompt")

    def test_structured_content_text_field(self) -> None:
        self.assertEqual(_round(_user({"text": "from a dict"})).summary, "from a dict")

    def test_truncate_label_custom_limit(self) -> None:
        self.assertEqual(truncate_label("abcdef", 3), "abc...")
        self.assertEqual(truncate_label("abc", 3), "abc")


if __name__ == "__main__":
    unittest.main()
