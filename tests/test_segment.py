import json
import unittest

from ccpick.reader import parse_lines
from ccpick.segment import segment


def _entries(*records: dict):
    return parse_lines("".join(json.dumps(r) + "\n" for r in records))


def _user(uuid, text, parent=None, **extra):
    return {"type": "user", "uuid": uuid, "parentUuid": parent, "message": {"role": "user", "content": text}, **extra}


def _assistant(uuid, parent, content="ok", **extra):
    return {"type": "assistant", "uuid": uuid, "parentUuid": parent, "message": {"role": "assistant", "content": content}, **extra}


def _tool_use(uuid, parent, tool_id="toolu_1"):
    return _assistant(uuid, parent, [{"type": "tool_use", "id": tool_id, "name": "Bash", "input": {"command": "ls"}}])


def _tool_result(uuid, parent, tool_id="toolu_1"):
    return {
        "type": "user",
        "uuid": uuid,
        "parentUuid": parent,
        "message": {"role": "user", "content": [{"type": "tool_result", "tool_use_id": tool_id, "content": "a.txt"}]},
    }


def _snapshot(message_id):
    return {"type": "file-history-snapshot", "messageId": message_id, "snapshot": {"messageId": message_id}}


def _uuids(round_):
    return [e.uuid for e in round_.entries]


class SegmentTests(unittest.TestCase):
    def test_two_independent_prompts(self) -> None:
        text = (
            '{"type":"user","uuid":"a","message":{"role":"user","content":"Fix bug"}}\n'
            '{"type":"assistant","uuid":"b","parentUuid":"a","message":{"role":"assistant","content":"Done"}}\n'
            '{"type":"user","uuid":"c","message":{"role":"user","content":"Thanks"}}\n'
        )
        rounds = segment(parse_lines(text))

        self.assertEqual(len(rounds), 2)
        self.assertEqual(_uuids(rounds[0]), ["a", "b"])
        self.assertEqual(_uuids(rounds[1]), ["c"])
        self.assertEqual(rounds[0].summary, "Fix bug")
        self.assertEqual(rounds[1].summary, "Thanks")
        self.assertEqual([r.round_number for r in rounds], [0, 1])

    def test_prompt_chained_to_previous_reply_opens_round(self) -> None:
        rounds = segment(_entries(
            _user("a", "first"),
            _assistant("b", "a"),
            _user("c", "second", parent="b"),
            _assistant("d", "c"),
        ))

        self.assertEqual([_uuids(r) for r in rounds], [["a", "b"], ["c", "d"]])

    def test_snapshot_stays_in_open_round(self) -> None:
        rounds = segment(_entries(_user("a", "go"), _snapshot("s1"), _assistant("b", "a")))

        self.assertEqual(len(rounds), 1)
        self.assertEqual(_uuids(rounds[0]), ["a", "s1", "b"])

    def test_leading_snapshot_and_meta_join_first_round(self) -> None:
        rounds = segment(_entries(
            _snapshot("s0"),
            _user("m", "<local-command-caveat>", isMeta=True),
            _user("a", "hello"),
            _assistant("b", "a"),
        ))

        self.assertEqual(len(rounds), 1)
        self.assertEqual(_uuids(rounds[0]), ["s0", "m", "a", "b"])
        self.assertEqual(rounds[0].start_uuid, "s0")
        self.assertEqual(rounds[0].summary, "<local-command-caveat>")

    def test_meta_after_round_does_not_open_one(self) -> None:
        rounds = segment(_entries(_user("a", "hi"), _user("m", "meta text", isMeta=True), _assistant("b", "a")))

        self.assertEqual(len(rounds), 1)
        self.assertEqual(_uuids(rounds[0]), ["a", "m", "b"])

    def test_only_meta_entries_form_one_round(self) -> None:
        rounds = segment(_entries(_snapshot("s0"), _user("m", "meta", isMeta=True)))

        self.assertEqual(len(rounds), 1)
        self.assertEqual(_uuids(rounds[0]), ["s0", "m"])
        self.assertEqual(rounds[0].summary, "meta")

    def test_first_entry_always_opens_round(self) -> None:
        rounds = segment(_entries(_assistant("b", "gone"), _assistant("c", "b")))

        self.assertEqual(len(rounds), 1)
        self.assertEqual(_uuids(rounds[0]), ["b", "c"])

    def test_dangling_parent_on_prompt_opens_round(self) -> None:
        rounds = segment(_entries(_user("a", "one"), _assistant("b", "a"), _user("c", "two", parent="missing")))

        self.assertEqual([_uuids(r) for r in rounds], [["a", "b"], ["c"]])

    def test_dangling_parent_on_reply_stays_in_round(self) -> None:
        rounds = segment(_entries(_user("a", "one"), _assistant("x", "missing")))

        self.assertEqual([_uuids(r) for r in rounds], [["a", "x"]])

    def test_tool_results_stay_in_round(self) -> None:
        rounds = segment(_entries(
            _user("a", "list files"),
            _tool_use("b", "a"),
            _tool_result("t", "b"),
            _assistant("d", "t", "There is a.txt"),
        ))

        self.assertEqual(len(rounds), 1)
        self.assertEqual(_uuids(rounds[0]), ["a", "b", "t", "d"])

    def test_prompt_answering_tool_call_stays_in_round(self) -> None:
        rounds = segment(_entries(
            _user("a", "delete it"),
            _tool_use("b", "a"),
            _user("u", "[Request interrupted by user for tool use]", parent="b"),
            _assistant("e", "u"),
            _user("f", "next thing", parent="e"),
        ))

        self.assertEqual([_uuids(r) for r in rounds], [["a", "b", "u", "e"], ["f"]])

    def test_sidechain_prompt_does_not_open_round(self) -> None:
        rounds = segment(_entries(
            _user("a", "research"),
            _tool_use("b", "a"),
            _user("s", "subagent task", isSidechain=True),
            _assistant("s2", "s", isSidechain=True),
            _tool_result("t", "b"),
        ))

        self.assertEqual(len(rounds), 1)
        self.assertEqual(_uuids(rounds[0]), ["a", "b", "s", "s2", "t"])

    def test_every_entry_lands_in_exactly_one_round(self) -> None:
        entries = _entries(
            _snapshot("s0"),
            _user("a", "one"),
            _tool_use("b", "a"),
            _tool_result("t", "b"),
            _assistant("c", "t"),
            _snapshot("s1"),
            _user("d", "two", parent="c"),
            {"type": "summary", "summary": "x", "leafUuid": "d"},
            _assistant("e", "d"),
        )
        rounds = segment(entries)

        flattened = [e.raw_content for r in rounds for e in r.entries]
        self.assertEqual(flattened, [e.raw_line for e in entries])
        self.assertEqual(len(rounds), 2)

    def test_segmentation_is_idempotent(self) -> None:
        entries = _entries(_user("a", "one"), _assistant("b", "a"), _user("c", "two"))

        self.assertEqual(segment(entries), segment(entries))

    def test_round_numbers_ignore_source_fields(self) -> None:
        rounds = segment(_entries(_user("a", "one", roundNumber=7), _user("b", "two", roundNumber=3)))

        self.assertEqual([r.round_number for r in rounds], [0, 1])

    def test_timestamps_span_round(self) -> None:
        rounds = segment(_entries(
            _user("a", "one", timestamp="2026-02-16T10:00:00Z"),
            _assistant("b", "a", timestamp="2026-02-16T10:00:05Z"),
            _snapshot("s1"),
        ))

        self.assertEqual(rounds[0].start_timestamp, "2026-02-16T10:00:00Z")
        self.assertEqual(rounds[0].end_timestamp, "2026-02-16T10:00:05Z")

    def test_empty_input(self) -> None:
        self.assertEqual(segment([]), [])


if __name__ == "__main__":
    unittest.main()
