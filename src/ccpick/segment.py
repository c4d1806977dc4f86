"""Split a session's entries into rounds.

A round starts at a user prompt and collects everything that follows it
until the next prompt: assistant replies, tool results, file-history
snapshots, meta entries. The pass is linear over the entry list; parent
links are resolved through a uuid -> round index map rather than by
walking a tree.
"""

import logging
from dataclasses import replace

from .models import RawEntry, Round, RoundEntry
from .summary import summarize

logger = logging.getLogger("ccpick.segment")


class _Segmenter:
    """State for one pass over an entry list."""

    def __init__(self) -> None:
        self.groups: list[list[RawEntry]] = []
        self.pending: list[RawEntry] = []  # meta/snapshot entries seen before any round
        self.round_of: dict[str, int] = {}  # uuid -> index into groups
        self.tool_callers: set[str] = set()  # uuids in the open round that issued tool_use

    @property
    def current(self) -> int:
        return len(self.groups) - 1

    def feed(self, entry: RawEntry) -> None:
        if entry.is_meta or entry.is_snapshot:
            if self.groups:
                self._append(entry)
            else:
                self.pending.append(entry)
            return

        if not self.groups or self._opens_round(entry):
            self._open(entry)
        else:
            self._append(entry)

    def finish(self) -> list[list[RawEntry]]:
        if self.pending:
            # Nothing ever opened a round: keep the entries as one round.
            self.groups.append(self.pending)
            self.pending = []
        return self.groups

    def _opens_round(self, entry: RawEntry) -> bool:
        if entry.is_sidechain or not entry.is_prompt:
            return False
        parent = entry.parent_uuid
        if parent is None:
            return True
        index = self.round_of.get(parent)
        if index is None:
            logger.debug("Line %d: parent %s not found, treating as chain root", entry.line_number, parent)
            return True
        # A prompt answering the open round's tool call stays in that round.
        return not (index == self.current and parent in self.tool_callers)

    def _open(self, entry: RawEntry) -> None:
        self.groups.append([])
        self.tool_callers = set()
        for held in self.pending:
            self._append(held)
        self.pending = []
        self._append(entry)

    def _append(self, entry: RawEntry) -> None:
        self.groups[-1].append(entry)
        if entry.uuid:
            self.round_of[entry.uuid] = self.current
            if entry.issues_tool_call:
                self.tool_callers.add(entry.uuid)
            else:
                self.tool_callers.discard(entry.uuid)


def _first_timestamp(entries: list[RawEntry]) -> str:
    for entry in entries:
        if entry.timestamp:
            return entry.timestamp
    return ""


def build_round(round_number: int, entries: list[RawEntry]) -> Round:
    """Build a Round (with its summary) from a group of entries."""
    round_ = Round(
        round_number=round_number,
        start_uuid=entries[0].uuid if entries else "",
        start_timestamp=_first_timestamp(entries),
        end_timestamp=_first_timestamp(list(reversed(entries))),
        entries=tuple(RoundEntry.from_raw(e) for e in entries),
    )
    return replace(round_, summary=summarize(round_))


def segment(entries: list[RawEntry]) -> list[Round]:
    """
    Partition entries into rounds, in file order.

    Every entry lands in exactly one round. Meta entries and snapshots
    never start a round; entries before the first round are prepended to
    it. A parent uuid that does not match any earlier entry is treated as
    absent.

    Args:
        entries: RawEntry list as returned by read_entries

    Returns:
        Rounds numbered from 0 in output order
    """
    segmenter = _Segmenter()
    for entry in entries:
        segmenter.feed(entry)
    groups = segmenter.finish()

    rounds = [build_round(i, group) for i, group in enumerate(groups)]
    logger.debug("Segmented %d entries into %d rounds", len(entries), len(rounds))
    return rounds
