"""
Session Round Data Models
=========================

Data models for splitting Claude Code session logs
(~/.claude/projects/<project>/<session>.jsonl) into rounds.

JSONL STRUCTURE OVERVIEW
------------------------

Each line in the JSONL is an entry with a `type` field:

    {"type": "user", "uuid": "a", "parentUuid": null, "message": {"role": "user", "content": "Fix bug"}, ...}
    {"type": "assistant", "uuid": "b", "parentUuid": "a", "message": {"role": "assistant", "content": [...]}, ...}
    {"type": "file-history-snapshot", "messageId": "...", "snapshot": {...}}

Entries are linked backwards through `parentUuid`. The `message.content`
is either a plain string or a list of content blocks (text, thinking,
tool_use, tool_result, image, ...). Anything else is kept as-is.

ROUNDS
------

A round is one user prompt plus everything that causally follows it
(assistant replies, tool results, snapshots, meta entries) up to the next
user prompt. Rounds keep the exact original line text of every entry so a
round can be written back out byte for byte.

Example:

    from ccpick import read_entries, segment, extract_round

    rounds = segment(read_entries("session.jsonl"))
    print(rounds[0].summary)
    print(extract_round(rounds, 0), end="")
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


# =============================================================================
# ERRORS
# =============================================================================

class CCPickError(Exception):
    """Base class for errors reported to the command surface."""


class ReadError(CCPickError):
    """Raised when the source log cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class MalformedEntryError(CCPickError):
    """Raised when a line of the source log is not a JSON object."""

    def __init__(self, path: str, line_number: int, reason: str) -> None:
        self.path = path
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"{path}:{line_number}: malformed entry ({reason})")


class RoundNotFoundError(CCPickError):
    """Raised when a requested round number does not exist."""

    def __init__(self, round_number: int, total_rounds: int) -> None:
        self.round_number = round_number
        self.total_rounds = total_rounds
        super().__init__(f"Round {round_number} not found. Total rounds: {total_rounds}")


class WriteError(CCPickError):
    """Raised when an output file or directory cannot be written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


# =============================================================================
# MESSAGE CONTENT (message.content as a tagged union)
# =============================================================================

# Block types whose `text` field counts as readable text.
TEXT_BLOCK_TYPES = frozenset({"text"})


@dataclass(frozen=True)
class TextContent:
    """Content given as a plain string."""
    text: str


@dataclass(frozen=True)
class BlockContent:
    """Content given as a list of typed blocks."""
    blocks: tuple[Any, ...]

    def text_blocks(self) -> list[str]:
        return [
            b.get("text", "")
            for b in self.blocks
            if isinstance(b, dict) and b.get("type") in TEXT_BLOCK_TYPES and isinstance(b.get("text"), str)
        ]


@dataclass(frozen=True)
class StructuredContent:
    """Any other JSON value (object, number, ...)."""
    value: Any


@dataclass(frozen=True)
class NoContent:
    """Content is absent or null."""


Content = TextContent | BlockContent | StructuredContent | NoContent


def classify_content(value: Any) -> Content:
    """Map a raw `message.content` value onto its variant."""
    if value is None:
        return NoContent()
    if isinstance(value, str):
        return TextContent(value)
    if isinstance(value, list):
        return BlockContent(tuple(value))
    return StructuredContent(value)


def content_text(content: Content) -> str:
    """Readable text of a content value, or "" when it has none."""
    if isinstance(content, TextContent):
        return content.text
    if isinstance(content, BlockContent):
        return "\n".join(content.text_blocks())
    if isinstance(content, StructuredContent):
        value = content.value
        if isinstance(value, dict) and isinstance(value.get("text"), str):
            return value["text"]
        return ""
    return ""


def pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def display_text(content: Content) -> str:
    """Text for display: the readable text, else pretty-printed JSON."""
    text = content_text(content)
    if text.strip():
        return text
    if isinstance(content, BlockContent):
        return pretty_json(list(content.blocks)) if content.blocks else ""
    if isinstance(content, StructuredContent):
        return pretty_json(content.value)
    return text


# =============================================================================
# RAW ENTRY (a single line in the JSONL)
# =============================================================================

def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None when it is unusable."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError, TypeError):
        return None


@dataclass(frozen=True)
class RawEntry:
    """
    A single entry (line) in the session JSONL.

    Key fields:
    - type: "user", "assistant", "file-history-snapshot", or anything else
    - uuid: Unique identifier for this entry ("" when the line has none)
    - parent_uuid: The entry this one follows, None for chain roots
    - timestamp: ISO-8601 string as stored
    - raw_line: The exact source text, including its line terminator
    """
    type: str
    uuid: str
    parent_uuid: str | None
    timestamp: str
    data: dict = field(repr=False)
    raw_line: str = field(repr=False)
    line_number: int = 0
    is_meta: bool = False
    is_sidechain: bool = False

    @classmethod
    def from_dict(cls, d: dict, raw_line: str, line_number: int = 0) -> "RawEntry":
        entry_type = d.get("type", "")
        if not isinstance(entry_type, str):
            entry_type = str(entry_type)

        timestamp = d.get("timestamp") or ""
        if not timestamp and entry_type == "file-history-snapshot":
            snap = d.get("snapshot")
            if isinstance(snap, dict):
                timestamp = snap.get("timestamp") or ""

        uuid = d.get("uuid") or d.get("messageId") or ""
        parent_uuid = d.get("parentUuid", d.get("parent_uuid"))

        return cls(
            type=entry_type,
            uuid=str(uuid),
            parent_uuid=str(parent_uuid) if parent_uuid else None,
            timestamp=str(timestamp),
            data=d,
            raw_line=raw_line,
            line_number=line_number,
            is_meta=d.get("isMeta") is True,
            is_sidechain=d.get("isSidechain") is True,
        )

    @property
    def message(self) -> dict | None:
        msg = self.data.get("message")
        return msg if isinstance(msg, dict) else None

    @property
    def role(self) -> str:
        msg = self.message
        if msg is None:
            return ""
        role = msg.get("role", "")
        return role if isinstance(role, str) else ""

    @property
    def content(self) -> Content:
        msg = self.message
        if msg is None:
            return NoContent()
        return classify_content(msg.get("content"))

    @property
    def parsed_timestamp(self) -> datetime | None:
        return parse_timestamp(self.timestamp)

    @property
    def is_snapshot(self) -> bool:
        return self.type == "file-history-snapshot"

    @property
    def is_user(self) -> bool:
        """Entry speaks as the user (message role, else the entry type)."""
        if self.message is not None:
            return self.role == "user"
        return self.type == "user"

    @property
    def is_tool_result(self) -> bool:
        """User-role entry whose content is only tool results."""
        content = self.content
        if not self.is_user or not isinstance(content, BlockContent) or not content.blocks:
            return False
        return all(isinstance(b, dict) and b.get("type") == "tool_result" for b in content.blocks)

    @property
    def is_prompt(self) -> bool:
        """User-initiated turn: user role with something besides tool results."""
        if not self.is_user:
            return False
        content = self.content
        if isinstance(content, BlockContent):
            return bool(content.blocks) and not self.is_tool_result
        return not isinstance(content, NoContent) or self.message is None

    @property
    def issues_tool_call(self) -> bool:
        content = self.content
        return isinstance(content, BlockContent) and any(
            isinstance(b, dict) and b.get("type") == "tool_use" for b in content.blocks
        )


# =============================================================================
# ROUNDS
# =============================================================================

@dataclass(frozen=True)
class RoundEntry:
    """A RawEntry as it appears inside a round."""
    type: str
    uuid: str
    parent_uuid: str | None
    timestamp: str
    raw_content: str = field(repr=False)
    display_content: str = field(default="", repr=False)
    entry: RawEntry | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_raw(cls, entry: RawEntry) -> "RoundEntry":
        if entry.is_snapshot:
            display = ""
        else:
            display = display_text(entry.content)
        return cls(
            type=entry.type,
            uuid=entry.uuid,
            parent_uuid=entry.parent_uuid,
            timestamp=entry.timestamp,
            raw_content=entry.raw_line,
            display_content=display,
            entry=entry,
        )


@dataclass(frozen=True)
class Round:
    """One user turn and everything that followed it."""
    round_number: int
    start_uuid: str
    start_timestamp: str
    end_timestamp: str
    entries: tuple[RoundEntry, ...]
    summary: str = ""

    @property
    def entry_count(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class RoundListItem:
    number: int
    summary: str
    entry_count: int
    start_timestamp: str


@dataclass(frozen=True)
class RoundListOutput:
    """Listing of a file's rounds (no entry content)."""
    file_path: str
    total_rounds: int
    rounds: tuple[RoundListItem, ...] = ()

    def to_dict(self) -> dict:
        return {
            "filePath": self.file_path,
            "totalRounds": self.total_rounds,
            "rounds": [
                {
                    "number": r.number,
                    "summary": r.summary,
                    "entryCount": r.entry_count,
                    "startTimestamp": r.start_timestamp,
                }
                for r in self.rounds
            ],
        }
