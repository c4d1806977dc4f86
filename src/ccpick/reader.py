"""Read a session JSONL file into RawEntry objects, keeping every line's exact text."""

import json
import logging
from pathlib import Path

from .models import MalformedEntryError, RawEntry, ReadError

logger = logging.getLogger("ccpick.reader")


def read_text(path: str | Path) -> str:
    """Read the whole file as UTF-8 text without newline translation."""
    p = Path(path)
    if not p.exists():
        raise ReadError(str(path), "no such file")
    if p.is_dir():
        raise ReadError(str(path), "is a directory")
    try:
        with open(p, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ReadError(str(path), f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
    except OSError as e:
        raise ReadError(str(path), e.strerror or str(e)) from e


def split_lines(text: str) -> list[str]:
    """Split on "\\n" only, keeping terminators ("\\r\\n" stays intact).

    str.splitlines() is not used: it also breaks on U+2028 and friends,
    which may appear unescaped inside JSON strings.
    """
    pieces = text.split("\n")
    lines = [piece + "\n" for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def parse_lines(text: str, source: str = "<string>", skip_malformed: bool = False) -> list[RawEntry]:
    """
    Parse JSONL text into RawEntry objects in file order.

    Blank lines are skipped. Each entry keeps its line terminator so the
    entries of a round can be concatenated back into the original bytes.

    Args:
        text: The file contents
        source: Name used in error messages
        skip_malformed: Log and skip unparseable lines instead of raising

    Raises:
        MalformedEntryError: a line is not a JSON object (unless skipping)
    """
    entries: list[RawEntry] = []

    for line_number, line in enumerate(split_lines(text), start=1):
        stripped = line.strip()
        if not stripped:
            continue

        try:
            data = json.loads(stripped)
        except json.JSONDecodeError as e:
            reason = f"{e.msg} at column {e.colno}"
            if skip_malformed:
                logger.warning("Skipping %s:%d: %s", source, line_number, reason)
                continue
            raise MalformedEntryError(source, line_number, reason) from e
        except RecursionError as e:
            reason = "nesting too deep"
            if skip_malformed:
                logger.warning("Skipping %s:%d: %s", source, line_number, reason)
                continue
            raise MalformedEntryError(source, line_number, reason) from e

        if not isinstance(data, dict):
            reason = f"expected a JSON object, got {type(data).__name__}"
            if skip_malformed:
                logger.warning("Skipping %s:%d: %s", source, line_number, reason)
                continue
            raise MalformedEntryError(source, line_number, reason)

        entries.append(RawEntry.from_dict(data, raw_line=line, line_number=line_number))

    return entries


def read_entries(path: str | Path, skip_malformed: bool = False) -> list[RawEntry]:
    """
    Read a session JSONL file into RawEntry objects.

    Args:
        path: Path to the session .jsonl file
        skip_malformed: Log and skip unparseable lines instead of aborting

    Returns:
        List of RawEntry instances in file order

    Raises:
        ReadError: the file is missing or unreadable
        MalformedEntryError: a line is not a JSON object (unless skipping)
    """
    text = read_text(path)
    entries = parse_lines(text, source=str(path), skip_malformed=skip_malformed)
    logger.debug("Read %d entries from %s", len(entries), path)
    return entries
