#!/usr/bin/env python3
"""Extract rounds back out as their original JSONL lines."""

from datetime import date
from pathlib import Path

from .models import Round, RoundListItem, RoundListOutput, RoundNotFoundError

# Rounds are numbered from 0 in listings, extraction, rendering and filenames.
ROUND_NUMBER_BASE = 0


def parse_round_number(value: str) -> int:
    """Parse a round number given on the command line."""
    try:
        number = int(value, 10)
    except (TypeError, ValueError):
        number = -1
    if number < ROUND_NUMBER_BASE:
        raise ValueError("Round number must be a non-negative integer")
    return number


def list_rounds(rounds: list[Round], file_path: str) -> RoundListOutput:
    """Project rounds into a listing without any entry content."""
    return RoundListOutput(
        file_path=file_path,
        total_rounds=len(rounds),
        rounds=tuple(
            RoundListItem(
                number=r.round_number,
                summary=r.summary,
                entry_count=r.entry_count,
                start_timestamp=r.start_timestamp,
            )
            for r in rounds
        ),
    )


def get_round(rounds: list[Round], round_number: int) -> Round | None:
    for r in rounds:
        if r.round_number == round_number:
            return r
    return None


def require_round(rounds: list[Round], round_number: int) -> Round:
    """Like get_round, but raise RoundNotFoundError when missing."""
    r = get_round(rounds, round_number)
    if r is None:
        raise RoundNotFoundError(round_number, len(rounds))
    return r


def round_text(round_: Round) -> str:
    return "".join(e.raw_content for e in round_.entries)


def extract_round(rounds: list[Round], round_number: int) -> str | None:
    """
    Reconstruct the original JSONL text of one round.

    The text is the concatenation of each entry's source line, terminators
    included, so re-parsing it yields exactly the original values.

    Returns:
        The round's JSONL text, or None if no such round exists
    """
    r = get_round(rounds, round_number)
    if r is None:
        return None
    return round_text(r)


def extract_rounds(rounds: list[Round]) -> str:
    """Reconstruct the whole file (every round, blank lines dropped)."""
    return "".join(round_text(r) for r in rounds)


def source_basename(source_file: str) -> str:
    name = Path(source_file).name
    if name.endswith(".jsonl"):
        name = name[: -len(".jsonl")]
    return name


def round_filename(source_file: str, round_number: int) -> str:
    """Output name for one extracted round: <basename>-<n>.jsonl"""
    return f"{source_basename(source_file)}-{round_number}.jsonl"


def export_filename(source_id: str, day: date | None = None) -> str:
    """Download name for an exported session: <source_id>-<YYYY-MM-DD>.jsonl"""
    day = day or date.today()
    return f"{source_id}-{day.isoformat()}.jsonl"
