"""Short labels for rounds, taken from the first user text."""

import re

from .models import Round, RoundEntry, content_text

SUMMARY_MAX_LENGTH = 80
ELLIPSIS = "..."
PLACEHOLDER = "No description"

_WHITESPACE = re.compile(r"\s+")


def truncate_label(text: str, limit: int = SUMMARY_MAX_LENGTH) -> str:
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def first_user_text(entries: tuple[RoundEntry, ...] | list[RoundEntry]) -> str:
    """Collapsed text of the first user entry that has any."""
    for round_entry in entries:
        entry = round_entry.entry
        if entry is None or entry.role != "user":
            continue
        text = _WHITESPACE.sub(" ", content_text(entry.content)).strip()
        if text:
            return text
    return ""


def summarize(round_: Round) -> str:
    """Label a round by its first user text; never empty."""
    text = first_user_text(round_.entries)
    if not text:
        return PLACEHOLDER
    return truncate_label(text)
