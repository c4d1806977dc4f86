"""ccpick - Split Claude Code session logs into rounds, extract them, render them.

Library usage:
    from ccpick import read_entries, segment, list_rounds, extract_round
    from ccpick import render_round, render_file, RenderOptions
"""

from .models import (
    # Errors
    CCPickError,
    ReadError,
    MalformedEntryError,
    RoundNotFoundError,
    WriteError,
    # Content
    TextContent,
    BlockContent,
    StructuredContent,
    NoContent,
    Content,
    classify_content,
    content_text,
    display_text,
    # Entries and rounds
    RawEntry,
    RoundEntry,
    Round,
    RoundListItem,
    RoundListOutput,
)

from .reader import read_entries, parse_lines
from .segment import segment
from .summary import summarize, truncate_label, SUMMARY_MAX_LENGTH, PLACEHOLDER
from .extract import (
    ROUND_NUMBER_BASE,
    parse_round_number,
    list_rounds,
    get_round,
    require_round,
    extract_round,
    extract_rounds,
    round_filename,
    export_filename,
)
from .render import (
    RenderOptions,
    render_round,
    render_file,
    render_index,
    html_filename,
    file_html_filename,
)
from .output import write_text, write_batch, BatchResult

__all__ = [
    # Errors
    "CCPickError", "ReadError", "MalformedEntryError", "RoundNotFoundError", "WriteError",
    # Content
    "TextContent", "BlockContent", "StructuredContent", "NoContent", "Content",
    "classify_content", "content_text", "display_text",
    # Entries and rounds
    "RawEntry", "RoundEntry", "Round", "RoundListItem", "RoundListOutput",
    # Core functions
    "read_entries", "parse_lines", "segment", "summarize", "truncate_label",
    "SUMMARY_MAX_LENGTH", "PLACEHOLDER",
    # Extract
    "ROUND_NUMBER_BASE", "parse_round_number", "list_rounds", "get_round", "require_round",
    "extract_round", "extract_rounds", "round_filename", "export_filename",
    # Render
    "RenderOptions", "render_round", "render_file", "render_index",
    "html_filename", "file_html_filename",
    # Output
    "write_text", "write_batch", "BatchResult",
]
