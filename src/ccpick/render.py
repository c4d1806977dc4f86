#!/usr/bin/env python3
"""Render rounds as self-contained HTML documents.

Three documents are produced:
- a single round (render_round)
- a whole file, every round in one page behind an index (render_file)
- an index page linking per-round files (render_index)

All styling is inline; the theme only swaps the palette.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from html import escape

from .config import THEMES
from .extract import source_basename
from .models import (
    BlockContent, NoContent, RawEntry, Round, RoundEntry, StructuredContent, TextContent,
    content_text, pretty_json,
)

logger = logging.getLogger("ccpick.render")

INDEX_FILENAME = "index.html"


@dataclass(frozen=True)
class RenderOptions:
    theme: str = "light"
    source_file: str = ""

    def __post_init__(self) -> None:
        if self.theme not in THEMES:
            raise ValueError(f'Theme must be one of: {", ".join(THEMES)}')


# =============================================================================
# FILENAMES
# =============================================================================

def html_filename(source_file: str, round_number: int) -> str:
    return f"{source_basename(source_file)}-{round_number}.html"


def file_html_filename(source_file: str) -> str:
    return f"{source_basename(source_file)}.html"


# =============================================================================
# FORMATTING HELPERS
# =============================================================================

def _local_tz():
    """Get the current local timezone (computed fresh each call)."""
    return datetime.now().astimezone().tzinfo


def fmt_date(dt: datetime | None) -> str:
    """Format datetime as 'Feb 4, 2026 4:16 PM'."""
    if dt is None:
        return ""
    try:
        local = dt.astimezone(_local_tz()) if dt.tzinfo else dt
    except (OverflowError, ValueError):
        # out of range once shifted to local time (e.g. year 1)
        return ""
    hour = local.hour % 12 or 12
    return f"{local.strftime('%b')} {local.day}, {local.year} {hour}:{local.strftime('%M')} {local.strftime('%p')}"


def fmt_offset(ts: datetime | None, start: datetime | None) -> str:
    """Time since the round started, e.g. '+1m 05s'."""
    if ts is None or start is None:
        return ""
    try:
        seconds = int((ts - start).total_seconds())
    except TypeError:
        # naive vs aware
        return ""
    sign = "+" if seconds >= 0 else "-"
    seconds = abs(seconds)
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{sign}{hours}h {minutes:02d}m"
    if minutes:
        return f"{sign}{minutes}m {secs:02d}s"
    return f"{sign}{secs}s"


def speaker_of(entry: RawEntry) -> tuple[str, str]:
    """(label, css class) for a conversational entry."""
    if entry.is_tool_result:
        return "Tool", "tool"
    if entry.role == "user":
        return "You", "user"
    if entry.role == "assistant":
        return "Claude", "claude"
    return (entry.type or "entry"), "other"


# =============================================================================
# THEMES
# =============================================================================

PALETTES = {
    "light": {
        "bg": "#ffffff",
        "surface": "#f5f7fa",
        "text": "#1a1a1a",
        "text-dim": "#666666",
        "border": "#e1e8ed",
        "accent": "#2563eb",
        "user": "#2563eb",
        "claude": "#c2410c",
        "tool": "#0e7490",
        "other": "#6b7280",
        "snapshot": "#7c3aed",
        "thinking": "#888888",
        "code-bg": "#f0f2f5",
        "error": "#dc2626",
    },
    "dark": {
        "bg": "#1a1a1a",
        "surface": "#2d2d2d",
        "text": "#e5e5e5",
        "text-dim": "#a0a0a0",
        "border": "#404040",
        "accent": "#3b82f6",
        "user": "#ffffff",
        "claude": "#de7356",
        "tool": "#56b6c2",
        "other": "#8899aa",
        "snapshot": "#b668cd",
        "thinking": "#777777",
        "code-bg": "#0d1117",
        "error": "#f85149",
    },
}


def palette_css(theme: str) -> str:
    colors = PALETTES[theme]
    lines = [f"  --{name}: {value};" for name, value in colors.items()]
    return ":root {\n" + "\n".join(lines) + "\n}"


HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
{palette}
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
body {{
  font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
  background: var(--bg);
  color: var(--text);
  line-height: 1.6;
}}
.container {{
  max-width: 900px;
  margin: 0 auto;
  padding: 20px;
}}
.header {{
  background: var(--surface);
  border: 1px solid var(--border);
  border-radius: 10px;
  padding: 20px 24px;
  margin-bottom: 24px;
}}
.header h1 {{
  font-size: 1.3em;
  margin-bottom: 6px;
}}
.meta {{
  color: var(--text-dim);
  font-size: 0.85em;
}}
.index {{
  margin-bottom: 32px;
}}
.round-link a {{
  display: flex;
  align-items: baseline;
  gap: 14px;
  padding: 12px 16px;
  margin-bottom: 8px;
  background: var(--surface);
  border: 1px solid var(--border);
  border-radius: 8px;
  text-decoration: none;
  color: var(--text);
}}
.round-link a:hover {{
  border-color: var(--accent);
}}
.round-num {{
  font-weight: 700;
  color: var(--accent);
  white-space: nowrap;
}}
.round-summary {{
  flex: 1;
}}
.round-meta {{
  color: var(--text-dim);
  font-size: 0.85em;
  white-space: nowrap;
}}
.round {{
  margin-bottom: 40px;
}}
.round-title {{
  font-size: 1.05em;
  padding: 10px 0;
  border-bottom: 1px solid var(--border);
  margin-bottom: 14px;
}}
.turn {{
  margin-bottom: 12px;
  padding: 12px 16px;
  border-radius: 6px;
  border-left: 3px solid var(--other);
  background: var(--surface);
}}
.turn-user {{ border-left-color: var(--user); }}
.turn-claude {{ border-left-color: var(--claude); }}
.turn-tool {{ border-left-color: var(--tool); }}
.turn-header {{
  display: flex;
  align-items: baseline;
  gap: 10px;
  margin-bottom: 6px;
}}
.speaker {{
  font-weight: 700;
  font-size: 0.8em;
  text-transform: uppercase;
  letter-spacing: 0.05em;
  color: var(--other);
}}
.speaker-user {{ color: var(--user); }}
.speaker-claude {{ color: var(--claude); }}
.speaker-tool {{ color: var(--tool); }}
.badge {{
  font-size: 0.7em;
  color: var(--text-dim);
  border: 1px solid var(--border);
  border-radius: 4px;
  padding: 0 5px;
}}
.timestamp {{
  font-size: 0.75em;
  color: var(--text-dim);
  font-family: "SF Mono", "Fira Code", monospace;
}}
.snapshot {{
  display: flex;
  gap: 10px;
  align-items: baseline;
  margin-bottom: 12px;
  padding: 4px 16px;
  font-size: 0.8em;
  color: var(--snapshot);
  opacity: 0.75;
}}
.block {{ margin-bottom: 8px; }}
.block:last-child {{ margin-bottom: 0; }}
.block-text {{
  white-space: pre-wrap;
  word-wrap: break-word;
}}
.block-thinking {{
  font-size: 0.85em;
  color: var(--thinking);
  white-space: pre-wrap;
  word-wrap: break-word;
}}
.tool-name {{
  color: var(--tool);
  font-weight: 600;
  font-family: "SF Mono", "Fira Code", monospace;
  font-size: 0.85em;
  display: block;
  margin-bottom: 4px;
}}
.block-code {{
  background: var(--code-bg);
  border: 1px solid var(--border);
  border-radius: 4px;
  padding: 8px 12px;
  font-family: "SF Mono", "Fira Code", monospace;
  font-size: 0.82em;
  white-space: pre-wrap;
  word-wrap: break-word;
  max-height: 400px;
  overflow-y: auto;
}}
.block-error {{
  border-color: var(--error);
  color: var(--error);
}}
.block-image {{
  color: var(--text-dim);
  font-style: italic;
}}
</style>
</head>
<body class="theme-{theme}">
<div class="container">
{body}
</div>
</body>
</html>
"""


def _document(title: str, body: str, theme: str) -> str:
    return HTML_TEMPLATE.format(
        title=escape(title),
        palette=palette_css(theme),
        theme=escape(theme),
        body=body,
    )


# =============================================================================
# ENTRY RENDERING
# =============================================================================

def _code(text: str, extra_class: str = "") -> str:
    cls = f"block block-code {extra_class}".rstrip()
    return f'<pre class="{cls}">{escape(text)}</pre>'


def _tool_result_text(value) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        text = content_text(BlockContent(tuple(value)))
        if text.strip():
            return text
    return pretty_json(value)


def render_block(block) -> str:
    """Render one content block; unknown shapes become pretty JSON."""
    if not isinstance(block, dict):
        return _code(pretty_json(block))

    kind = block.get("type")
    if kind == "text" and isinstance(block.get("text"), str):
        return f'<div class="block block-text">{escape(block["text"])}</div>'
    if kind == "thinking" and isinstance(block.get("thinking"), str):
        return f'<div class="block block-thinking">{escape(block["thinking"])}</div>'
    if kind == "tool_use":
        name = escape(str(block.get("name", "")))
        return (
            f'<div class="block"><span class="tool-name">{name}</span>'
            f'{_code(pretty_json(block.get("input", {})))}</div>'
        )
    if kind == "tool_result":
        extra = "block-error" if block.get("is_error") else ""
        return _code(_tool_result_text(block.get("content", "")), extra)
    if kind == "image":
        source = block.get("source")
        media = source.get("media_type", "image") if isinstance(source, dict) else "image"
        return f'<div class="block block-image">[Image: {escape(str(media))}]</div>'
    return _code(pretty_json(block))


def render_body(entry: RawEntry) -> str:
    """Body of a conversational entry, dispatched on its content variant."""
    content = entry.content
    if isinstance(content, TextContent):
        return f'<div class="block block-text">{escape(content.text)}</div>'
    if isinstance(content, BlockContent):
        return "\n".join(render_block(b) for b in content.blocks)
    if isinstance(content, StructuredContent):
        text = content_text(content)
        if text.strip():
            return f'<div class="block block-text">{escape(text)}</div>'
        return _code(pretty_json(content.value))
    if isinstance(content, NoContent) and entry.message is None:
        return _code(pretty_json(entry.data))
    return '<div class="block block-image">(no content)</div>'


def _render_snapshot(entry: RawEntry, round_start: datetime | None) -> str:
    ts = entry.parsed_timestamp
    offset = escape(fmt_offset(ts, round_start))
    title = escape(entry.timestamp)
    anchor = f' id="{escape(entry.uuid)}"' if entry.uuid else ""
    return (
        f'<div class="snapshot"{anchor}>'
        f'<span>&#x1F4C1; File History Snapshot</span>'
        f'<span class="timestamp" title="{title}">{offset}</span>'
        f'</div>'
    )


def _render_bubble(entry: RawEntry, round_start: datetime | None) -> str:
    label, cls = speaker_of(entry)
    ts = entry.parsed_timestamp
    offset = escape(fmt_offset(ts, round_start))
    anchor = f' id="{escape(entry.uuid)}"' if entry.uuid else ""

    parts = [f'<div class="turn turn-{cls}"{anchor}>', '<div class="turn-header">']
    parts.append(f'<span class="speaker speaker-{cls}">{escape(label)}</span>')
    if entry.is_meta:
        parts.append('<span class="badge">meta</span>')
    if entry.is_sidechain:
        parts.append('<span class="badge">sidechain</span>')
    if entry.timestamp:
        parts.append(f'<span class="timestamp" title="{escape(entry.timestamp)}">{offset or escape(entry.timestamp)}</span>')
    parts.append("</div>")
    parts.append(render_body(entry))
    parts.append("</div>")
    return "\n".join(parts)


def _render_fallback(round_entry: RoundEntry) -> str:
    return (
        f'<div class="turn turn-other"><div class="turn-header">'
        f'<span class="speaker">{escape(round_entry.type or "entry")}</span></div>'
        f'{_code(round_entry.raw_content.rstrip())}</div>'
    )


def render_entry(round_entry: RoundEntry, round_start: datetime | None = None) -> str:
    """Render one entry; never raises on unexpected shapes."""
    entry = round_entry.entry
    if entry is None:
        return _render_fallback(round_entry)
    try:
        if entry.is_snapshot:
            return _render_snapshot(entry, round_start)
        return _render_bubble(entry, round_start)
    except (TypeError, ValueError, AttributeError, KeyError, OverflowError) as e:
        logger.debug("Falling back to raw rendering for line %d: %s", entry.line_number, e)
        return _render_fallback(round_entry)


def _round_start(round_: Round) -> datetime | None:
    for round_entry in round_.entries:
        if round_entry.entry is not None and round_entry.entry.parsed_timestamp is not None:
            return round_entry.entry.parsed_timestamp
    return None


def render_round_section(round_: Round) -> str:
    """A round as a <section> anchored at #round-<n>."""
    start = _round_start(round_)
    parts = [f'<section class="round" id="round-{round_.round_number}">']
    parts.append(
        f'<h2 class="round-title">Round #{round_.round_number} &middot; {escape(round_.summary)}</h2>'
    )
    for round_entry in round_.entries:
        parts.append(render_entry(round_entry, start))
    parts.append("</section>")
    return "\n".join(parts)


# =============================================================================
# DOCUMENTS
# =============================================================================

def _header(title: str, meta: list[str]) -> str:
    lines = [f'<div class="header"><h1>{escape(title)}</h1>']
    for m in meta:
        if m:
            lines.append(f'<div class="meta">{escape(m)}</div>')
    lines.append("</div>")
    return "\n".join(lines)


def _round_link(round_: Round, href: str) -> str:
    return (
        f'<div class="round-link"><a href="{escape(href)}">'
        f'<span class="round-num">Round #{round_.round_number}</span>'
        f'<span class="round-summary">{escape(round_.summary)}</span>'
        f'<span class="round-meta">{round_.entry_count} entries</span>'
        f'</a></div>'
    )


def render_round(round_: Round, options: RenderOptions | None = None) -> str:
    """Render one round as a standalone HTML document."""
    options = options or RenderOptions()
    start = _round_start(round_)
    header = _header(
        f"Round #{round_.round_number}: {round_.summary}",
        [
            options.source_file,
            f"{round_.entry_count} entries",
            fmt_date(start),
        ],
    )
    body = header + "\n" + render_round_section(round_)
    return _document(f"Round #{round_.round_number} - {round_.summary}", body, options.theme)


def render_file(rounds: list[Round], source_label: str, options: RenderOptions | None = None) -> str:
    """Render every round into one document, with an index at the top."""
    options = options or RenderOptions()
    parts = [_header("Claude Code Session", [source_label, f"{len(rounds)} rounds"])]
    parts.append('<nav class="index">')
    for r in rounds:
        parts.append(_round_link(r, f"#round-{r.round_number}"))
    parts.append("</nav>")
    for r in rounds:
        parts.append(render_round_section(r))
    return _document(f"Claude Code Session - {source_label}", "\n".join(parts), options.theme)


def render_index(rounds: list[Round], source_label: str, options: RenderOptions | None = None) -> str:
    """Index page linking the per-round files written by render-all."""
    options = options or RenderOptions()
    parts = [_header("Claude Code Session", [source_label, f"{len(rounds)} rounds"])]
    parts.append('<div class="index">')
    for r in rounds:
        parts.append(_round_link(r, html_filename(source_label, r.round_number)))
    parts.append("</div>")
    return _document(f"Claude Code Session - {source_label}", "\n".join(parts), options.theme)
