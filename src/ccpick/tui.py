#!/usr/bin/env python3
"""Textual TUI for browsing the rounds of a session file.

Each step is its own small inline app: pick a round, choose what to do
with it, then confirm where to save the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rich.console import Group
from rich.panel import Panel
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.theme import Theme
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

from .extract import extract_round, round_filename
from .models import Round, RoundEntry, parse_timestamp
from .output import write_text
from .render import RenderOptions, fmt_date, html_filename, render_round, speaker_of


# =============================================================================
# SHARED
# =============================================================================

_ACCENT = "rgb(222, 115, 86)"

_THEME = Theme(
    name="ccpick",
    primary=_ACCENT,
    accent=_ACCENT,
    background="rgb(26, 26, 26)",
    surface="rgb(26, 26, 26)",
    panel="rgb(45, 45, 45)",
    dark=True,
)

_RUN = dict(inline=True, mouse=True)

_CSS = """
Screen {
    height: auto;
    padding: 0 1;
    border-left: thick $primary;
}
Static {
    background: $background;
}
#title {
    text-style: bold;
    margin-bottom: 1;
}
#hint {
    color: $text-muted;
    margin-top: 1;
}
OptionList {
    height: auto;
    max-height: 20;
    border: none;
    padding: 0;
    background: $background;
}
OptionList > .option-list--option-highlighted {
    background: $panel;
    color: $primary;
    text-style: bold;
}
"""


class _InlineApp(App):
    """Inline app sharing the ccpick theme, styles and quit keys."""

    INLINE_PADDING = 1
    CSS = _CSS
    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False, system=True),
        Binding("escape", "quit", "Back"),
    ]

    def __init__(self) -> None:
        super().__init__(ansi_color=True)
        self.register_theme(_THEME)
        self.theme = "ccpick"


class _ChoiceApp(_InlineApp):
    """Exits with the id of the chosen option, or None on escape."""

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(event.option.id)


# =============================================================================
# PREVIEWS
# =============================================================================

@dataclass(frozen=True)
class EntryPreview:
    role: str  # "you", "claude", "tool", "snapshot", or the entry type
    text: str


def entry_preview(round_entry: RoundEntry) -> EntryPreview:
    entry = round_entry.entry
    if entry is None:
        return EntryPreview(role=round_entry.type or "entry", text=round_entry.raw_content.strip())
    if entry.is_snapshot:
        return EntryPreview(role="snapshot", text="File history snapshot")
    label, _ = speaker_of(entry)
    return EntryPreview(role=label.lower(), text=round_entry.display_content.strip())


def round_previews(round_: Round, n: int = 2) -> tuple[list[EntryPreview], int, list[EntryPreview]]:
    """First n and last n entry previews, with the count hidden between them."""
    previews = [entry_preview(e) for e in round_.entries]
    if len(previews) <= 2 * n:
        return previews, 0, []
    return previews[:n], len(previews) - 2 * n, previews[-n:]


def clip(text: str, max_lines: int = 5, max_chars: int = 400) -> str:
    """Shorten preview text, keeping its head and tail lines."""
    lines = text.split("\n")
    if len(lines) > max_lines:
        keep_head = (max_lines + 1) // 2
        keep_tail = max_lines - keep_head
        dropped = len(lines) - keep_head - keep_tail
        lines = lines[:keep_head] + [f"[{dropped} more lines]"] + (lines[-keep_tail:] if keep_tail else [])
        text = "\n".join(lines)
    if len(text) > max_chars:
        text = text[:max_chars].rstrip() + f" [+{len(text) - max_chars} chars]"
    return text


_ROLE_COLORS = {
    "you": "grey70",
    "claude": "#de7356",
    "tool": "#56b6c2",
    "snapshot": "#b668cd",
}


def _preview_panel(preview: EntryPreview) -> Panel:
    color = _ROLE_COLORS.get(preview.role, "grey42")
    return Panel(
        Text(clip(preview.text)),
        title=Text(preview.role, style=f"bold {color}"),
        title_align="left",
        border_style=color,
        padding=(0, 2),
    )


def preview_group(round_: Round) -> Group:
    head, hidden, tail = round_previews(round_)
    parts: list = [_preview_panel(p) for p in head]
    if hidden:
        parts.append(Text(f"... {hidden} more entries ...", style="dim", justify="center"))
    parts.extend(_preview_panel(p) for p in tail)
    return Group(*parts)


def round_label(round_: Round) -> str:
    date_str = fmt_date(parse_timestamp(round_.start_timestamp))
    return f"#{round_.round_number:<4} {date_str:<24} {round_.entry_count:>4} entries  {round_.summary}"


# =============================================================================
# APPS
# =============================================================================

class RoundPicker(_ChoiceApp):
    """List every round of the file."""

    BINDINGS = [Binding("q", "quit", "Quit")]

    def __init__(self, file_path: str, rounds: list[Round]) -> None:
        super().__init__()
        self.file_path = file_path
        self.rounds = rounds

    def compose(self) -> ComposeResult:
        yield Static(f"{Path(self.file_path).name} ({len(self.rounds)} rounds)", id="title")
        yield OptionList(*[Option(round_label(r), id=str(r.round_number)) for r in self.rounds])
        yield Static("enter: open   q/esc: quit", id="hint")


class RoundAction(_ChoiceApp):
    """Preview a round and pick an export format."""

    ACTIONS = (
        ("jsonl", "Extract to JSONL"),
        ("light", "Render to HTML (light)"),
        ("dark", "Render to HTML (dark)"),
    )

    def __init__(self, round_: Round) -> None:
        super().__init__()
        self.round = round_

    def compose(self) -> ComposeResult:
        r = self.round
        yield Static(f"Round #{r.round_number}: {r.summary} ({r.entry_count} entries)", id="title")
        yield Static(preview_group(r))
        yield OptionList(*[Option(label, id=key) for key, label in self.ACTIONS])
        yield Static("enter: choose   esc: back", id="hint")


class SavePrompt(_InlineApp):
    """Ask where to write the output; exits with the path or None."""

    def __init__(self, default: str) -> None:
        super().__init__()
        self.default = default

    def compose(self) -> ComposeResult:
        yield Static("Save to:", id="title")
        yield Input(value=self.default)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.exit(event.value.strip() or None)


# =============================================================================
# ENTRY POINT (called from cli.py)
# =============================================================================

def _export(file_path: str, rounds: list[Round], round_: Round, action: str) -> tuple[str, str]:
    """(default filename, file contents) for an action picked in RoundAction."""
    if action == "jsonl":
        return round_filename(file_path, round_.round_number), extract_round(rounds, round_.round_number) or ""
    options = RenderOptions(theme=action, source_file=file_path)
    return html_filename(file_path, round_.round_number), render_round(round_, options)


def run_round_browser(file_path: str, rounds: list[Round]) -> None:
    """Run the interactive round picker until the user quits."""
    by_number = {str(r.round_number): r for r in rounds}
    while True:
        picked = RoundPicker(file_path, rounds).run(**_RUN)
        if picked is None:
            return
        round_ = by_number[picked]

        action = RoundAction(round_).run(**_RUN)
        if action is None:
            continue

        filename, text = _export(file_path, rounds, round_, action)
        out_path = SavePrompt(str(Path.cwd().resolve() / filename)).run(**_RUN)
        if not out_path:
            continue
        write_text(Path(out_path), text)
        print(f"Written to {out_path}")
