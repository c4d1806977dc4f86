#!/usr/bin/env python3
"""CLI entry point for cc-pick."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from . import config
from .extract import (
    extract_round, list_rounds, parse_round_number, require_round, round_filename,
)
from .models import CCPickError, Round, RoundListOutput, RoundNotFoundError, parse_timestamp
from .output import ensure_dir, write_batch, write_text
from .reader import read_entries
from .render import (
    INDEX_FILENAME, RenderOptions,
    file_html_filename, fmt_date, html_filename, render_file, render_index, render_round,
)
from .segment import segment
from .summary import truncate_label

EXIT_FAILURE = 1
EXIT_NOT_FOUND = 3

_RULE = "-" * 80


def load_rounds(file_path: str, skip_malformed: bool = False) -> list[Round]:
    """Read and segment a session file."""
    return segment(read_entries(file_path, skip_malformed=skip_malformed))


def print_round_list(output: RoundListOutput) -> None:
    print(f"\nFile: {output.file_path}")
    print(f"Total rounds: {output.total_rounds}\n")
    print(_RULE)
    for r in output.rounds:
        date = fmt_date(parse_timestamp(r.start_timestamp)) or r.start_timestamp
        print(f"\n  Round #{r.number}")
        print(f"  {date}")
        print(f"  {r.summary}")
        print(f"  Entries: {r.entry_count}")
    print("\n" + _RULE)


def _print_written(round_: Round, filename: str) -> None:
    print(f"  Round #{round_.round_number} -> {filename}")
    print(f"     {truncate_label(round_.summary, 60)}")


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_list(args: argparse.Namespace) -> None:
    rounds = load_rounds(args.file, args.skip_malformed)
    output = list_rounds(rounds, args.file)
    if args.json:
        print(json.dumps(output.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_round_list(output)


def cmd_extract(args: argparse.Namespace) -> None:
    rounds = load_rounds(args.file, args.skip_malformed)
    content = extract_round(rounds, args.round)
    if content is None:
        raise RoundNotFoundError(args.round, len(rounds))
    sys.stdout.write(content)
    sys.stdout.flush()


def cmd_extract_all(args: argparse.Namespace) -> None:
    rounds = load_rounds(args.file, args.skip_malformed)
    if not rounds:
        print("No rounds found in file")
        return

    output_dir = Path(args.output)
    ensure_dir(output_dir)
    print(f"\nExtracting {len(rounds)} rounds to: {output_dir}")
    print(_RULE)

    items = [
        (output_dir / round_filename(args.file, r.round_number), extract_round(rounds, r.round_number) or "")
        for r in rounds
    ]
    result = write_batch(items)

    written = set(result.written)
    for r, (path, _) in zip(rounds, items):
        if path in written:
            _print_written(r, path.name)
    for failure in result.failures:
        print(f"  failed: {failure}", file=sys.stderr)

    print(_RULE)
    print(f"\nExtracted {len(result.written)}/{result.total} rounds\n")
    if not result.ok:
        sys.exit(EXIT_FAILURE)


def cmd_render(args: argparse.Namespace) -> None:
    rounds = load_rounds(args.file, args.skip_malformed)
    round_ = require_round(rounds, args.round)

    output_dir = Path(args.output)
    html = render_round(round_, RenderOptions(theme=args.theme, source_file=args.file))
    out_path = output_dir / html_filename(args.file, round_.round_number)
    write_text(out_path, html)

    print(f"\nRound #{round_.round_number} rendered to: {out_path}")
    print(f"   {round_.summary}\n")


def cmd_render_all(args: argparse.Namespace) -> None:
    rounds = load_rounds(args.file, args.skip_malformed)
    if not rounds:
        print("No rounds found in file")
        return

    output_dir = Path(args.output)
    ensure_dir(output_dir)
    options = RenderOptions(theme=args.theme, source_file=args.file)
    print(f"\nRendering {len(rounds)} rounds to HTML: {output_dir} ({args.theme} theme)")
    print(_RULE)

    items = [
        (output_dir / html_filename(args.file, r.round_number), render_round(r, options))
        for r in rounds
    ]
    result = write_batch(items)

    written = set(result.written)
    for r, (path, _) in zip(rounds, items):
        if path in written:
            _print_written(r, path.name)
    for failure in result.failures:
        print(f"  failed: {failure}", file=sys.stderr)

    print(_RULE)
    print(f"\nRendered {len(result.written)}/{result.total} rounds\n")

    index_path = output_dir / INDEX_FILENAME
    write_text(index_path, render_index(rounds, args.file, options))
    print(f"Index file created: {index_path}\n")

    if not result.ok:
        sys.exit(EXIT_FAILURE)


def cmd_render_file(args: argparse.Namespace) -> None:
    rounds = load_rounds(args.file, args.skip_malformed)
    if not rounds:
        print("No rounds found in file")
        return

    output_dir = Path(args.output)
    print(f"\nRendering entire file to HTML: {args.file}")
    print(f"   Output: {output_dir} ({args.theme} theme)")
    print(f"   Rounds: {len(rounds)}")

    html = render_file(rounds, args.file, RenderOptions(theme=args.theme))
    out_path = output_dir / file_html_filename(args.file)
    write_text(out_path, html)

    print(f"\nFile rendered to: {out_path}\n")


def cmd_browse(args: argparse.Namespace) -> None:
    rounds = load_rounds(args.file, args.skip_malformed)
    if not rounds:
        print("No rounds found in file")
        return
    from .tui import run_round_browser
    run_round_browser(args.file, rounds)


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

USAGE = """\
usage: ccpick <command> [options]
       ccpick FILE                       Browse rounds interactively (TUI)

Split Claude Code session logs into rounds, extract them, and render them to HTML.

Commands:
  list <file> [--json]                List all rounds in a session file
  extract <file> <round>              Print one round's JSONL to stdout
  extract-all <file> [-o DIR]         Write every round to <name>-<n>.jsonl
  render <file> <round> [-o DIR]      Render one round to HTML
  render-all <file> [-o DIR]          Render every round plus index.html
  render-file <file> [-o DIR]         Render the whole file to one HTML page
  browse <file>                       Browse rounds interactively (TUI)

Options:
  -o, --output DIR                    Output directory (default: ./output)
  --theme light|dark                  HTML theme (default: light)
  --skip-malformed                    Skip unparseable lines instead of failing
  -v, --verbose                       Debug logging on stderr

Rounds are numbered from 0. Run 'ccpick <command> --help' for details.
"""


def _round_arg(value: str) -> int:
    try:
        return parse_round_number(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _base_parser(command: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=f"ccpick {command}", description=description)
    parser.add_argument("file", help="Session .jsonl file")
    parser.add_argument(
        "--skip-malformed", action="store_true", default=config.SKIP_MALFORMED,
        help="Log and skip lines that are not valid JSON objects",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def _add_output(parser: argparse.ArgumentParser, theme: bool = False) -> None:
    parser.add_argument("-o", "--output", default=config.OUTPUT_DIR, help="Output directory (default: %(default)s)")
    if theme:
        parser.add_argument(
            "--theme", choices=config.THEMES, default=config.THEME,
            help="HTML theme (default: %(default)s)",
        )


def _parse_list(argv: list[str]) -> argparse.Namespace:
    parser = _base_parser("list", "List all rounds in a session file")
    parser.add_argument("--json", action="store_true", help="Print the listing as JSON")
    return parser.parse_args(argv)


def _parse_extract(argv: list[str]) -> argparse.Namespace:
    parser = _base_parser("extract", "Print one round's original JSONL lines")
    parser.add_argument("round", type=_round_arg, help="Round number (from 0)")
    return parser.parse_args(argv)


def _parse_extract_all(argv: list[str]) -> argparse.Namespace:
    parser = _base_parser("extract-all", "Write every round to its own JSONL file")
    _add_output(parser)
    return parser.parse_args(argv)


def _parse_render(argv: list[str]) -> argparse.Namespace:
    parser = _base_parser("render", "Render one round to HTML")
    parser.add_argument("round", type=_round_arg, help="Round number (from 0)")
    _add_output(parser, theme=True)
    return parser.parse_args(argv)


def _parse_render_all(argv: list[str]) -> argparse.Namespace:
    parser = _base_parser("render-all", "Render every round to HTML with an index page")
    _add_output(parser, theme=True)
    return parser.parse_args(argv)


def _parse_render_file(argv: list[str]) -> argparse.Namespace:
    parser = _base_parser("render-file", "Render the whole file to a single HTML page")
    _add_output(parser, theme=True)
    return parser.parse_args(argv)


def _parse_browse(argv: list[str]) -> argparse.Namespace:
    parser = _base_parser("browse", "Browse rounds interactively")
    return parser.parse_args(argv)


COMMANDS = {
    "list": (_parse_list, cmd_list),
    "extract": (_parse_extract, cmd_extract),
    "extract-all": (_parse_extract_all, cmd_extract_all),
    "render": (_parse_render, cmd_render),
    "render-all": (_parse_render_all, cmd_render_all),
    "render-file": (_parse_render_file, cmd_render_file),
    "browse": (_parse_browse, cmd_browse),
}


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else argv

    if not argv or argv[0] in ("-h", "--help", "help"):
        print(USAGE)
        return

    command = argv[0]
    if command in COMMANDS:
        parse, run = COMMANDS[command]
        args = parse(argv[1:])
    elif command.startswith("-"):
        print(f"Unknown option: {command}\n", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(2)
    else:
        # Bare: ccpick FILE -> interactive TUI
        parse, run = COMMANDS["browse"]
        args = parse(argv)

    _configure_logging(args.verbose)

    try:
        run(args)
    except RoundNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_NOT_FOUND)
    except CCPickError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)
