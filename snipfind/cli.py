"""Command-line interface for snipfind.

Usage:
    snipfind [--root DIR] [--split {delimiter,header}] <command> ...

Subcommands:
    pick      Pick a snippet interactively and send it to stdout, clipboard and editor
    titles    List candidate titles for a file pattern and optional content pattern
    resolve   Print the body of the block containing a title (or named by --ref)

Exit status: 0 on a completed session (including no candidates, a cancelled
pick, or a title that no longer resolves), 1 on usage errors, 2 on an invalid
content pattern.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .collaborators import FzfSelector, clipboard_sink, editor_sink, preview_command, stdout_sink
from .config import SnipConfig, load_config
from .corpus.segment import SPLIT_MODES
from .errors import Cancelled, SnipfindError, UsageError
from .query import Query
from .session import candidates, resolve, resolve_ref, run_session
from .store.validation import candidate_record, validate_candidate
from .utils.env import load_env_defaults




class _Parser(argparse.ArgumentParser):
    # argparse exits with 2 on bad usage; 2 is reserved for invalid content patterns here.
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(f"{message}\n{self.format_usage().rstrip()}")


def _add_subcommands(parser: argparse.ArgumentParser) -> None:
    sub = parser.add_subparsers(dest="cmd", metavar="command")

    # pick
    p_pick = sub.add_parser("pick", help="Pick a snippet interactively")
    p_pick.add_argument("file_pattern", nargs="?", help="Substring to match in file paths")
    p_pick.add_argument("content_pattern", nargs="?", default="", help="Case-insensitive regex over block text")
    p_pick.add_argument("--by-ref", dest="by_ref", action="store_true", help="Resolve the exact picked block instead of matching its title")
    p_pick.add_argument("--no-clipboard", dest="no_clipboard", action="store_true")
    p_pick.add_argument("--no-editor", dest="no_editor", action="store_true")
    p_pick.add_argument("--no-preview", dest="no_preview", action="store_true")

    # titles
    p_titles = sub.add_parser("titles", help="List candidate titles")
    p_titles.add_argument("file_pattern", nargs="?", help="Substring to match in file paths")
    p_titles.add_argument("content_pattern", nargs="?", default="", help="Case-insensitive regex over block text")
    p_titles.add_argument("--jsonl", action="store_true", help="Print JSONL candidate records")
    p_titles.add_argument("--body", action="store_true", help="Include block bodies in JSONL records")
    p_titles.add_argument("--validate", action="store_true", help="Validate records against JSON schema")

    # resolve
    p_resolve = sub.add_parser("resolve", help="Print the body for a selected title")
    p_resolve.add_argument("file_pattern", nargs="?", help="Same file pattern used to list titles")
    p_resolve.add_argument("title", nargs="?", default=None, help="Selected title")
    p_resolve.add_argument("--ref", dest="ref", default=None, help="Block reference '<path>:<ordinal>'")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="snipfind",
        description="Find a text snippet by file path, content and an interactive pick.",
        epilog=(
            "Examples:\n"
            "  snipfind pick docker\n"
            "  snipfind titles docker 'prune|rm'\n"
            "  snipfind resolve docker '# Registry'\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--root", default=None, help="Snippet directory (env SNIPFIND_ROOT, default ~/snippets)")
    parser.add_argument("--split", choices=SPLIT_MODES, default=None, help="Block convention (env SNIPFIND_SPLIT)")
    parser.add_argument("--env-file", dest="env_file", default=None, help="Read defaults from this .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    _add_subcommands(parser)
    return parser


def _cmd_titles(config: SnipConfig, args: argparse.Namespace) -> int:
    query = Query(args.file_pattern, args.content_pattern)
    pairs = candidates(config, query)
    if not args.jsonl:
        for title, _ in pairs:
            print(title)
        return 0
    recs = [candidate_record(b, include_body=bool(args.body)) for _, b in pairs]
    if args.validate:
        for r in recs:
            errs = validate_candidate(r)
            if errs:
                print("Validation failed:", errs, file=sys.stderr)
                return 1
    for r in recs:
        print(json.dumps(r, ensure_ascii=False))
    return 0


def _cmd_resolve(config: SnipConfig, args: argparse.Namespace) -> int:
    if args.ref:
        body = resolve_ref(config, args.file_pattern, args.ref)
    elif args.title is not None:
        body = resolve(config, args.file_pattern, args.title)
    else:
        raise UsageError("resolve needs a title or --ref")
    print(body)
    return 0


def _cmd_pick(config: SnipConfig, args: argparse.Namespace) -> int:
    query = Query(args.file_pattern, args.content_pattern)
    preview = None if args.no_preview else preview_command(config, query.file_pattern, by_ref=args.by_ref)
    selector = FzfSelector(preview=preview, keyed=bool(args.by_ref))
    sinks = [stdout_sink]
    if not args.no_clipboard:
        sinks.append(clipboard_sink(config))
    if not args.no_editor:
        sinks.append(editor_sink(config))
    run_session(config, query, selector, sinks, by_ref=bool(args.by_ref))
    return 0


_COMMANDS = {
    "pick": _cmd_pick,
    "titles": _cmd_titles,
    "resolve": _cmd_resolve,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
        if not getattr(args, "cmd", None):
            parser.print_help(sys.stderr)
            return 1
        if args.file_pattern is None:
            raise UsageError(f"{args.cmd}: missing FILE_PATTERN")

        load_env_defaults(Path(args.env_file) if args.env_file else None)
        config = load_config(os.environ, root=args.root, split=args.split)
        if not config.root.is_dir():
            raise UsageError(f"Root not found: {config.root}")
        return _COMMANDS[args.cmd](config, args)
    except Cancelled:
        return 0
    except SnipfindError as e:
        print(f"snipfind: {e}", file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
