from __future__ import annotations

import json
import os
from typing import Any, Dict, List

from snipfind.config import SnipConfig, load_config
from snipfind.errors import SnipfindError
from snipfind.query import Query
from snipfind.session import candidates, resolve, resolve_ref
from snipfind.store.validation import candidate_record

from .server import mcp


def _config(root: str | None, split: str | None) -> SnipConfig:
    return load_config(os.environ, root=root, split=split)


# ---------- FastMCP tools ----------


@mcp.tool()
def snippets_titles(file_pattern: str, content_pattern: str = "", root: str | None = None, split: str | None = None) -> str:
    """
    List snippet titles from the snippet directory.

    Args:
      file_pattern: plain substring that file paths must contain
      content_pattern: optional case-insensitive regex over block text ("" matches all)
      root: snippet directory (default: SNIPFIND_ROOT or ~/snippets)
      split: 'delimiter' (----- lines) or 'header' ('# X:' lines)
    Returns:
      JSON: { ok, items: [{title, ref, path, ordinal, line}], root }
    Pass the same file_pattern to snippets_resolve together with a title or ref.
    """
    try:
        cfg = _config(root, split)
        query = Query(file_pattern, content_pattern)
        items: List[Dict[str, Any]] = [candidate_record(b) for _, b in candidates(cfg, query)]
    except SnipfindError as e:
        return json.dumps({"ok": False, "error": str(e)})
    return json.dumps({"ok": True, "items": items, "root": str(cfg.root)})


@mcp.tool()
def snippets_resolve(file_pattern: str, title: str | None = None, ref: str | None = None, root: str | None = None, split: str | None = None) -> str:
    """
    Return the exact text of one snippet.

    Use `ref` (from snippets_titles) for an exact block. With `title`, every
    block containing it is returned, separated by a blank line.

    Returns JSON: { ok, body? , error? }.
    """
    if not title and not ref:
        return json.dumps({"ok": False, "error": "Provide title or ref"})
    try:
        cfg = _config(root, split)
        body = resolve_ref(cfg, file_pattern, ref) if ref else resolve(cfg, file_pattern, title)
    except SnipfindError as e:
        return json.dumps({"ok": False, "error": str(e)})
    return json.dumps({"ok": True, "body": body})


# ---------- Resource ----------


_USAGE = (
    "Snippets Tools (snipfind)\n\n"
    "snippets_titles(file_pattern, content_pattern='', root=None, split=None)\n"
    "snippets_resolve(file_pattern, title=None, ref=None, root=None, split=None)\n\n"
    "Snippet files are plain text. Blocks are separated by a line of five hyphens\n"
    "(split='delimiter') or start at '# X:' header lines (split='header').\n"
    "A block's title is its first non-blank line.\n\n"
    "Notes:\n"
    "- Every call re-reads the snippet directory; nothing is indexed.\n"
    "- Resolve with the same file_pattern used for titles.\n"
    "- Root defaults to SNIPFIND_ROOT, then ~/snippets.\n"
)


@mcp.resource("resource://snippets/usage")
def get_snippets_usage() -> str:
    return _USAGE
