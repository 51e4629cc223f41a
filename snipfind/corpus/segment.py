"""Split snippet files into blocks.

Two conventions are understood:

- ``delimiter`` (default): a line consisting of exactly five hyphens
  separates records (a CRLF ending is accepted). A run of hyphens with any
  other text on the line never splits.
- ``header``: a line like ``# D: Docker basics`` (hash, space, one letter,
  colon) starts a new record. Text before the first header is its own record.

Only a newline (LF) ends a line. Bodies are rebuilt from the original
line slices, so CR, form feeds and other control characters survive unchanged.

Each raw chunk is trimmed of leading and trailing blank lines. Chunks that are
empty after trimming are dropped, so ordinals count surviving blocks only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

from .walk import SnippetFile


DELIMITER = "-----"
HEADER_RE = re.compile(r"^# [A-Za-z]:")
SPLIT_MODES = ("delimiter", "header")


@dataclass
class Block:
    path: str
    ordinal: int
    start_line: int
    body: str

    @property
    def title(self) -> str:
        return block_title(self.body)

    @property
    def ref(self) -> str:
        return format_ref(self.path, self.ordinal)


def block_title(body: str) -> str:
    for line in body.split("\n"):
        if line.strip():
            return line.strip()
    return ""


def format_ref(path: str, ordinal: int) -> str:
    return f"{path}:{ordinal}"


def parse_ref(ref: str) -> Tuple[str, int]:
    """Split a ``<path>:<ordinal>`` reference. Raises ValueError on malformed input."""
    path, sep, ordinal = ref.rpartition(":")
    if not sep or not path or not ordinal.isdigit():
        raise ValueError(f"malformed block reference: {ref!r}")
    return path, int(ordinal)


def _is_delimiter(line: str) -> bool:
    return line.rstrip("\r") == DELIMITER


def _chunks(lines: List[str], split: str) -> Iterator[Tuple[int, List[str]]]:
    # Yields (index of first line, lines) for each raw chunk.
    start = 0
    buf: List[str] = []
    for i, line in enumerate(lines):
        if split == "delimiter" and _is_delimiter(line):
            yield start, buf
            start, buf = i + 1, []
            continue
        if split == "header" and HEADER_RE.match(line):
            if buf:
                yield start, buf
            start, buf = i, []
        buf.append(line)
    yield start, buf


def _trim(start: int, lines: List[str]) -> Tuple[int, List[str]]:
    lo, hi = 0, len(lines)
    while lo < hi and not lines[lo].strip():
        lo += 1
    while hi > lo and not lines[hi - 1].strip():
        hi -= 1
    return start + lo, lines[lo:hi]


def _join(lines: List[str]) -> str:
    # The final line ending (including a CR) belongs to the delimiter, not the body
    body = "\n".join(lines)
    return body[:-1] if body.endswith("\r") else body


def segment_text(text: str, path: str = "", split: str = "delimiter") -> List[Block]:
    if split not in SPLIT_MODES:
        raise ValueError(f"unknown split mode: {split}")
    blocks: List[Block] = []
    for start, chunk in _chunks(text.split("\n"), split):
        first, body_lines = _trim(start, chunk)
        if not body_lines:
            continue
        blocks.append(Block(
            path=path,
            ordinal=len(blocks),
            start_line=first + 1,
            body=_join(body_lines),
        ))
    return blocks


def iter_blocks(files: Iterable[SnippetFile], split: str = "delimiter") -> Iterator[Block]:
    for sf in files:
        yield from segment_text(sf.text, sf.path, split)
