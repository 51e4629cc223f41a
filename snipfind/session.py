"""Two-phase snippet retrieval.

Phase 1 (`titles`) walks the corpus, segments every matching file and
projects the surviving blocks to their titles. The caller hands that list to
an interactive selector. Phase 2 (`resolve`) walks the corpus again with the
same file pattern and looks the chosen title up as a literal, case-insensitive
substring of each block body.

Nothing is cached between the phases. If the files change in between, Phase 2
may return NotFound or a different body; that is accepted behaviour.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

from .config import SnipConfig
from .corpus.segment import Block, iter_blocks, parse_ref
from .corpus.walk import WalkOptions, iter_snippet_files
from .errors import Cancelled, NotFound
from .query import Query, filter_blocks, literal_pattern


log = logging.getLogger(__name__)

Selector = Callable[[List[str]], str]
Sink = Callable[[str], None]

AMBIGUOUS_SEPARATOR = "\n\n"
REF_SEPARATOR = "\t"


@dataclass
class SessionResult:
    status: str  # "resolved" | "empty" | "cancelled"
    selected: Optional[str] = None
    body: Optional[str] = None


def _file_pattern(fp: Union[str, Query]) -> str:
    return fp.file_pattern if isinstance(fp, Query) else fp


def iter_corpus_blocks(config: SnipConfig, file_pattern: str) -> Iterator[Block]:
    opts = WalkOptions(exclude_dirs=list(config.exclude_dirs), encoding=config.encoding)
    files = iter_snippet_files(config.root, file_pattern, opts)
    return iter_blocks(files, config.split)


def candidates(config: SnipConfig, query: Query) -> List[Tuple[str, Block]]:
    """Ordered (title, block) pairs for `query`. Duplicate titles are kept."""
    blocks = filter_blocks(iter_corpus_blocks(config, query.file_pattern), query)
    return [(b.title, b) for b in blocks]


def titles(config: SnipConfig, query: Query) -> List[str]:
    return [t for t, _ in candidates(config, query)]


def resolve(config: SnipConfig, file_pattern: Union[str, Query], title: str) -> str:
    """Return the body of the block containing `title`.

    When several bodies contain it, they are all returned in traversal order,
    separated by a blank line. Raises NotFound when none do.
    """
    fp = _file_pattern(file_pattern)
    matches = filter_blocks(iter_corpus_blocks(config, fp), literal_pattern(title))
    if not matches:
        raise NotFound(title)
    if len(matches) > 1:
        log.info("Title %r matched %d blocks; returning all of them", title, len(matches))
    return AMBIGUOUS_SEPARATOR.join(b.body for b in matches)


def resolve_ref(config: SnipConfig, file_pattern: Union[str, Query], ref: str) -> str:
    """Return exactly the block named by `ref` (``<path>:<ordinal>``)."""
    try:
        path, ordinal = parse_ref(ref)
    except ValueError:
        raise NotFound(ref) from None
    for b in iter_corpus_blocks(config, _file_pattern(file_pattern)):
        if b.path == path and b.ordinal == ordinal:
            return b.body
    raise NotFound(ref)


def keyed_entries(pairs: Sequence[Tuple[str, Block]]) -> List[str]:
    # Ref first: titles may contain tabs, refs are absolute paths plus an ordinal
    return [f"{b.ref}{REF_SEPARATOR}{title}" for title, b in pairs]


def split_keyed_entry(entry: str) -> Tuple[str, str]:
    ref, _, title = entry.partition(REF_SEPARATOR)
    return title, ref


def run_session(
    config: SnipConfig,
    query: Query,
    selector: Selector,
    sinks: Sequence[Sink] = (),
    *,
    by_ref: bool = False,
) -> SessionResult:
    """Run titles -> select -> resolve and hand the body to every sink.

    Cancellation ends the session without further I/O. NotFound propagates.
    """
    pairs = candidates(config, query)
    if not pairs:
        log.info("No snippets matched file pattern %r", query.file_pattern)
        return SessionResult(status="empty")

    entries = keyed_entries(pairs) if by_ref else [t for t, _ in pairs]
    try:
        selected = selector(entries)
    except Cancelled:
        log.info("Selection cancelled")
        return SessionResult(status="cancelled")

    if by_ref:
        title, ref = split_keyed_entry(selected)
        body = resolve_ref(config, query, ref)
    else:
        title = selected
        body = resolve(config, query, title)

    for sink in sinks:
        sink(body)
    return SessionResult(status="resolved", selected=title, body=body)
