from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Pattern, Union

from .corpus.segment import Block
from .errors import PatternError, UsageError


_FLAGS = re.IGNORECASE | re.MULTILINE


def compile_content_pattern(pattern: Optional[str]) -> Optional[Pattern[str]]:
    """Compile a case-insensitive content pattern. Empty or None means match-all (returns None)."""
    if not pattern:
        return None
    try:
        return re.compile(pattern, _FLAGS)
    except re.error as e:
        raise PatternError(pattern, str(e)) from e


def literal_pattern(text: str) -> Pattern[str]:
    # Titles often carry regex metacharacters (`/`, `+`, `*`), so match them verbatim.
    return re.compile(re.escape(text), _FLAGS)


@dataclass
class Query:
    file_pattern: str
    content_pattern: str = ""
    compiled: Optional[Pattern[str]] = field(init=False, default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.file_pattern is None:
            raise UsageError("a file path pattern is required")
        self.content_pattern = self.content_pattern or ""
        self.compiled = compile_content_pattern(self.content_pattern)

    def matches(self, block: Block) -> bool:
        return self.compiled is None or self.compiled.search(block.body) is not None


def filter_blocks(
    blocks: Iterable[Block],
    pattern: Union[Query, Pattern[str], str, None],
) -> List[Block]:
    """Keep blocks whose body matches `pattern`, preserving order.

    `pattern` may be a Query, a compiled pattern, or a raw content pattern string
    (compiled case-insensitively; an invalid one raises PatternError).
    """
    if isinstance(pattern, Query):
        rx = pattern.compiled
    elif pattern is None or isinstance(pattern, str):
        rx = compile_content_pattern(pattern)
    else:
        rx = pattern
    if rx is None:
        return list(blocks)
    return [b for b in blocks if rx.search(b.body)]
