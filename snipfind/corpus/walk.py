from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional


log = logging.getLogger(__name__)


@dataclass
class SnippetFile:
    path: str
    text: str


@dataclass
class WalkOptions:
    exclude_dirs: List[str] = field(default_factory=lambda: default_exclude_dirs())
    encoding: str = "utf-8"


def default_exclude_dirs() -> List[str]:
    # Every regular file under the root is part of the corpus unless configured otherwise
    return []


def _is_excluded_dir(name: str, exclude_dirs: Iterable[str]) -> bool:
    return name in set(exclude_dirs)


def iter_snippet_paths(root: Path, file_pattern: str, opts: Optional[WalkOptions] = None) -> Iterator[str]:
    """Yield absolute paths of regular files under `root` whose path contains `file_pattern`.

    `file_pattern` is a plain substring, never a glob or regex. Directory
    entries are visited in sorted order so one snapshot always walks the same way.
    """
    opts = opts or WalkOptions()
    root = Path(root).resolve()
    for dirpath, dirs, files in os.walk(root):
        # Prune excluded directories in-place
        kept = []
        for d in sorted(dirs):
            if _is_excluded_dir(d, opts.exclude_dirs):
                log.debug("Skipping excluded dir %s", os.path.join(dirpath, d))
                continue
            kept.append(d)
        dirs[:] = kept
        for fn in sorted(files):
            abs_path = os.path.join(dirpath, fn)
            if os.path.islink(abs_path) or not os.path.isfile(abs_path):
                continue
            if file_pattern in abs_path:
                yield abs_path


def read_snippet_file(path: str, encoding: str = "utf-8") -> Optional[SnippetFile]:
    """Read one file, or return None (with a warning) when it cannot be read or decoded."""
    try:
        # newline="" keeps CRLF endings as they are on disk
        with open(path, "r", encoding=encoding, newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Skipping unreadable file %s: %s", path, e)
        return None
    return SnippetFile(path=path, text=text)


def iter_snippet_files(root: Path, file_pattern: str, opts: Optional[WalkOptions] = None) -> Iterator[SnippetFile]:
    opts = opts or WalkOptions()
    for path in iter_snippet_paths(root, file_pattern, opts):
        sf = read_snippet_file(path, opts.encoding)
        if sf is not None:
            yield sf
