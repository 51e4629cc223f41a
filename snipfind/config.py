from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from .corpus.segment import SPLIT_MODES
from .corpus.walk import default_exclude_dirs
from .errors import UsageError


ENV_ROOT = "SNIPFIND_ROOT"
ENV_SPLIT = "SNIPFIND_SPLIT"
ENV_EDITOR = "SNIPFIND_EDITOR"
ENV_CLIPBOARD = "SNIPFIND_CLIPBOARD"


def default_root() -> Path:
    return Path.home() / "snippets"


@dataclass
class SnipConfig:
    root: Path = field(default_factory=default_root)
    split: str = "delimiter"
    exclude_dirs: List[str] = field(default_factory=default_exclude_dirs)
    encoding: str = "utf-8"
    clipboard_cmd: List[str] = field(default_factory=lambda: ["xsel", "-ib"])
    editor_cmd: List[str] = field(default_factory=lambda: ["nvim", "-"])

    def __post_init__(self) -> None:
        self.root = Path(self.root).expanduser().resolve()
        if self.split not in SPLIT_MODES:
            raise UsageError(f"unknown split mode {self.split!r} (expected one of: {', '.join(SPLIT_MODES)})")


def load_config(
    env: Mapping[str, str],
    *,
    root: Optional[str | Path] = None,
    split: Optional[str] = None,
) -> SnipConfig:
    """Build a config from explicit overrides, then `env`, then defaults."""
    kwargs = {}
    root = root or env.get(ENV_ROOT)
    if root:
        kwargs["root"] = Path(root)
    split = split or env.get(ENV_SPLIT)
    if split:
        kwargs["split"] = split
    if env.get(ENV_EDITOR):
        kwargs["editor_cmd"] = shlex.split(env[ENV_EDITOR])
    if env.get(ENV_CLIPBOARD):
        kwargs["clipboard_cmd"] = shlex.split(env[ENV_CLIPBOARD])
    return SnipConfig(**kwargs)
