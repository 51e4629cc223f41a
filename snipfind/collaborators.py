"""External collaborators: the interactive selector and the output sinks.

These wrap command-line tools (fzf, xsel, an editor). The session only sees
plain callables, so tests substitute their own.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from .config import SnipConfig
from .errors import Cancelled, SnipfindError


log = logging.getLogger(__name__)

# fzf: 1 = no match, 130 = interrupted (Esc / Ctrl-C)
_FZF_CANCEL_CODES = {1, 130}


def preview_command(config: SnipConfig, file_pattern: str, *, by_ref: bool = False) -> str:
    """Shell command fzf runs to preview the highlighted entry via `snipfind resolve`."""
    base = [
        sys.executable, "-m", "snipfind",
        "--root", str(config.root),
        "--split", config.split,
        "resolve", file_pattern,
    ]
    cmd = " ".join(shlex.quote(x) for x in base)
    # fzf quotes the {} / {1} placeholders itself
    return f"{cmd} --ref {{1}}" if by_ref else f"{cmd} -- {{}}"


@dataclass
class FzfSelector:
    executable: str = "fzf"
    preview: Optional[str] = None
    keyed: bool = False
    extra_args: List[str] = field(default_factory=list)

    def command(self) -> List[str]:
        cmd = [self.executable]
        if self.keyed:
            cmd += ["--delimiter", "\t", "--with-nth", "2.."]
        if self.preview:
            cmd += ["--preview", self.preview]
        return cmd + list(self.extra_args)

    def __call__(self, entries: List[str]) -> str:
        try:
            proc = subprocess.run(
                self.command(),
                input="\n".join(entries) + "\n",
                text=True,
                stdout=subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise SnipfindError(f"selector not available: {self.executable} ({e})") from e
        if proc.returncode in _FZF_CANCEL_CODES:
            raise Cancelled()
        if proc.returncode != 0:
            raise SnipfindError(f"selector failed with exit code {proc.returncode}")
        selected = proc.stdout.rstrip("\n")
        if not selected:
            raise Cancelled()
        return selected


def stdout_sink(text: str) -> None:
    print(text)


@dataclass
class CommandSink:
    """Pipe the text to a command's stdin. A missing executable is logged, not fatal."""

    cmd: List[str]

    def __call__(self, text: str) -> None:
        if not text:
            return
        try:
            proc = subprocess.run(self.cmd, input=text, text=True)
        except FileNotFoundError:
            log.warning("Output command not found: %s", shlex.join(self.cmd))
            return
        if proc.returncode != 0:
            log.warning("Output command %s exited with %d", shlex.join(self.cmd), proc.returncode)


def clipboard_sink(config: SnipConfig) -> CommandSink:
    return CommandSink(list(config.clipboard_cmd))


def editor_sink(config: SnipConfig) -> CommandSink:
    return CommandSink(list(config.editor_cmd))
