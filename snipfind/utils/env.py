from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, MutableMapping, Optional


log = logging.getLogger(__name__)


def _parse_env_line(line: str) -> tuple[str, str] | None:
    s = line.strip()
    if not s or s.startswith("#"):
        return None
    s = s.removeprefix("export ").lstrip()
    key, sep, val = s.partition("=")
    key = key.strip()
    if not sep or not key.isidentifier():
        return None
    val = val.strip()
    if val[:1] in ("\"", "'"):
        # Quoted: keep everything up to the closing quote, drop what follows
        end = val.find(val[0], 1)
        return key, (val[1:end] if end > 0 else val[1:])
    # Unquoted: " #" starts an inline comment
    val = val.split(" #", 1)[0].rstrip()
    return key, val


def load_env_defaults(
    path: Optional[Path] = None,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Load variables from a .env file (default: ./.env) if present.
    Existing environment values take precedence and are not overwritten.
    Returns a mapping of keys that were set.
    """
    env_path = path or (Path.cwd() / ".env")
    target = os.environ if environ is None else environ
    set_vars: Dict[str, str] = {}
    if not env_path.exists():
        return set_vars
    try:
        text = env_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Ignoring unreadable env file %s: %s", env_path, e)
        return set_vars
    for line in text.splitlines():
        kv = _parse_env_line(line)
        if not kv:
            continue
        k, v = kv
        if k not in target:
            target[k] = v
            set_vars[k] = v
    return set_vars
