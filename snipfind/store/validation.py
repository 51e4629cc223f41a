from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from ..corpus.segment import Block


@lru_cache(maxsize=1)
def _load_schema() -> Dict[str, Any]:
    here = Path(__file__).resolve().parents[1]
    schema_path = here / "schemas" / "candidate.schema.json"
    return json.loads(schema_path.read_text(encoding="utf-8"))


def candidate_record(block: Block, *, include_body: bool = False) -> Dict[str, Any]:
    rec: Dict[str, Any] = {
        "title": block.title,
        "ref": block.ref,
        "path": block.path,
        "ordinal": block.ordinal,
        "line": block.start_line,
    }
    if include_body:
        rec["body"] = block.body
    return rec


def validate_candidate(obj: Dict[str, Any]) -> List[str]:
    """Return a list of validation error messages. Empty list means valid.

    Lazy-imports jsonschema to keep core import light.
    """
    import jsonschema

    validator = jsonschema.Draft7Validator(_load_schema())
    errs = []
    for err in sorted(validator.iter_errors(obj), key=lambda e: "/".join(str(x) for x in e.path)):
        loc = "/".join(str(x) for x in err.path) or "<root>"
        errs.append(f"{loc}: {err.message}")
    return errs
