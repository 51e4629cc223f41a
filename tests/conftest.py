from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from snipfind.config import SnipConfig


SAMPLE_DIR = Path(__file__).resolve().parents[1] / "data" / "sample_snippets"

DOCKER_TITLES = ["# Docker basics", "# docker cleanup", "# Registry"]


@pytest.fixture
def snippet_root(tmp_path_factory) -> Path:
    """A copy of data/sample_snippets.

    Built with tmp_path_factory so the directory name never contains the test
    name (paths are matched by substring).
    """
    root = tmp_path_factory.mktemp("snips") / "corpus"
    shutil.copytree(SAMPLE_DIR, root)
    return root


@pytest.fixture
def config(snippet_root: Path) -> SnipConfig:
    return SnipConfig(root=snippet_root)
