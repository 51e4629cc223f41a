from __future__ import annotations

from pathlib import Path

import pytest

from snipfind.config import SnipConfig
from snipfind.errors import Cancelled, NotFound
from snipfind.query import Query
from snipfind.session import candidates, resolve, resolve_ref, run_session, titles

from .conftest import DOCKER_TITLES


def test_titles_scenario(config):
    assert titles(config, Query("docker")) == DOCKER_TITLES


def test_titles_are_deterministic(config):
    q = Query("", "docker|find")
    assert titles(config, q) == titles(config, q)


def test_titles_content_filter(config):
    assert titles(config, Query("docker", "PRUNE")) == ["# docker cleanup"]


def test_empty_corpus_yields_no_titles(config):
    assert titles(config, Query("no-such-file")) == []


def test_candidates_pair_titles_with_blocks(config):
    pairs = candidates(config, Query("find"))
    assert [t for t, _ in pairs] == ["find / -type d -perm /020", "find . -name '*.c++' -newer Makefile"]
    assert all(t == b.title for t, b in pairs)
    assert pairs[0][1].path.endswith("find.txt")


def test_resolve_returns_only_the_selected_block(config):
    body = resolve(config, "docker", "# Registry")
    assert body.startswith("# Registry")
    assert "docker push registry.example.com/app:latest" in body
    assert "prune" not in body and "docker ps" not in body


def test_round_trip_for_unique_titles(config):
    q = Query("")
    for t in titles(config, q):
        body = resolve(config, q, t)
        assert body.splitlines()[0].strip() == t


def test_titles_with_metacharacters_resolve_literally(config):
    assert resolve(config, "find", "find / -type d -perm /020").endswith("# group-writable directories")
    assert resolve(config, "find", "find . -name '*.c++' -newer Makefile") == "find . -name '*.c++' -newer Makefile"


def test_ambiguous_title_concatenates_matches(config):
    body = resolve(config, "docker", "docker")
    assert body.split("\n\n") == [b.body for _, b in candidates(config, Query("docker"))]


def test_resolve_is_case_insensitive(config):
    assert resolve(config, "docker", "# REGISTRY").startswith("# Registry")


def test_resolve_after_corpus_change_is_not_found(config, snippet_root: Path):
    q = Query("docker")
    selected = titles(config, q)[2]
    (snippet_root / "docker.txt").write_text("# Something else\n", encoding="utf-8")
    with pytest.raises(NotFound):
        resolve(config, q, selected)


def test_resolve_uses_the_given_file_pattern(config):
    with pytest.raises(NotFound):
        resolve(config, "find", "# Registry")


def test_resolve_ref_picks_one_of_duplicate_titles(tmp_path_factory):
    root = tmp_path_factory.mktemp("dups")
    (root / "a.txt").write_text("# restart\nsystemctl restart a\n-----\n# restart\nsystemctl restart b\n", encoding="utf-8")
    cfg = SnipConfig(root=root)
    pairs = candidates(cfg, Query("a.txt"))
    assert [t for t, _ in pairs] == ["# restart", "# restart"]
    assert resolve_ref(cfg, "a.txt", pairs[1][1].ref) == "# restart\nsystemctl restart b"
    assert resolve(cfg, "a.txt", "# restart") == "# restart\nsystemctl restart a\n\n# restart\nsystemctl restart b"


@pytest.mark.parametrize("ref", ["garbage", "/nowhere/x.txt:0"])
def test_resolve_ref_unknown(config, ref):
    with pytest.raises(NotFound):
        resolve_ref(config, "", ref)


def test_header_split_mode(tmp_path_factory):
    root = tmp_path_factory.mktemp("hdr")
    (root / "notes.md").write_text("# G: git\ngit log --oneline\n# K: kubectl\nkubectl get pods -A\n", encoding="utf-8")
    cfg = SnipConfig(root=root, split="header")
    assert titles(cfg, Query("notes")) == ["# G: git", "# K: kubectl"]
    assert resolve(cfg, "notes", "# K: kubectl") == "# K: kubectl\nkubectl get pods -A"


class _Recorder:
    def __init__(self, choice=None, cancel=False):
        self.choice = choice
        self.cancel = cancel
        self.seen = None

    def __call__(self, entries):
        self.seen = list(entries)
        if self.cancel:
            raise Cancelled()
        return self.choice if self.choice is not None else entries[-1]


def test_run_session_resolves_and_feeds_sinks(config):
    out = []
    selector = _Recorder("# Registry")
    result = run_session(config, Query("docker"), selector, [out.append])
    assert selector.seen == DOCKER_TITLES
    assert result.status == "resolved"
    assert result.selected == "# Registry"
    assert out == [result.body]
    assert result.body.startswith("# Registry")


def test_run_session_cancel_produces_no_output(config):
    out = []
    result = run_session(config, Query("docker"), _Recorder(cancel=True), [out.append])
    assert result.status == "cancelled"
    assert result.body is None
    assert out == []


def test_run_session_without_candidates_skips_selector(config):
    selector = _Recorder()
    result = run_session(config, Query("nothing-here"), selector)
    assert result.status == "empty"
    assert selector.seen is None


def test_run_session_stale_title_raises_not_found(config):
    with pytest.raises(NotFound):
        run_session(config, Query("docker"), _Recorder("# Gone"), [])


def test_run_session_by_ref_sends_keyed_entries(config):
    selector = _Recorder()
    result = run_session(config, Query("docker"), selector, by_ref=True)
    assert [e.split("\t", 1)[1] for e in selector.seen] == DOCKER_TITLES
    assert selector.seen[2].split("\t")[0].endswith("docker.txt:2")
    assert result.selected == "# Registry"
    assert result.body.startswith("# Registry")


def test_run_session_by_ref_with_tab_in_title(tmp_path_factory):
    root = tmp_path_factory.mktemp("tabs")
    (root / "awk.txt").write_text("awk -F'\t' '{print $2}'\n-----\nsort -t'\t' -k2\n", encoding="utf-8")
    cfg = SnipConfig(root=root)
    selector = _Recorder()
    result = run_session(cfg, Query("awk"), selector, by_ref=True)
    assert result.selected == "sort -t'\t' -k2"
    assert result.body == "sort -t'\t' -k2"


def test_files_under_vcs_dirs_are_part_of_the_corpus(tmp_path_factory):
    root = tmp_path_factory.mktemp("vcs")
    (root / ".git").mkdir()
    (root / ".git" / "hooks.txt").write_text("# pre-commit hook\nmake lint\n", encoding="utf-8")
    assert titles(SnipConfig(root=root), Query("hooks")) == ["# pre-commit hook"]
