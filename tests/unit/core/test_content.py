"""Unit tests for core/content.py"""

from pathlib import Path

import pytest

from sitepub.core.content import _strip_frontmatter, check_tree, discover_files, parse_file
from sitepub.core.models import ContentDocument


def test_strip_frontmatter_with_yaml():
    """_strip_frontmatter extracts a YAML header and returns the body."""
    fm, body = _strip_frontmatter("---\ntitle: Hello\ntags: [test]\n---\n# Body\n")
    assert fm == {"title": "Hello", "tags": ["test"]}
    assert body == "# Body\n"


def test_strip_frontmatter_with_toml():
    """_strip_frontmatter also reads Hugo-style TOML headers."""
    fm, body = _strip_frontmatter('+++\ntitle = "Hello"\ntags = ["test"]\n+++\nBody\n')
    assert fm == {"title": "Hello", "tags": ["test"]}
    assert body == "Body\n"


def test_strip_frontmatter_no_frontmatter():
    text = "# No frontmatter\n"
    assert _strip_frontmatter(text) == ({}, text)


@pytest.mark.parametrize("text,match", [
    ("---\ntitle: [unclosed\n---\nBody\n", "Invalid YAML"),
    ("+++\ntitle = \n+++\nBody\n", "Invalid TOML"),
    ("---\n- a\n- b\n---\nBody\n", "expected a mapping"),
])
def test_strip_frontmatter_invalid(text, match):
    with pytest.raises(ValueError, match=match):
        _strip_frontmatter(text)


def test_discover_files_sorted_and_filtered(tmp_path):
    """discover_files finds markdown recursively in path order and skips other files."""
    (tmp_path / "b.md").write_text("b")
    (tmp_path / "notes.txt").write_text("text")
    sub = tmp_path / "a"
    sub.mkdir()
    (sub / "post.mdx").write_text("a")
    assert discover_files(tmp_path) == [sub / "post.mdx", tmp_path / "b.md"]


def test_discover_files_missing_dir(tmp_path):
    assert discover_files(tmp_path / "absent") == []


def test_parse_file_relative_path(tmp_path):
    """parse_file returns a ContentDocument whose path is relative to the content root."""
    sub = tmp_path / "posts"
    sub.mkdir()
    f = sub / "hello.md"
    f.write_text("---\ntitle: Hello\n---\nHi.\n")
    doc = parse_file(f, tmp_path)
    assert doc == ContentDocument(path=Path("posts/hello.md"), metadata={"title": "Hello"}, body="Hi.\n")


def test_check_tree_clean(tmp_path):
    (tmp_path / "ok.md").write_text("---\ntitle: Fine\n---\nBody text.\n")
    assert check_tree(tmp_path, ["title"]) == []


def test_check_tree_reports_problems(tmp_path):
    """check_tree flags missing keys, empty bodies, and unparseable headers per file."""
    (tmp_path / "untitled.md").write_text("---\ntags: [x]\n---\nBody.\n")
    (tmp_path / "empty.md").write_text("---\ntitle: Empty\n---\n\n   \n")
    (tmp_path / "broken.md").write_text("---\ntitle: [oops\n---\nBody.\n")
    problems = check_tree(tmp_path, ["title"])
    assert (Path("untitled.md"), "missing 'title'") in problems
    assert (Path("empty.md"), "empty body") in problems
    assert any(p == Path("broken.md") and "Invalid YAML" in msg for p, msg in problems)


def test_check_tree_blank_required_value(tmp_path):
    (tmp_path / "post.md").write_text("---\ntitle: ''\ndate: 2026-10-17\n---\nBody.\n")
    assert check_tree(tmp_path, ["title", "date"]) == [(Path("post.md"), "missing 'title'")]
