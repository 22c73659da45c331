"""Content tree discovery, front-matter parsing, and metadata checks"""

import logging
import re
import tomllib
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from sitepub.core.models import ContentDocument


logger = logging.getLogger(__name__)

YAML_FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*(?:\n|$)', re.DOTALL)
TOML_FRONTMATTER_RE = re.compile(r'^\+\+\+\s*\n(.*?)\n\+\+\+\s*(?:\n|$)', re.DOTALL)
MD_EXTENSIONS = {'.md', '.mdx', '.markdown'}


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with a YAML (---) or TOML (+++) header removed."""
    if m := YAML_FRONTMATTER_RE.match(text):
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
    elif m := TOML_FRONTMATTER_RE.match(text):
        try:
            fm = tomllib.loads(m.group(1))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML frontmatter: {e}") from e
    else:
        return {}, text
    if not isinstance(fm, dict):
        raise ValueError(f"Invalid frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm, text[m.end():]


def discover_files(path: Path) -> list[Path]:
    """Return sorted markdown files under path, or [path] if a single markdown file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    if not path.is_dir():
        return []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix in MD_EXTENSIONS)


def parse_file(path: Path, root: Path) -> ContentDocument:
    """Parse one source document; path in the result is relative to root."""
    raw = path.read_text(encoding='utf-8')
    metadata, body = _strip_frontmatter(raw)
    rel = path.relative_to(root) if path.is_relative_to(root) else path
    return ContentDocument(path=rel, metadata=metadata, body=body)


def _is_blank(body: str) -> bool:
    return not MarkdownIt("commonmark").parse(body)


def check_tree(root: Path, required: list[str]) -> list[tuple[Path, str]]:
    """Lint documents under root. Returns (relative_path, problem) pairs; empty when clean.

    Flags unparseable front matter, missing required keys, and empty bodies.
    """
    problems: list[tuple[Path, str]] = []
    for p in discover_files(root):
        rel = p.relative_to(root) if p.is_relative_to(root) else p
        try:
            doc = parse_file(p, root)
        except (ValueError, UnicodeDecodeError) as e:
            problems.append((rel, str(e)))
            continue
        for key in required:
            if doc.metadata.get(key) in (None, ""):
                problems.append((rel, f"missing '{key}'"))
        if _is_blank(doc.body):
            problems.append((rel, "empty body"))
    logger.debug("Checked %s: %d problem(s)", root, len(problems))
    return problems
