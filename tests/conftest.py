"""Root test configuration: throwaway git working copies, bare remotes, and a stub generator"""

import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from sitepub.config import Settings


# Renders content/<name>.md to <output>/<name>/index.html; fails on a document without a title.
GENERATOR_SCRIPT = '''\
import sys
from pathlib import Path

content, output = Path(sys.argv[1]), Path(sys.argv[2])
output.mkdir(parents=True, exist_ok=True)
for src in sorted(content.rglob("*.md")):
    text = src.read_text()
    meta, body = {}, text
    if text.startswith("---\\n"):
        header, _, body = text[4:].partition("\\n---\\n")
        for line in header.splitlines():
            key, _, value = line.partition(":")
            meta[key.strip()] = value.strip()
    if "title" not in meta:
        print(f"ERROR {src}: front matter has no title", file=sys.stderr)
        sys.exit(3)
    dest = output / src.stem / "index.html"
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(f"<h1>{meta['title']}</h1>\\n<p>{meta.get('tags', '')}</p>\\n{body}")
'''

HELLO_MD = """\
---
title: Hello
tags: ["test"]
---

First post.
"""


def git(cwd: Path, *args: str) -> str:
    """Run git in cwd and return stdout; fail the test on error."""
    proc = subprocess.run(["git", *args], cwd=str(cwd), capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr
    return proc.stdout


def init_repo(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    git(path, "config", "user.email", "author@example.com")
    git(path, "config", "user.name", "Site Author")
    git(path, "config", "commit.gpgsign", "false")
    return path


@pytest.fixture(name="requires_git")
def requires_git_fixture():
    if shutil.which("git") is None:
        pytest.skip("git is not installed")


@pytest.fixture(name="site")
def site_fixture(tmp_path, requires_git):
    """A git working copy with one post and a stub generator; nothing committed yet."""
    repo = init_repo(tmp_path / "site")
    (repo / "content").mkdir()
    (repo / "content" / "hello.md").write_text(HELLO_MD)
    (repo / "gen.py").write_text(GENERATOR_SCRIPT)
    return repo


@pytest.fixture(name="origin")
def origin_fixture(tmp_path, site):
    """A bare repository registered as 'origin' on the site working copy."""
    bare = tmp_path / "origin.git"
    git(tmp_path, "init", "-q", "--bare", str(bare))
    git(site, "remote", "add", "origin", str(bare))
    return bare


@pytest.fixture(name="generator_cmd")
def generator_cmd_fixture():
    return f'"{sys.executable}" gen.py {{content}} {{output}}'


@pytest.fixture(name="settings")
def settings_fixture(site, generator_cmd):
    return Settings(repo_dir=str(site), generator_cmd=generator_cmd)


@pytest.fixture(name="run_git")
def run_git_fixture(requires_git):
    """The git() helper, for tests that inspect or mutate repositories directly."""
    return git
