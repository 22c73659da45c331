"""Thin git wrapper: stage, detect changes, commit, and push"""

import logging
import shlex
import subprocess
from pathlib import Path

from sitepub.core.errors import VcsError
from sitepub.core.models import Remote, Revision


logger = logging.getLogger(__name__)


class Git:
    """Runs git subcommands inside one working copy."""

    def __init__(self, repo_dir: Path, executable: str = "git"):
        self.repo_dir = Path(repo_dir)
        self.executable = executable

    def run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        """Run git with args; raise VcsError on non-zero exit when check is set."""
        cmd = [self.executable, *args]
        logger.debug("$ %s", shlex.join(cmd))
        try:
            proc = subprocess.run(cmd, cwd=str(self.repo_dir), capture_output=True, text=True, check=False)
        except OSError as e:
            raise VcsError(cmd, -1, str(e)) from e
        if check and proc.returncode != 0:
            raise VcsError(cmd, proc.returncode, proc.stdout + proc.stderr)
        return proc

    def stage_all(self, exclude: tuple[str, ...] = ()) -> None:
        """Stage every change in the working copy except the exclude pathspecs."""
        self.run("add", "--all", "--", ".", *(f":(exclude){p}" for p in exclude))

    def has_staged_changes(self) -> bool:
        """True if the index differs from HEAD (or from the empty tree before the first commit)."""
        proc = self.run("diff", "--cached", "--quiet", check=False)
        if proc.returncode not in (0, 1):
            raise VcsError([self.executable, "diff", "--cached", "--quiet"], proc.returncode, proc.stderr)
        return proc.returncode == 1

    def commit(self, message: str) -> Revision:
        self.run("commit", "--quiet", "-m", message)
        return Revision(sha=self.head(), message=message)

    def head(self) -> str:
        return self.run("rev-parse", "HEAD").stdout.strip()

    def push(self, remote: Remote) -> str:
        """Push HEAD to remote.branch, or the remote.prefix subtree when set.

        Never forces, so a non-fast-forward update is rejected by git.
        """
        if remote.prefix:
            proc = self.run("subtree", "push", f"--prefix={remote.prefix}", remote.name, remote.branch)
        else:
            proc = self.run("push", remote.name, f"HEAD:refs/heads/{remote.branch}")
        return proc.stdout + proc.stderr
