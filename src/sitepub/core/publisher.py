"""Publisher: clean, build, snapshot, and publish steps plus the ordered publish cycle"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from sitepub.config import Settings
from sitepub.core.errors import (
    BuildError,
    CleanError,
    NoChangesError,
    PublishError,
    RemoteRejectedError,
    SnapshotError,
    VcsError,
)
from sitepub.core.generator import generator_argv, run_generator
from sitepub.core.models import CycleReport, PushResult, Remote, Revision, StepResult, StepStatus
from sitepub.core.utils.hashing import tree_digest
from sitepub.core.utils.timestamp import release_message
from sitepub.core.vcs import Git


logger = logging.getLogger(__name__)


class Publisher:
    """Owns one working copy and its output directory for the length of a run."""

    def __init__(self, settings: Settings, git: Optional[Git] = None):
        self.settings = settings
        self.git = git or Git(settings.repo_path)

    def _check_clean_target(self, output: Path) -> None:
        repo = self.settings.repo_path.resolve()
        content = self.settings.content_path.resolve()
        if output == repo or repo.is_relative_to(output):
            raise CleanError(f"Refusing to clean {output}: it contains the repository root")
        if content == output or content.is_relative_to(output):
            raise CleanError(f"Refusing to clean {output}: it contains the content directory {content}")
        git_dir = repo / ".git"
        if output == git_dir or output.is_relative_to(git_dir):
            raise CleanError(f"Refusing to clean {output}: it is inside the git directory")
        if self.settings.lock_path.resolve().is_relative_to(output):
            raise CleanError(f"Refusing to clean {output}: it contains the lock file")
        if output.exists() and not output.is_dir():
            raise CleanError(f"Refusing to clean {output}: not a directory")

    def clean(self) -> int:
        """Remove everything inside the output directory. Returns the number of entries removed.

        An absent or already-empty output directory is a no-op.
        """
        output = self.settings.output_path.resolve()
        self._check_clean_target(output)
        if not output.exists():
            logger.info("Output directory %s absent; nothing to clean", output)
            return 0

        removed = 0
        try:
            for entry in sorted(output.iterdir()):
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
                removed += 1
        except OSError as e:
            raise CleanError(f"Could not clean {output}: {e}") from e
        logger.info("Cleaned %d entr%s from %s", removed, "y" if removed == 1 else "ies", output)
        return removed

    def build(self) -> str:
        """Run the generator over the content tree. Returns the output tree digest."""
        s = self.settings
        argv = generator_argv(s.generator_cmd, Path(s.content_dir), Path(s.output_dir))
        run_generator(argv, s.repo_path)
        try:
            digest = tree_digest(s.output_path)
        except OSError as e:
            raise BuildError(f"Could not read generated output {s.output_path}: {e}") from e
        logger.info("Built %s (digest %s)", s.output_path, digest[:12])
        return digest

    def _staging_excludes(self) -> tuple[str, ...]:
        """The lock file as a repo-relative pathspec, or nothing when it lives outside the repo."""
        repo = self.settings.repo_path.resolve()
        lock = self.settings.lock_path.resolve()
        if lock.is_relative_to(repo):
            return (lock.relative_to(repo).as_posix(),)
        return ()

    def snapshot(self, message: str) -> Revision:
        """Stage every change and commit it. Raises NoChangesError when nothing is staged."""
        try:
            self.git.stage_all(exclude=self._staging_excludes())
            if not self.git.has_staged_changes():
                raise NoChangesError("No changes since the last revision")
            revision = self.git.commit(message)
        except VcsError as e:
            raise SnapshotError(f"Snapshot failed: {e}\n{e.output}".rstrip()) from e
        logger.info("Created revision %s: %s", revision.sha[:12], message)
        return revision

    def publish(self, remotes: list[Remote]) -> list[PushResult]:
        """Push the latest revision to each remote in order; a rejection never stops the loop."""
        results = []
        for remote in remotes:
            try:
                output = self.git.push(remote)
            except VcsError as e:
                err = RemoteRejectedError(remote, diagnostics=e.output)
                logger.error("%s", err)
                logger.debug("git output:\n%s", e.output.rstrip())
                results.append(PushResult(remote=remote, ok=False, error=err))
            else:
                logger.info("Pushed to %s", remote)
                logger.debug("git output:\n%s", output.rstrip())
                results.append(PushResult(remote=remote, ok=True))
        return results

    def run_cycle(
        self,
        message: Optional[str] = None,
        remotes: Optional[list[Remote]] = None,
        push: Optional[bool] = None,
        ) -> CycleReport:
        """Clean -> Build -> Snapshot -> Publish, stopping at the first fatal step.

        NoChangesError skips Publish and still counts as success. Publish only runs
        when push is enabled and at least one remote is given.
        """
        s = self.settings
        message = message or release_message(s.message_template)
        remotes = s.remotes if remotes is None else remotes
        push = s.push if push is None else push
        report = CycleReport()

        # --- clean ---
        try:
            removed = self.clean()
        except CleanError as e:
            report.steps.append(StepResult("clean", StepStatus.failed, str(e), e))
            return report
        report.steps.append(StepResult("clean", StepStatus.ok, f"{removed} removed"))

        # --- build ---
        try:
            digest = self.build()
        except BuildError as e:
            report.steps.append(StepResult("build", StepStatus.failed, str(e), e))
            return report
        report.steps.append(StepResult("build", StepStatus.ok, digest))

        # --- snapshot ---
        try:
            report.revision = self.snapshot(message)
        except NoChangesError as e:
            report.steps.append(StepResult("snapshot", StepStatus.skipped, str(e), e))
            report.steps.append(StepResult("publish", StepStatus.skipped, "no new revision"))
            return report
        except PublishError as e:
            report.steps.append(StepResult("snapshot", StepStatus.failed, str(e), e))
            return report
        report.steps.append(StepResult("snapshot", StepStatus.ok, report.revision.sha))

        # --- publish ---
        if not push:
            report.steps.append(StepResult("publish", StepStatus.skipped, "push disabled"))
            return report
        if not remotes:
            report.steps.append(StepResult("publish", StepStatus.skipped, "no remotes configured"))
            return report
        report.pushes = self.publish(remotes)
        ok = sum(p.ok for p in report.pushes)
        report.steps.append(StepResult("publish", StepStatus.ok, f"{ok}/{len(report.pushes)} remotes"))
        return report
