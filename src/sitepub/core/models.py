"""Data models for remotes, revisions, and publish-cycle results"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, model_validator


class Remote(BaseModel):
    """A named push target: a branch on a git remote, optionally a subtree of the repo."""
    name: str
    branch: str
    prefix: Optional[str] = None    # subtree path pushed instead of the whole tree

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return cls.parse_target(data)
        return data

    @staticmethod
    def parse_target(text: str) -> dict[str, Optional[str]]:
        """Split 'remote/branch' or 'prefix:remote/branch' into model fields."""
        prefix = None
        target = text.strip()
        if ":" in target:
            prefix, target = target.split(":", 1)
            prefix = prefix.strip() or None
        name, sep, branch = target.partition("/")
        if not sep or not name or not branch:
            raise ValueError(f"Invalid remote '{text}': expected 'remote/branch' or 'prefix:remote/branch'")
        return {"name": name, "branch": branch, "prefix": prefix}

    def __str__(self) -> str:
        target = f"{self.name}/{self.branch}"
        return f"{self.prefix}:{target}" if self.prefix else target


@dataclass(frozen=True)
class ContentDocument:
    """A source document: path relative to the content root, metadata header, and body."""
    path:     Path
    metadata: dict[str, Any]
    body:     str


@dataclass(frozen=True)
class Revision:
    """An immutable commit created by a snapshot."""
    sha:     str
    message: str


class StepStatus(str, Enum):
    ok = "ok"
    skipped = "skipped"
    failed = "failed"


@dataclass
class StepResult:
    """Outcome of one pipeline step; error is set only when status is failed or skipped."""
    step:   str
    status: StepStatus
    detail: str = ""
    error:  Optional[Exception] = None


@dataclass
class PushResult:
    remote: Remote
    ok:     bool
    error:  Optional[Exception] = None


@dataclass
class CycleReport:
    """Ordered step results plus per-remote push outcomes for one publish cycle."""
    steps:    list[StepResult] = field(default_factory=list)
    pushes:   list[PushResult] = field(default_factory=list)
    revision: Optional[Revision] = None

    @property
    def failed_step(self) -> Optional[StepResult]:
        return next((s for s in self.steps if s.status == StepStatus.failed), None)

    @property
    def no_changes(self) -> bool:
        return any(s.step == "snapshot" and s.status == StepStatus.skipped for s in self.steps)

    @property
    def rejected(self) -> list[PushResult]:
        return [p for p in self.pushes if not p.ok]

    @property
    def exit_code(self) -> int:
        """0 on success or no-op, 1 on a fatal step failure, 2 when any remote rejected."""
        if self.failed_step is not None:
            return 1
        if self.rejected:
            return 2
        return 0
