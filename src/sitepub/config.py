"""Application configuration: settings schema and sitepub.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from sitepub.core.models import Remote


CONFIG_FILE = "sitepub.yaml"


class Settings(BaseModel):
    repo_dir:          str = Field(default=".",       description="Git working copy the pipeline operates in")
    content_dir:       str = Field(default="content", description="Source documents, relative to repo_dir")
    output_dir:        str = Field(default="public",  description="Generated site, relative to repo_dir; cleared every build")
    generator_cmd:     str = Field(default="hugo --destination {output}",
                                   description="Generator command line; {content} and {output} are substituted")
    message_template:  str = Field(default="RELEASE {timestamp}", description="Commit message; {timestamp} is substituted")
    remotes:           list[Remote] = Field(default_factory=list, description="Push targets, in push order")
    push:              bool = Field(default=False, description="Push after committing; off unless enabled")
    lock_file:         str = Field(default=".sitepub.lock", description="Advisory lock path, relative to repo_dir")
    required_metadata: list[str] = Field(default_factory=lambda: ["title"], description="Front-matter keys checked by 'check'")
    log_level:         str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$")

    @field_validator("message_template")
    @classmethod
    def _check_template(cls, value: str) -> str:
        """Only {timestamp} may appear; literal braces must be doubled."""
        try:
            value.format(timestamp="")
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            raise ValueError(f"message_template {value!r} may only use {{timestamp}}: {e!r}") from e
        return value

    @field_validator("remotes", "required_metadata", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> Any:
        """Accept comma-separated strings (env vars) for list fields."""
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    @property
    def repo_path(self) -> Path:
        return Path(self.repo_dir)

    @property
    def content_path(self) -> Path:
        return self.repo_path / self.content_dir

    @property
    def output_path(self) -> Path:
        return self.repo_path / self.output_dir

    @property
    def lock_path(self) -> Path:
        return self.repo_path / self.lock_file


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from sitepub.yaml, then SITEPUB_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"SITEPUB_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValueError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
