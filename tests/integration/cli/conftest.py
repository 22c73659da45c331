"""Shared fixtures for CLI integration tests"""

import logging

import pytest
import yaml
from typer.testing import CliRunner


@pytest.fixture(name="runner")
def runner_fixture():
    return CliRunner()


@pytest.fixture(name="project")
def project_fixture(site, generator_cmd, monkeypatch):
    """The site working copy as cwd, with a sitepub.yaml pointing at the stub generator."""
    for name in ("OUTPUT_DIR", "CONTENT_DIR", "REMOTES", "PUSH", "GENERATOR_CMD", "REPO_DIR"):
        monkeypatch.delenv(f"SITEPUB_{name}", raising=False)
    (site / "sitepub.yaml").write_text(yaml.safe_dump({"generator_cmd": generator_cmd}))
    monkeypatch.chdir(site)
    return site


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to CliRunner's captured streams once each test ends."""
    yield
    logger = logging.getLogger("sitepub")
    for h in list(logger.handlers):
        logger.removeHandler(h)
